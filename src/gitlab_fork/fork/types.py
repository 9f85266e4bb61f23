"""Type definitions for GitLab project operations."""

from dataclasses import dataclass
from typing import Literal

from gitlab_fork.gateway.gitlab.types import GitLabProject, Visibility

ProjectErrorType = Literal[
    "namespace_missing",
    "cluster_unavailable",
    "token_unavailable",
    "project_not_found",
    "project_exists",
    "gitlab_api_error",
    "fork_not_found",
    "fork_forbidden",
    "fork_conflict",
]


@dataclass(frozen=True)
class TokenSettings:
    """Where tokens live in the cluster and how groups are laid out.

    Attributes:
        secret_name: Secret holding the GitLab token in every namespace
        secret_key: Key of the token inside that secret
        admin_namespace: Namespace whose token may list and fork anywhere
        models_group: Subgroup of a target group that receives forks
    """

    secret_name: str
    secret_key: str
    admin_namespace: str
    models_group: str

    def models_namespace(self, group: str) -> str:
        return f"{group}/{self.models_group}"


@dataclass(frozen=True)
class ForkRequest:
    """Fork `source_project` of `source_group` into `<target_group>/<models group>`."""

    source_group: str
    source_project: str
    target_group: str


@dataclass(frozen=True)
class ForkSuccess:
    """The project was forked."""

    source: GitLabProject
    fork: GitLabProject
    namespace: str


@dataclass(frozen=True)
class ProjectListing:
    """Projects found in a group."""

    group: str
    visibility: Visibility | None
    projects: tuple[GitLabProject, ...]


@dataclass(frozen=True)
class ProjectOperationError:
    """A fork or listing could not be completed."""

    error_type: ProjectErrorType
    message: str
    details: dict[str, str]
