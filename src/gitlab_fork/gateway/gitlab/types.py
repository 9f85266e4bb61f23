"""Types returned by the GitLab gateway."""

from dataclasses import dataclass
from typing import Any, Literal

Visibility = Literal["public", "private", "internal"]

VISIBILITIES: tuple[Visibility, ...] = ("public", "private", "internal")


@dataclass(frozen=True)
class ForkParent:
    """The project a fork was created from."""

    id: int
    name_with_namespace: str


@dataclass(frozen=True)
class GitLabProject:
    """Subset of a GitLab project resource used by the CLI."""

    id: int
    name: str
    path: str
    name_with_namespace: str
    path_with_namespace: str
    visibility: str
    web_url: str
    forked_from: ForkParent | None = None


def project_from_api(data: dict[str, Any]) -> GitLabProject:
    """Build a GitLabProject from a decoded API resource."""
    parent_data = data.get("forked_from_project")
    forked_from = None
    if parent_data:
        forked_from = ForkParent(
            id=int(parent_data["id"]),
            name_with_namespace=str(parent_data.get("name_with_namespace", "")),
        )
    return GitLabProject(
        id=int(data["id"]),
        name=str(data.get("name", "")),
        path=str(data.get("path", "")),
        name_with_namespace=str(data.get("name_with_namespace", "")),
        path_with_namespace=str(data.get("path_with_namespace", "")),
        visibility=str(data.get("visibility", "")),
        web_url=str(data.get("web_url", "")),
        forked_from=forked_from,
    )


@dataclass(frozen=True)
class GitLabAPIError:
    """A GitLab API call failed.

    Attributes:
        operation: What was attempted, e.g. "list projects of group 'dev'"
        status_code: HTTP status, or None when no response was received
        message: Response body or transport error text
    """

    operation: str
    status_code: int | None
    message: str

    @property
    def error_type(self) -> str:
        return "gitlab-api-error"

    def __str__(self) -> str:
        status = f"HTTP {self.status_code}" if self.status_code is not None else "no response"
        return f"Failed to {self.operation} ({status}): {self.message}"


@dataclass(frozen=True)
class ProjectNotFound:
    """No project with that exact name exists in the group (subgroups included)."""

    group: str
    name: str

    @property
    def error_type(self) -> str:
        return "project-not-found"
