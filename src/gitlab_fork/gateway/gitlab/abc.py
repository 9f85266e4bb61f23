"""Abstract interface for the GitLab API calls the CLI needs.

Every call takes the token to use, since one command may act with several
identities (developer, production, admin).
"""

from abc import ABC, abstractmethod

from gitlab_fork.gateway.gitlab.types import (
    GitLabAPIError,
    GitLabProject,
    ProjectNotFound,
    Visibility,
)


class GitLab(ABC):
    """Abstract interface for GitLab operations."""

    @abstractmethod
    def list_group_projects(
        self, token: str, group: str, *, visibility: Visibility | None
    ) -> list[GitLabProject] | GitLabAPIError:
        """List every project of a group, subgroups included, across all pages.

        Args:
            token: Personal access token
            group: Group id or full path
            visibility: Only return projects with this visibility, or None for all
        """
        ...

    @abstractmethod
    def find_project_in_group(
        self, token: str, group: str, name: str
    ) -> GitLabProject | ProjectNotFound | GitLabAPIError:
        """Find the project named exactly `name` in a group, subgroups included."""
        ...

    @abstractmethod
    def fork_project(
        self, token: str, project_id: int, namespace: str
    ) -> GitLabProject | GitLabAPIError:
        """Fork a project into `namespace` (full path) and return the new project."""
        ...
