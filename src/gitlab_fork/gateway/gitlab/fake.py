"""In-memory fake of the GitLab gateway for testing."""

from gitlab_fork.gateway.gitlab.abc import GitLab
from gitlab_fork.gateway.gitlab.types import (
    ForkParent,
    GitLabAPIError,
    GitLabProject,
    ProjectNotFound,
    Visibility,
)


class FakeGitLab(GitLab):
    """In-memory fake of GitLab.

    Constructor Injection:
    ---------------------
    - group_projects: Mapping of group path -> projects in it (subgroups included)
    - group_errors: Mapping of group path -> error returned for any listing
    - fork_error: Error returned by fork_project()
    - next_project_id: Id given to the next fork

    Mutation Tracking:
    -----------------
    - listed_groups: (token, group) pairs queried
    - forks: (token, project_id, namespace) tuples
    """

    def __init__(
        self,
        *,
        group_projects: dict[str, list[GitLabProject]] | None = None,
        group_errors: dict[str, GitLabAPIError] | None = None,
        fork_error: GitLabAPIError | None = None,
        next_project_id: int = 1000,
    ) -> None:
        self._group_projects = {group: list(p) for group, p in (group_projects or {}).items()}
        self._group_errors = group_errors or {}
        self._fork_error = fork_error
        self._next_project_id = next_project_id

        self._listed_groups: list[tuple[str, str]] = []
        self._forks: list[tuple[str, int, str]] = []

    def list_group_projects(
        self, token: str, group: str, *, visibility: Visibility | None
    ) -> list[GitLabProject] | GitLabAPIError:
        self._listed_groups.append((token, group))
        if group in self._group_errors:
            return self._group_errors[group]
        projects = self._group_projects.get(group, [])
        if visibility is None:
            return list(projects)
        return [p for p in projects if p.visibility == visibility]

    def find_project_in_group(
        self, token: str, group: str, name: str
    ) -> GitLabProject | ProjectNotFound | GitLabAPIError:
        projects = self.list_group_projects(token, group, visibility=None)
        if isinstance(projects, GitLabAPIError):
            return projects
        for project in projects:
            if project.name == name:
                return project
        return ProjectNotFound(group=group, name=name)

    def fork_project(
        self, token: str, project_id: int, namespace: str
    ) -> GitLabProject | GitLabAPIError:
        self._forks.append((token, project_id, namespace))
        if self._fork_error is not None:
            return self._fork_error

        source = self._find_by_id(project_id)
        if source is None:
            return GitLabAPIError(
                operation=f"fork project {project_id} into '{namespace}'",
                status_code=404,
                message='{"message":"404 Project Not Found"}',
            )
        forked = GitLabProject(
            id=self._next_project_id,
            name=source.name,
            path=source.path,
            name_with_namespace=f"{namespace} / {source.name}",
            path_with_namespace=f"{namespace}/{source.path}",
            visibility=source.visibility,
            web_url=f"https://gitlab.example.com/{namespace}/{source.path}",
            forked_from=ForkParent(id=source.id, name_with_namespace=source.name_with_namespace),
        )
        self._next_project_id += 1
        self._group_projects.setdefault(namespace, []).append(forked)
        return forked

    def _find_by_id(self, project_id: int) -> GitLabProject | None:
        for projects in self._group_projects.values():
            for project in projects:
                if project.id == project_id:
                    return project
        return None

    @property
    def listed_groups(self) -> list[tuple[str, str]]:
        return list(self._listed_groups)

    @property
    def forks(self) -> list[tuple[str, int, str]]:
        """List of (token, project_id, namespace) tuples."""
        return list(self._forks)
