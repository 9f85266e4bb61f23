"""GitLab REST API (v4) client using urllib."""

import json
import logging
import ssl
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Iterator
from email.message import Message
from typing import Any

from gitlab_fork.gateway.gitlab.abc import GitLab
from gitlab_fork.gateway.gitlab.types import (
    GitLabAPIError,
    GitLabProject,
    ProjectNotFound,
    Visibility,
    project_from_api,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://gitlab.com"

PER_PAGE = 100

# Seconds to wait for a single API response.
REQUEST_TIMEOUT = 30


class _RequestFailed(Exception):
    def __init__(self, *, status_code: int | None, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class RealGitLab(GitLab):
    """GitLab client for one instance.

    Supports listing group projects with automatic pagination (X-Next-Page)
    and forking projects.
    """

    def __init__(self, *, base_url: str = DEFAULT_BASE_URL, insecure: bool = False) -> None:
        self._api_url = f"{base_url.rstrip('/')}/api/v4"
        self._ssl_context: ssl.SSLContext | None = None
        if insecure:
            context = ssl.create_default_context()
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
            self._ssl_context = context

    def list_group_projects(
        self, token: str, group: str, *, visibility: Visibility | None
    ) -> list[GitLabProject] | GitLabAPIError:
        operation = f"list projects of group '{group}'"
        try:
            return [
                project
                for page in self._iter_group_project_pages(token, group, visibility=visibility)
                for project in page
            ]
        except _RequestFailed as e:
            return GitLabAPIError(operation=operation, status_code=e.status_code, message=e.message)

    def find_project_in_group(
        self, token: str, group: str, name: str
    ) -> GitLabProject | ProjectNotFound | GitLabAPIError:
        operation = f"search group '{group}' for project '{name}'"
        try:
            for page in self._iter_group_project_pages(token, group, visibility=None):
                for project in page:
                    if project.name == name:
                        return project
        except _RequestFailed as e:
            return GitLabAPIError(operation=operation, status_code=e.status_code, message=e.message)
        return ProjectNotFound(group=group, name=name)

    def fork_project(
        self, token: str, project_id: int, namespace: str
    ) -> GitLabProject | GitLabAPIError:
        operation = f"fork project {project_id} into '{namespace}'"
        try:
            data, status, _ = self._request(
                "POST",
                f"/projects/{project_id}/fork",
                token=token,
                body={"namespace_path": namespace},
            )
        except _RequestFailed as e:
            return GitLabAPIError(operation=operation, status_code=e.status_code, message=e.message)
        if status != 201:
            return GitLabAPIError(
                operation=operation,
                status_code=status,
                message="expected 201 Created",
            )
        return project_from_api(data)

    def _iter_group_project_pages(
        self, token: str, group: str, *, visibility: Visibility | None
    ) -> Iterator[list[GitLabProject]]:
        params: dict[str, str] = {"per_page": str(PER_PAGE), "include_subgroups": "true"}
        if visibility is not None:
            params["visibility"] = visibility
        path = f"/groups/{urllib.parse.quote(group, safe='')}/projects"

        page: str | None = "1"
        while page:
            params["page"] = page
            data, _, headers = self._request("GET", path, token=token, params=params)
            yield [project_from_api(item) for item in data]
            page = headers.get("X-Next-Page") or None

    def _request(
        self,
        method: str,
        path: str,
        *,
        token: str,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> tuple[Any, int, Message]:
        url = f"{self._api_url}{path}"
        if params:
            url += f"?{urllib.parse.urlencode(params)}"

        headers = {"PRIVATE-TOKEN": token, "Accept": "application/json"}
        data: bytes | None = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        request = urllib.request.Request(url, data=data, headers=headers, method=method)
        logger.debug("%s %s", method, url)
        try:
            with urllib.request.urlopen(
                request, timeout=REQUEST_TIMEOUT, context=self._ssl_context
            ) as response:
                raw = response.read().decode("utf-8")
                return (json.loads(raw) if raw else None), response.status, response.headers
        except urllib.error.HTTPError as e:
            raw = e.read().decode("utf-8") if e.fp else ""
            raise _RequestFailed(status_code=e.code, message=raw or str(e.reason)) from e
        except urllib.error.URLError as e:
            raise _RequestFailed(status_code=None, message=str(e.reason)) from e
        except TimeoutError as e:
            raise _RequestFailed(
                status_code=None, message=f"timed out after {REQUEST_TIMEOUT}s"
            ) from e
