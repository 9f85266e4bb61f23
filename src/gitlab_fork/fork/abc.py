"""Structural typing interface for GitLab project operations."""

from typing import Protocol

from gitlab_fork.gateway.gitlab.abc import GitLab
from gitlab_fork.gateway.secrets.abc import ClusterSecrets


class ProjectKit(Protocol):
    """Dependencies of the fork and list-projects operations."""

    @property
    def gitlab(self) -> GitLab:
        """GitLab API interface."""
        ...

    @property
    def secrets(self) -> ClusterSecrets:
        """Source of the per-namespace access tokens."""
        ...
