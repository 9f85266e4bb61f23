"""Structural typing interface for promotion operations.

Any object exposing these read-only attributes can drive the pipeline, which
lets the CLI context (a frozen dataclass) be passed in directly and lets tests
pass a small bundle of fakes.
"""

from typing import Protocol

from gitlab_fork.gateway.git.abc import Git
from gitlab_fork.gateway.time.abc import Time


class PromoteKit(Protocol):
    """Dependencies of the promotion pipeline."""

    @property
    def git(self) -> Git:
        """Git operations interface."""
        ...

    @property
    def time(self) -> Time:
        """Clock used for per-run unique names."""
        ...
