"""Credential providers for git transport operations.

A provider turns a credential into git config entries scoped to a single git
invocation. The real gateway passes them through GIT_CONFIG_* environment
variables, so they are never persisted in a working copy and never appear in
process listings.
"""

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass

DEFAULT_TOKEN_USERNAME = "oauth2"


class GitAuth(ABC):
    """Produces the credential for one side (source or destination) of an operation."""

    @abstractmethod
    def produce_credential(self) -> dict[str, str]:
        """Return git config entries that authenticate a transport call."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Short, secret-free label for progress output."""
        ...


@dataclass(frozen=True)
class NoAuth(GitAuth):
    """Anonymous access."""

    def produce_credential(self) -> dict[str, str]:
        return {}

    @property
    def description(self) -> str:
        return "anonymous"


@dataclass(frozen=True)
class BasicAuth(GitAuth):
    """HTTP Basic credential: fixed username plus an opaque token."""

    username: str
    password: str

    def produce_credential(self) -> dict[str, str]:
        raw = f"{self.username}:{self.password}".encode()
        encoded = base64.b64encode(raw).decode("ascii")
        return {"http.extraHeader": f"Authorization: Basic {encoded}"}

    @property
    def description(self) -> str:
        return f"basic ({self.username})"

    def __repr__(self) -> str:
        return f"BasicAuth(username={self.username!r}, password='***')"


def auth_from_token(token: str | None, *, username: str = DEFAULT_TOKEN_USERNAME) -> GitAuth:
    """Build a provider from an optional personal access token.

    An empty or missing token means anonymous access.
    """
    if not token:
        return NoAuth()
    return BasicAuth(username=username, password=token)
