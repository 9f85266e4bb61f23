"""Abstract interface for the git operations used to promote references.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using the git CLI via subprocess
- FakeGit: In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from pathlib import Path

from gitlab_fork.gateway.git.auth import GitAuth
from gitlab_fork.gateway.git.types import (
    CloneError,
    CloneResult,
    PushError,
    PushResult,
    RemoteRef,
    RemoteRefsError,
)


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.

    Operations that talk to a remote take a GitAuth provider and return a
    discriminated union. Local operations raise RuntimeError on failure.
    """

    # ============================================================================
    # Remote Operations
    # ============================================================================

    @abstractmethod
    def list_remote_refs(self, url: str, *, auth: GitAuth) -> list[RemoteRef] | RemoteRefsError:
        """List every ref advertised by a remote without fetching objects.

        Peeled entries of annotated tags are included (flagged as peeled).

        Args:
            url: Repository URL
            auth: Credential provider for the remote

        Returns:
            The advertised refs, or RemoteRefsError if the remote could not be
            queried (unreachable, TLS failure, authentication rejected, timeout)
        """
        ...

    @abstractmethod
    def clone_single_ref(
        self,
        url: str,
        ref: str,
        local_ref: str,
        destination: Path,
        *,
        auth: GitAuth,
        depth: int,
    ) -> CloneResult | CloneError:
        """Fetch exactly one ref into a new repository, truncated to `depth` commits.

        The ref is fully qualified so a name used by both a tag and a branch
        cannot pick the wrong one.

        Args:
            url: Repository URL
            ref: Full ref name on the remote, e.g. "refs/tags/v1"
            local_ref: Full ref name that receives it locally
            destination: Directory to create the repository in (must not hold one)
            auth: Credential provider for the remote
            depth: History depth to request
        """
        ...

    @abstractmethod
    def push_refspec(
        self, repo_root: Path, remote: str, refspec: str, *, auth: GitAuth
    ) -> PushResult | PushError:
        """Push a single `<src>:<dst>` refspec to a configured remote.

        Args:
            repo_root: Local repository
            remote: Remote name
            refspec: Refspec to push (never forced)
            auth: Credential provider for the remote

        Returns:
            PushResult (with up_to_date=True when nothing had to be sent) or
            PushError carrying git's rejection reason when one was reported
        """
        ...

    @abstractmethod
    def delete_remote_branch(
        self, repo_root: Path, remote: str, branch: str, *, auth: GitAuth
    ) -> PushResult | PushError:
        """Delete a branch on a configured remote."""
        ...

    # ============================================================================
    # Local Operations
    # ============================================================================

    @abstractmethod
    def is_repository(self, path: Path) -> bool:
        """Return True if `path` is the top level of a git working copy."""
        ...

    @abstractmethod
    def resolve_commit(self, repo_root: Path, rev: str) -> str | None:
        """Resolve a revision to the commit it points at, or None if it does not exist."""
        ...

    @abstractmethod
    def create_branch(self, repo_root: Path, branch: str, start_point: str) -> None:
        """Create a local branch at `start_point` without checking it out."""
        ...

    @abstractmethod
    def delete_branch(self, repo_root: Path, branch: str) -> None:
        """Force-delete a local branch."""
        ...

    @abstractmethod
    def get_remote_url(self, repo_root: Path, remote: str) -> str | None:
        """Return the URL of a configured remote, or None if it is not configured."""
        ...

    @abstractmethod
    def add_remote(self, repo_root: Path, remote: str, url: str) -> None:
        """Configure a new remote."""
        ...

    @abstractmethod
    def set_remote_url(self, repo_root: Path, remote: str, url: str) -> None:
        """Change the URL of an existing remote."""
        ...
