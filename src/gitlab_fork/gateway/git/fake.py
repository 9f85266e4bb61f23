"""In-memory fake implementation of the git gateway for testing.

The fake models a set of remote repositories (URL -> {full ref name: sha}) and
local working copies (path -> refs + configured remotes). Clones copy refs
from a remote into a new working copy, pushes update the remote mapping, so a
whole promotion can run against it and tests can assert on the final remote
state as well as on recorded mutations.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

from gitlab_fork.gateway.git.abc import Git
from gitlab_fork.gateway.git.auth import GitAuth
from gitlab_fork.gateway.git.types import (
    BRANCH_PREFIX,
    TAG_PREFIX,
    CloneError,
    CloneResult,
    PushError,
    PushResult,
    RemoteRef,
    RemoteRefsError,
)


class ClonedRef(NamedTuple):
    """Record of one clone_single_ref() call."""

    url: str
    ref: str
    local_ref: str
    destination: Path
    depth: int


class PushedRefspec(NamedTuple):
    """Record of one push attempt."""

    remote: str
    refspec: str
    auth: GitAuth


@dataclass
class _FakeWorkingCopy:
    refs: dict[str, str] = field(default_factory=dict)
    remotes: dict[str, str] = field(default_factory=dict)


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    Constructor Injection:
    ---------------------
    - remotes: Mapping of URL -> {full ref name: commit sha}
    - unreachable_urls: Mapping of URL -> error message for any remote call
    - existing_repositories: Mapping of path -> local refs, for working copies
      that already exist before the operation runs (the directories must exist)
    - clone_error: Message returned as CloneError by clone_single_ref()
    - push_errors: Mapping of destination ref -> PushError returned without
      changing the remote
    - acknowledgement_errors: Mapping of destination ref -> message; the push is
      applied to the remote but reported as a PushError (simulates a transport
      that misreports a successful push)
    - delete_branch_raises: Exception raised by delete_branch()
    - delete_remote_branch_error: PushError returned by delete_remote_branch()

    Mutation Tracking:
    -----------------
    listed_urls, cloned_refs, created_branches, deleted_branches, added_remotes,
    updated_remotes, push_attempts, deleted_remote_branches
    """

    def __init__(
        self,
        *,
        remotes: dict[str, dict[str, str]] | None = None,
        unreachable_urls: dict[str, str] | None = None,
        existing_repositories: dict[Path, dict[str, str]] | None = None,
        clone_error: str | None = None,
        push_errors: dict[str, PushError] | None = None,
        acknowledgement_errors: dict[str, str] | None = None,
        delete_branch_raises: Exception | None = None,
        delete_remote_branch_error: PushError | None = None,
    ) -> None:
        self._remotes = {url: dict(refs) for url, refs in (remotes or {}).items()}
        self._unreachable_urls = unreachable_urls or {}
        self._working_copies = {
            path: _FakeWorkingCopy(refs=dict(refs))
            for path, refs in (existing_repositories or {}).items()
        }
        self._clone_error = clone_error
        self._push_errors = push_errors or {}
        self._acknowledgement_errors = acknowledgement_errors or {}
        self._delete_branch_raises = delete_branch_raises
        self._delete_remote_branch_error = delete_remote_branch_error

        self._listed_urls: list[str] = []
        self._cloned_refs: list[ClonedRef] = []
        self._created_branches: list[tuple[Path, str, str]] = []
        self._deleted_branches: list[tuple[Path, str]] = []
        self._added_remotes: list[tuple[Path, str, str]] = []
        self._updated_remotes: list[tuple[Path, str, str]] = []
        self._push_attempts: list[PushedRefspec] = []
        self._deleted_remote_branches: list[tuple[str, str]] = []

    # ============================================================================
    # Remote Operations
    # ============================================================================

    def list_remote_refs(self, url: str, *, auth: GitAuth) -> list[RemoteRef] | RemoteRefsError:
        self._listed_urls.append(url)
        if url in self._unreachable_urls:
            return RemoteRefsError(url=url, message=self._unreachable_urls[url])
        refs = self._remotes.get(url)
        if refs is None:
            return RemoteRefsError(url=url, message=f"repository '{url}' not found")
        return [RemoteRef(name=name, sha=sha, peeled=False) for name, sha in refs.items()]

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
        self._cloned_refs.append(ClonedRef(url, ref, local_ref, destination, depth))
        if self._clone_error is not None:
            return CloneError(message=self._clone_error)
        if url in self._unreachable_urls:
            return CloneError(message=self._unreachable_urls[url])

        # Only the exact ref is fetched, as with `git fetch origin +<ref>:<local_ref>`
        remote_refs = self._remotes.get(url, {})
        if ref not in remote_refs:
            return CloneError(message=f"fatal: couldn't find remote ref {ref}")
        working_copy = _FakeWorkingCopy(
            refs={local_ref: remote_refs[ref]}, remotes={"origin": url}
        )

        destination.mkdir(parents=True, exist_ok=True)
        self._working_copies[destination] = working_copy
        return CloneResult(path=str(destination))

    def push_refspec(
        self, repo_root: Path, remote: str, refspec: str, *, auth: GitAuth
    ) -> PushResult | PushError:
        self._push_attempts.append(PushedRefspec(remote, refspec, auth))
        source, _, destination = refspec.partition(":")
        if destination in self._push_errors:
            return self._push_errors[destination]

        working_copy = self._working_copies.get(repo_root)
        if working_copy is None or remote not in working_copy.remotes:
            return PushError(
                message=f"'{remote}' does not appear to be a git repository",
                rejection_reason=None,
            )
        url = working_copy.remotes[remote]
        if url in self._unreachable_urls:
            return PushError(message=self._unreachable_urls[url], rejection_reason=None)
        remote_refs = self._remotes.setdefault(url, {})

        if not source:
            if destination not in remote_refs:
                return PushError(
                    message=f"unable to delete '{destination}': remote ref does not exist",
                    rejection_reason=None,
                )
            del remote_refs[destination]
            return PushResult(up_to_date=False)

        sha = self._resolve(working_copy, source)
        if sha is None:
            return PushError(
                message=f"src refspec {source} does not match any", rejection_reason=None
            )

        existing = remote_refs.get(destination)
        if existing == sha:
            return PushResult(up_to_date=True)
        if existing is not None:
            reason = "already exists" if destination.startswith(TAG_PREFIX) else "non-fast-forward"
            return PushError(
                message=f"! [rejected] {source} -> {destination} ({reason})",
                rejection_reason=reason,
            )

        remote_refs[destination] = sha
        if destination in self._acknowledgement_errors:
            return PushError(
                message=self._acknowledgement_errors[destination], rejection_reason=None
            )
        return PushResult(up_to_date=False)

    def delete_remote_branch(
        self, repo_root: Path, remote: str, branch: str, *, auth: GitAuth
    ) -> PushResult | PushError:
        if self._delete_remote_branch_error is not None:
            return self._delete_remote_branch_error
        result = self.push_refspec(repo_root, remote, f":{BRANCH_PREFIX}{branch}", auth=auth)
        if isinstance(result, PushResult):
            self._deleted_remote_branches.append((remote, branch))
        return result

    # ============================================================================
    # Local Operations
    # ============================================================================

    def is_repository(self, path: Path) -> bool:
        return path in self._working_copies and path.is_dir()

    def resolve_commit(self, repo_root: Path, rev: str) -> str | None:
        working_copy = self._working_copies.get(repo_root)
        if working_copy is None:
            return None
        return self._resolve(working_copy, rev)

    def create_branch(self, repo_root: Path, branch: str, start_point: str) -> None:
        working_copy = self._require_working_copy(repo_root)
        sha = self._resolve(working_copy, start_point)
        if sha is None:
            raise RuntimeError(f"Failed to create branch '{branch}': not a valid object name")
        working_copy.refs[f"{BRANCH_PREFIX}{branch}"] = sha
        self._created_branches.append((repo_root, branch, start_point))

    def delete_branch(self, repo_root: Path, branch: str) -> None:
        if self._delete_branch_raises is not None:
            raise self._delete_branch_raises
        working_copy = self._require_working_copy(repo_root)
        working_copy.refs.pop(f"{BRANCH_PREFIX}{branch}", None)
        self._deleted_branches.append((repo_root, branch))

    def get_remote_url(self, repo_root: Path, remote: str) -> str | None:
        working_copy = self._working_copies.get(repo_root)
        if working_copy is None:
            return None
        return working_copy.remotes.get(remote)

    def add_remote(self, repo_root: Path, remote: str, url: str) -> None:
        working_copy = self._require_working_copy(repo_root)
        if remote in working_copy.remotes:
            raise RuntimeError(f"Failed to add remote '{remote}': remote already exists")
        working_copy.remotes[remote] = url
        self._added_remotes.append((repo_root, remote, url))

    def set_remote_url(self, repo_root: Path, remote: str, url: str) -> None:
        working_copy = self._require_working_copy(repo_root)
        working_copy.remotes[remote] = url
        self._updated_remotes.append((repo_root, remote, url))

    # ============================================================================
    # Helpers
    # ============================================================================

    def _require_working_copy(self, repo_root: Path) -> _FakeWorkingCopy:
        working_copy = self._working_copies.get(repo_root)
        if working_copy is None:
            raise RuntimeError(f"not a git repository: {repo_root}")
        return working_copy

    @staticmethod
    def _resolve(working_copy: _FakeWorkingCopy, rev: str) -> str | None:
        for candidate in (rev, f"{BRANCH_PREFIX}{rev}", f"{TAG_PREFIX}{rev}"):
            if candidate in working_copy.refs:
                return working_copy.refs[candidate]
        if rev in working_copy.refs.values():
            return rev
        return None

    # ============================================================================
    # State Inspection and Mutation Tracking Properties
    # ============================================================================

    def remote_refs(self, url: str) -> dict[str, str]:
        """Current refs of a fake remote (copy)."""
        return dict(self._remotes.get(url, {}))

    def local_refs(self, repo_root: Path) -> dict[str, str]:
        """Current refs of a fake working copy (copy)."""
        working_copy = self._working_copies.get(repo_root)
        if working_copy is None:
            return {}
        return dict(working_copy.refs)

    @property
    def listed_urls(self) -> list[str]:
        return list(self._listed_urls)

    @property
    def cloned_refs(self) -> list[ClonedRef]:
        return list(self._cloned_refs)

    @property
    def created_branches(self) -> list[tuple[Path, str, str]]:
        """List of (repo_root, branch, start_point) tuples."""
        return list(self._created_branches)

    @property
    def deleted_branches(self) -> list[tuple[Path, str]]:
        return list(self._deleted_branches)

    @property
    def added_remotes(self) -> list[tuple[Path, str, str]]:
        return list(self._added_remotes)

    @property
    def updated_remotes(self) -> list[tuple[Path, str, str]]:
        return list(self._updated_remotes)

    @property
    def push_attempts(self) -> list[PushedRefspec]:
        return list(self._push_attempts)

    @property
    def deleted_remote_branches(self) -> list[tuple[str, str]]:
        """List of (remote, branch) tuples."""
        return list(self._deleted_remote_branches)
