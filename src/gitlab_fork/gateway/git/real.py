"""Production implementation of the git gateway using the git CLI."""

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from gitlab_fork.gateway.git.abc import Git
from gitlab_fork.gateway.git.auth import GitAuth
from gitlab_fork.gateway.git.types import (
    PEELED_SUFFIX,
    CloneError,
    CloneResult,
    PushError,
    PushResult,
    RemoteRef,
    RemoteRefsError,
)
from gitlab_fork.subprocess_utils import copied_env_for_git_subprocess, run_subprocess_with_context

logger = logging.getLogger(__name__)

# Default timeout in seconds for network-touching git operations.
DEFAULT_GIT_NETWORK_TIMEOUT = 120

_REASON_PATTERN = re.compile(r"\(([^)]*)\)\s*$")


@dataclass(frozen=True)
class PushRefStatus:
    """Status line reported by `git push --porcelain` for one ref.

    Attributes:
        flag: Single status character ("=" up to date, "!" rejected, "*" new, ...)
        summary: Summary column, e.g. "[rejected] (already exists)"
    """

    flag: str
    summary: str

    @property
    def reason(self) -> str | None:
        match = _REASON_PATTERN.search(self.summary)
        if match is None:
            return None
        return match.group(1)


def parse_ls_remote_output(output: str) -> list[RemoteRef]:
    """Parse `git ls-remote` output into RemoteRef entries.

    Each line is "<sha>\\t<ref>"; annotated tags are followed by a peeled
    "<ref>^{}" line, which is returned with peeled=True under the base name.
    """
    refs: list[RemoteRef] = []
    for line in output.splitlines():
        sha, sep, name = line.strip().partition("\t")
        if not sep or not name:
            continue
        peeled = name.endswith(PEELED_SUFFIX)
        if peeled:
            name = name[: -len(PEELED_SUFFIX)]
        refs.append(RemoteRef(name=name, sha=sha, peeled=peeled))
    return refs


def parse_push_ref_status(output: str, destination_ref: str) -> PushRefStatus | None:
    """Find the porcelain status line for `destination_ref` in `git push --porcelain` output.

    Porcelain lines look like "<flag>\\t<src>:<dst>\\t<summary>".
    """
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        _, _, dst = parts[1].partition(":")
        if dst == destination_ref:
            return PushRefStatus(flag=parts[0].strip() or " ", summary=parts[2].strip())
    return None


class RealGit(Git):
    """Real implementation of git operations using subprocess."""

    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_GIT_NETWORK_TIMEOUT,
        insecure: bool = False,
    ) -> None:
        """Initialize RealGit.

        Args:
            timeout_seconds: Limit applied to every network-touching git command
            insecure: Disable TLS certificate verification for remote calls
        """
        self._timeout = timeout_seconds
        self._insecure = insecure

    def _network_env(self, auth: GitAuth) -> dict[str, str]:
        config = auth.produce_credential()
        if self._insecure:
            config["http.sslVerify"] = "false"
        logger.debug("git transport config keys: %s", sorted(config))
        return copied_env_for_git_subprocess(config)

    def list_remote_refs(self, url: str, *, auth: GitAuth) -> list[RemoteRef] | RemoteRefsError:
        """List remote refs with `git ls-remote`."""
        try:
            result = run_subprocess_with_context(
                cmd=["git", "ls-remote", url],
                operation_context=f"list references of '{url}'",
                timeout=self._timeout,
                env=self._network_env(auth),
            )
        except RuntimeError as e:
            return RemoteRefsError(url=url, message=str(e))
        return parse_ls_remote_output(result.stdout)

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
        """Shallow fetch of one fully qualified ref into a fresh repository.

        `git clone --branch` prefers refs/heads/ over refs/tags/, so the
        repository is initialized and the exact ref fetched instead.
        """
        local_env = copied_env_for_git_subprocess()
        try:
            destination.mkdir(parents=True, exist_ok=True)
            run_subprocess_with_context(
                cmd=["git", "init", "--quiet", str(destination)],
                operation_context=f"initialize repository at {destination}",
                env=local_env,
            )
            run_subprocess_with_context(
                cmd=["git", "remote", "add", "origin", url],
                operation_context="add remote 'origin'",
                cwd=destination,
                env=local_env,
            )
            run_subprocess_with_context(
                cmd=[
                    "git",
                    "fetch",
                    "--depth",
                    str(depth),
                    "--no-tags",
                    "origin",
                    f"+{ref}:{local_ref}",
                ],
                operation_context=f"fetch '{ref}' from '{url}'",
                cwd=destination,
                timeout=self._timeout,
                env=self._network_env(auth),
            )
        except (RuntimeError, OSError) as e:
            return CloneError(message=str(e))
        return CloneResult(path=str(destination))

    def push_refspec(
        self, repo_root: Path, remote: str, refspec: str, *, auth: GitAuth
    ) -> PushResult | PushError:
        """Push one refspec and interpret git's porcelain status for it."""
        _, _, destination_ref = refspec.partition(":")
        cmd = ["git", "push", "--porcelain", "--verbose", remote, refspec]
        logger.debug("Running %s (cwd=%s)", " ".join(cmd), repo_root)
        try:
            result = subprocess.run(
                cmd,
                cwd=repo_root,
                capture_output=True,
                text=True,
                check=False,
                timeout=self._timeout,
                env=self._network_env(auth),
            )
        except subprocess.TimeoutExpired:
            return PushError(
                message=f"Timed out after {self._timeout}s pushing '{refspec}' to '{remote}'",
                rejection_reason=None,
            )

        status = parse_push_ref_status(result.stdout, destination_ref)
        if result.returncode == 0:
            if status is not None:
                return PushResult(up_to_date=status.flag == "=")
            return PushResult(up_to_date="Everything up-to-date" in result.stderr)

        detail = "\n".join(part for part in (result.stderr.strip(), result.stdout.strip()) if part)
        message = f"Failed to push '{refspec}' to remote '{remote}': {detail}"
        if status is not None and status.flag == "!":
            return PushError(message=message, rejection_reason=status.reason)
        return PushError(message=message, rejection_reason=None)

    def delete_remote_branch(
        self, repo_root: Path, remote: str, branch: str, *, auth: GitAuth
    ) -> PushResult | PushError:
        """Delete a remote branch by pushing an empty source."""
        return self.push_refspec(repo_root, remote, f":refs/heads/{branch}", auth=auth)

    def is_repository(self, path: Path) -> bool:
        """Check whether `path` is the top level of a working copy."""
        if not path.is_dir():
            return False
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=path,
            capture_output=True,
            text=True,
            check=False,
            env=copied_env_for_git_subprocess(),
        )
        if result.returncode != 0:
            return False
        return Path(result.stdout.strip()).resolve() == path.resolve()

    def resolve_commit(self, repo_root: Path, rev: str) -> str | None:
        """Resolve `rev` to a commit sha using rev-parse."""
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
            env=copied_env_for_git_subprocess(),
        )
        if result.returncode != 0:
            return None
        sha = result.stdout.strip()
        return sha or None

    def create_branch(self, repo_root: Path, branch: str, start_point: str) -> None:
        """Create a local branch without switching to it."""
        run_subprocess_with_context(
            cmd=["git", "branch", branch, start_point],
            operation_context=f"create branch '{branch}' at {start_point}",
            cwd=repo_root,
            env=copied_env_for_git_subprocess(),
        )

    def delete_branch(self, repo_root: Path, branch: str) -> None:
        """Force-delete a local branch."""
        run_subprocess_with_context(
            cmd=["git", "branch", "-D", branch],
            operation_context=f"delete branch '{branch}'",
            cwd=repo_root,
            env=copied_env_for_git_subprocess(),
        )

    def get_remote_url(self, repo_root: Path, remote: str) -> str | None:
        """Get the URL for a git remote, or None if it is not configured."""
        result = subprocess.run(
            ["git", "remote", "get-url", remote],
            cwd=repo_root,
            capture_output=True,
            text=True,
            check=False,
            env=copied_env_for_git_subprocess(),
        )
        if result.returncode != 0:
            return None
        url = result.stdout.strip()
        return url or None

    def add_remote(self, repo_root: Path, remote: str, url: str) -> None:
        """Configure a new remote."""
        run_subprocess_with_context(
            cmd=["git", "remote", "add", remote, url],
            operation_context=f"add remote '{remote}'",
            cwd=repo_root,
            env=copied_env_for_git_subprocess(),
        )

    def set_remote_url(self, repo_root: Path, remote: str, url: str) -> None:
        """Point an existing remote at a new URL."""
        run_subprocess_with_context(
            cmd=["git", "remote", "set-url", remote, url],
            operation_context=f"update URL of remote '{remote}'",
            cwd=repo_root,
            env=copied_env_for_git_subprocess(),
        )
