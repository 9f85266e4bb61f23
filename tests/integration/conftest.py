"""Helpers for integration tests that run real git against local repositories."""

import subprocess
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def git_identity(monkeypatch: pytest.MonkeyPatch) -> None:
    """Give commits a fixed identity regardless of the user's git config."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")


def git(cwd: Path, *args: str) -> str:
    """Run git in `cwd` and return stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def init_bare_repo(path: Path) -> str:
    """Create an empty bare repository and return its file:// URL.

    Shallow pushes are accepted, as a hosted GitLab project accepts them.
    """
    path.mkdir(parents=True)
    git(path, "init", "--bare", "--initial-branch=main")
    git(path, "config", "receive.shallowUpdate", "true")
    return path.as_uri()


def seed_repo(path: Path, url: str, *, content: str) -> str:
    """Push one commit on main to `url` from a scratch repository at `path`.

    Returns:
        The commit sha
    """
    path.mkdir(parents=True)
    git(path, "init", "--initial-branch=main")
    (path / "model.txt").write_text(content, encoding="utf-8")
    git(path, "add", "model.txt")
    git(path, "commit", "-m", f"Add {content}")
    git(path, "remote", "add", "origin", url)
    git(path, "push", "origin", "main")
    return git(path, "rev-parse", "HEAD")


def remote_refs(path: Path) -> dict[str, str]:
    """Map of ref name -> sha in a bare repository, peeled entries excluded."""
    output = git(path, "for-each-ref", "--format=%(refname) %(objectname)")
    refs: dict[str, str] = {}
    for line in output.splitlines():
        name, sha = line.split(" ", 1)
        refs[name] = sha
    return refs
