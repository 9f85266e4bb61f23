"""Helpers for running external commands (git, kubectl) with useful errors."""

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)


def run_subprocess_with_context(
    *,
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command and raise a RuntimeError describing the operation on failure.

    Args:
        cmd: Command and arguments
        operation_context: Human-readable description used in error messages,
            phrased to follow "Failed to" (e.g. "push branch 'x' to remote 'y'")
        cwd: Working directory, or None for the current one
        timeout: Seconds before the command is killed, or None for no limit
        env: Full environment for the child process, or None to inherit

    Returns:
        The completed process (stdout/stderr captured as text)

    Raises:
        RuntimeError: If the command exits non-zero, times out, or cannot be started
    """
    logger.debug("Running %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
            env=dict(env) if env is not None else None,
        )
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or e.stdout or "").strip()
        msg = f"Failed to {operation_context} (exit code {e.returncode})"
        if detail:
            msg += f": {detail}"
        raise RuntimeError(msg) from e
    except subprocess.TimeoutExpired as e:
        raise RuntimeError(f"Timed out after {timeout}s trying to {operation_context}") from e
    except FileNotFoundError as e:
        raise RuntimeError(f"Failed to {operation_context}: {cmd[0]} not found on PATH") from e


def copied_env_for_git_subprocess(config: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return a copy of os.environ prepared for a non-interactive git invocation.

    Credential prompts are disabled. Extra git config entries are passed through
    GIT_CONFIG_COUNT/GIT_CONFIG_KEY_<n>/GIT_CONFIG_VALUE_<n> so values such as
    auth headers never show up in argv or in a repository's .git/config.
    Entries already present in the environment are preserved.

    Args:
        config: Git config key/value pairs scoped to this invocation

    Returns:
        New environment dictionary
    """
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"
    if not config:
        return env

    existing = env.get("GIT_CONFIG_COUNT", "0")
    start = int(existing) if existing.isdigit() else 0
    for offset, (key, value) in enumerate(config.items()):
        index = start + offset
        env[f"GIT_CONFIG_KEY_{index}"] = key
        env[f"GIT_CONFIG_VALUE_{index}"] = value
    env["GIT_CONFIG_COUNT"] = str(start + len(config))
    return env
