"""Naming utilities for per-run branches and directories.

All functions are pure except new_run_token(), which draws randomness. Time is
always passed in so callers can use the injected clock.
"""

import secrets
import tempfile
from datetime import datetime
from pathlib import Path

from gitlab_fork.promote.types import EphemeralNames

# Run suffix timestamp format: MMDD-HHMMSS
RUN_SUFFIX_TIMESTAMP_FORMAT = "%m%d-%H%M%S"

LOCAL_BRANCH_PREFIX = "gitlab-fork-promote-"
REMOTE_BRANCH_PREFIX = "gitlab-fork-tmp-"
WORK_DIR_PREFIX = "gitlab-fork-cli-clone-"

_RUN_TOKEN_BYTES = 3


def new_run_token() -> str:
    """Return a random 6-character hex token."""
    return secrets.token_hex(_RUN_TOKEN_BYTES)


def format_run_suffix(dt: datetime, token: str) -> str:
    """Build the unique suffix shared by everything one run creates.

    Examples:
        >>> format_run_suffix(datetime(2024, 1, 15, 14, 30, 5), "a1b2c3")
        '0115-143005-a1b2c3'
    """
    return f"{dt.strftime(RUN_SUFFIX_TIMESTAMP_FORMAT)}-{token}"


def ephemeral_branch_names(suffix: str) -> EphemeralNames:
    """Local and remote temporary branch names for one run.

    Examples:
        >>> ephemeral_branch_names("0115-143005-a1b2c3").remote_branch
        'gitlab-fork-tmp-0115-143005-a1b2c3'
    """
    return EphemeralNames(
        local_branch=f"{LOCAL_BRANCH_PREFIX}{suffix}",
        remote_branch=f"{REMOTE_BRANCH_PREFIX}{suffix}",
    )


def default_work_dir(suffix: str, *, base_dir: Path | None = None) -> Path:
    """Working directory used when the caller does not pick one.

    Args:
        suffix: Run suffix from format_run_suffix()
        base_dir: Parent directory; defaults to the system temp directory
    """
    parent = base_dir if base_dir is not None else Path(tempfile.gettempdir())
    return parent / f"{WORK_DIR_PREFIX}{suffix}"
