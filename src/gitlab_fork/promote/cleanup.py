"""Cleanup stage: remove what the run created, never failing the run."""

import logging
import shutil
from collections.abc import Generator
from pathlib import Path

from gitlab_fork.events import ProgressEvent
from gitlab_fork.gateway.git.types import PushError
from gitlab_fork.promote.abc import PromoteKit
from gitlab_fork.promote.publish_stage import REMOTE_NAME
from gitlab_fork.promote.push_quirks import is_known_push_false_negative
from gitlab_fork.promote.types import PromoteRequest, TransientArtifacts

logger = logging.getLogger(__name__)


def execute_cleanup(
    ops: PromoteKit,
    request: PromoteRequest,
    artifacts: TransientArtifacts,
    *,
    remove_work_dir: bool,
) -> Generator[ProgressEvent, None, tuple[str, ...]]:
    """Delete the temporary branches and the working copy.

    Each step runs regardless of the previous one; failures become warnings.

    Args:
        ops: Operations interface
        request: The promotion request (work_dir, destination credential)
        artifacts: What the run created
        remove_work_dir: Whether the working directory belongs to this run

    Returns:
        Warnings collected along the way, in order
    """
    warnings: list[str] = []
    repo_root = request.work_dir

    if artifacts.local_branch is not None:
        yield ProgressEvent(f"Deleting local branch '{artifacts.local_branch}'...")
        try:
            ops.git.delete_branch(repo_root, artifacts.local_branch)
        except RuntimeError as e:
            warning = f"Could not delete local branch '{artifacts.local_branch}': {e}"
            warnings.append(warning)
            yield ProgressEvent(warning, style="warning")

    if artifacts.remote_branch is not None:
        yield ProgressEvent(
            f"Deleting temporary branch '{artifacts.remote_branch}' on the destination..."
        )
        result = ops.git.delete_remote_branch(
            repo_root, REMOTE_NAME, artifacts.remote_branch, auth=request.destination_auth
        )
        if isinstance(result, PushError) and is_known_push_false_negative(result):
            logger.debug(
                "Ignoring misreported delete of %s: %s", artifacts.remote_branch, result.message
            )
        elif isinstance(result, PushError):
            warning = (
                f"Could not delete temporary branch '{artifacts.remote_branch}' "
                f"on the destination: {result.message}"
            )
            warnings.append(warning)
            yield ProgressEvent(warning, style="warning")

    if remove_work_dir and repo_root.exists():
        yield ProgressEvent(f"Removing {repo_root}...")
        warning = _remove_directory(repo_root)
        if warning is not None:
            warnings.append(warning)
            yield ProgressEvent(warning, style="warning")
    elif repo_root.exists():
        logger.debug("Keeping working directory %s", repo_root)

    return tuple(warnings)


def _remove_directory(path: Path) -> str | None:
    try:
        shutil.rmtree(path)
    except OSError as e:
        return f"Could not remove working directory {path}: {e}"
    return None
