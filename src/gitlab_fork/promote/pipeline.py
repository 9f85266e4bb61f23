"""Promote one tag or branch from a source repository to a destination.

The workflow:
1. Classify the requested name on the source (tag wins over branch)
2. Clone only that reference, depth 1, or reuse an existing working copy
3. Upload the objects and publish the reference under the destination name
4. Remove temporary branches and the working copy

Cleanup runs whenever a clone was attempted, whatever happened afterwards,
and only adds warnings to the outcome.
"""

import dataclasses
import logging
from collections.abc import Generator
from pathlib import Path

from gitlab_fork.events import CompletionEvent, ProgressEvent
from gitlab_fork.gateway.git.types import RemoteRefsError
from gitlab_fork.naming import ephemeral_branch_names, format_run_suffix, new_run_token
from gitlab_fork.promote.abc import PromoteKit
from gitlab_fork.promote.classify import classify_reference
from gitlab_fork.promote.cleanup import execute_cleanup
from gitlab_fork.promote.clone_stage import execute_clone
from gitlab_fork.promote.publish_stage import execute_publish
from gitlab_fork.promote.types import (
    EphemeralNames,
    PromoteError,
    PromoteOutcome,
    PromoteRequest,
    PromoteStage,
    Reference,
    TransientArtifacts,
)

logger = logging.getLogger(__name__)


def _is_empty_or_missing(path: Path) -> bool:
    if not path.exists():
        return True
    return path.is_dir() and not any(path.iterdir())


def execute_promote(
    ops: PromoteKit,
    request: PromoteRequest,
) -> Generator[ProgressEvent | CompletionEvent[PromoteOutcome]]:
    """Execute the promotion workflow.

    Args:
        ops: Operations interface (git gateway and clock)
        request: What to promote and where

    Yields:
        ProgressEvent for status updates
        CompletionEvent with PromoteSuccess, PromoteSkipped or PromoteError
    """
    # Step 1: Classify on the source
    yield ProgressEvent(f"Resolving '{request.source_ref}' on {request.source_url}...")
    source_reference = classify_reference(
        ops.git, request.source_url, request.source_ref, auth=request.source_auth
    )
    if isinstance(source_reference, RemoteRefsError):
        yield CompletionEvent(
            PromoteError(
                stage="classify",
                error_type="source_unreachable",
                message=f"Could not list references of the source: {source_reference.message}",
                details={"source_url": request.source_url},
            )
        )
        return
    if not source_reference.is_resolved:
        yield CompletionEvent(
            PromoteError(
                stage="classify",
                error_type="source_ref_not_found",
                message=f"'{request.source_ref}' is neither a tag nor a branch on the source",
                details={"source_url": request.source_url, "source_ref": request.source_ref},
            )
        )
        return
    yield ProgressEvent(f"'{source_reference.name}' is a {source_reference.kind}", style="success")

    # Step 2: Settle what this run owns
    suffix = format_run_suffix(ops.time.now(), new_run_token())
    names = ephemeral_branch_names(suffix)
    reuse_existing = ops.git.is_repository(request.work_dir)
    if reuse_existing:
        remove_work_dir = request.remove_reused_work_dir
    else:
        remove_work_dir = _is_empty_or_missing(request.work_dir)
    logger.debug(
        "Run suffix %s, work_dir=%s reused=%s remove=%s",
        suffix,
        request.work_dir,
        reuse_existing,
        remove_work_dir,
    )

    # Step 3: Clone and publish
    artifacts = TransientArtifacts()
    outcome = yield from _clone_and_publish(
        ops, request, source_reference, names, artifacts, reuse_existing=reuse_existing
    )

    # Step 4: Cleanup
    warnings = yield from execute_cleanup(ops, request, artifacts, remove_work_dir=remove_work_dir)
    if warnings:
        outcome = dataclasses.replace(outcome, warnings=outcome.warnings + warnings)

    yield CompletionEvent(outcome)


def _clone_and_publish(
    ops: PromoteKit,
    request: PromoteRequest,
    reference: Reference,
    names: EphemeralNames,
    artifacts: TransientArtifacts,
    *,
    reuse_existing: bool,
) -> Generator[ProgressEvent, None, PromoteOutcome]:
    stage: PromoteStage = "clone"
    try:
        working_copy = yield from execute_clone(
            ops, request, reference, reuse_existing=reuse_existing
        )
        if isinstance(working_copy, PromoteError):
            return working_copy

        stage = "publish"
        return (yield from execute_publish(ops, request, working_copy, names, artifacts))
    except RuntimeError as e:
        logger.debug("Local git failure during %s", stage, exc_info=True)
        return PromoteError(
            stage=stage,
            error_type="local_git_failed",
            message=str(e),
            details={"work_dir": str(request.work_dir)},
        )
