"""Clone stage: obtain a minimal local copy of the source reference."""

from collections.abc import Generator

from gitlab_fork.events import ProgressEvent
from gitlab_fork.gateway.git.types import CloneError
from gitlab_fork.promote.abc import PromoteKit
from gitlab_fork.promote.types import (
    SHALLOW_CLONE_DEPTH,
    LocalWorkingCopy,
    PromoteError,
    PromoteRequest,
    Reference,
)


def execute_clone(
    ops: PromoteKit,
    request: PromoteRequest,
    reference: Reference,
    *,
    reuse_existing: bool,
) -> Generator[ProgressEvent, None, LocalWorkingCopy | PromoteError]:
    """Clone `reference` from the source into request.work_dir.

    When `reuse_existing` is set the directory already holds a repository and
    is used as is, without fetching. The reference must still resolve in it.

    Yields:
        ProgressEvent for status updates

    Returns:
        The working copy, or PromoteError with error_type "clone_failed"
    """
    work_dir = request.work_dir

    if reuse_existing:
        yield ProgressEvent(
            f"Reusing existing repository at {work_dir} without fetching; "
            "its contents may be stale",
            style="warning",
        )
    else:
        yield ProgressEvent(
            f"Cloning {reference.kind} '{reference.name}' from {request.source_url} "
            f"into {work_dir} (depth {SHALLOW_CLONE_DEPTH}, {request.source_auth.description})..."
        )
        result = ops.git.clone_single_ref(
            request.source_url,
            reference.full_name,
            reference.local_ref,
            work_dir,
            auth=request.source_auth,
            depth=SHALLOW_CLONE_DEPTH,
        )
        if isinstance(result, CloneError):
            return PromoteError(
                stage="clone",
                error_type="clone_failed",
                message=f"Could not clone '{reference.name}': {result.message}",
                details={"source_url": request.source_url, "work_dir": str(work_dir)},
            )

    commit_sha = ops.git.resolve_commit(work_dir, reference.local_ref)
    if commit_sha is None:
        message = f"'{reference.local_ref}' does not resolve to a commit in {work_dir}"
        if reuse_existing:
            message += "; remove the directory or choose another output directory"
        return PromoteError(
            stage="clone",
            error_type="clone_failed",
            message=message,
            details={"work_dir": str(work_dir), "local_ref": reference.local_ref},
        )

    yield ProgressEvent(f"Local copy ready at commit {commit_sha[:12]}", style="success")
    return LocalWorkingCopy(
        path=work_dir,
        reused=reuse_existing,
        reference=reference,
        commit_sha=commit_sha,
    )
