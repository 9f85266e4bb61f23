"""Publish stage: upload the commit graph, then publish the reference.

The destination may refuse pushes of arbitrary new refs pointing at unknown
history, so objects are uploaded first through a branch the credential may
write: a unique temporary branch when the default branch exists, otherwise
the default branch itself. The reference is then pushed on its own and only
needs objects the destination already has.
"""

import logging
from collections.abc import Generator
from pathlib import Path

from gitlab_fork.events import ProgressEvent
from gitlab_fork.gateway.git.abc import Git
from gitlab_fork.gateway.git.auth import GitAuth
from gitlab_fork.gateway.git.types import BRANCH_PREFIX, PushError, PushResult, RemoteRefsError
from gitlab_fork.promote.abc import PromoteKit
from gitlab_fork.promote.classify import classify_reference
from gitlab_fork.promote.push_quirks import is_known_push_false_negative
from gitlab_fork.promote.types import (
    EphemeralNames,
    LocalWorkingCopy,
    PromoteError,
    PromoteRequest,
    PromoteSkipped,
    PromoteSuccess,
    TransientArtifacts,
    UploadStrategy,
)

logger = logging.getLogger(__name__)

REMOTE_NAME = "target"


def _push(
    git: Git, repo_root: Path, refspec: str, *, auth: GitAuth
) -> Generator[ProgressEvent, None, PushResult | PushError]:
    """Push one refspec to the destination remote, absorbing known false negatives."""
    result = git.push_refspec(repo_root, REMOTE_NAME, refspec, auth=auth)
    if isinstance(result, PushError) and is_known_push_false_negative(result):
        logger.debug("Ignoring misreported push failure for %s: %s", refspec, result.message)
        yield ProgressEvent(
            f"Server garbled the acknowledgement for '{refspec}'; the push was applied",
            style="warning",
        )
        return PushResult(up_to_date=False)
    return result


def _ensure_remote(git: Git, repo_root: Path, url: str) -> Generator[ProgressEvent, None, None]:
    current_url = git.get_remote_url(repo_root, REMOTE_NAME)
    if current_url is None:
        yield ProgressEvent(f"Adding remote '{REMOTE_NAME}' -> {url}")
        git.add_remote(repo_root, REMOTE_NAME, url)
        return
    if current_url != url:
        yield ProgressEvent(f"Pointing remote '{REMOTE_NAME}' at {url}")
        git.set_remote_url(repo_root, REMOTE_NAME, url)


def execute_publish(
    ops: PromoteKit,
    request: PromoteRequest,
    working_copy: LocalWorkingCopy,
    names: EphemeralNames,
    artifacts: TransientArtifacts,
) -> Generator[ProgressEvent, None, PromoteSuccess | PromoteSkipped | PromoteError]:
    """Upload objects and publish the reference on the destination.

    Every artifact created on the way is recorded in `artifacts` as soon as it
    exists. Local git failures propagate as RuntimeError.

    Yields:
        ProgressEvent for status updates

    Returns:
        PromoteSuccess, PromoteSkipped (reference present, policy "skip") or PromoteError
    """
    git = ops.git
    repo_root = working_copy.path
    reference = working_copy.reference
    destination_name = request.destination_name
    destination_ref = reference.full_name_for(destination_name)

    # Step 1: Local branch marking the commit to upload
    yield ProgressEvent(
        f"Creating local branch '{names.local_branch}' at {working_copy.commit_sha[:12]}..."
    )
    git.create_branch(repo_root, names.local_branch, working_copy.commit_sha)
    artifacts.local_branch = names.local_branch

    # Step 2: Destination remote
    yield from _ensure_remote(git, repo_root, request.destination_url)

    # Step 3: Pick the upload path
    yield ProgressEvent(f"Inspecting {request.destination_url}...")
    destination_refs = git.list_remote_refs(request.destination_url, auth=request.destination_auth)
    if isinstance(destination_refs, RemoteRefsError):
        return PromoteError(
            stage="publish",
            error_type="destination_unreachable",
            message=f"Could not list references of the destination: {destination_refs.message}",
            details={"destination_url": request.destination_url},
        )

    default_ref = f"{BRANCH_PREFIX}{request.default_branch}"
    strategy: UploadStrategy
    if any(ref.name == default_ref for ref in destination_refs):
        strategy = "temp_branch"
        upload_ref = f"{BRANCH_PREFIX}{names.remote_branch}"
        yield ProgressEvent(
            f"Uploading objects through temporary branch '{names.remote_branch}'..."
        )
    else:
        strategy = "initialize_default_branch"
        upload_ref = default_ref
        yield ProgressEvent(
            f"Destination has no '{request.default_branch}' branch; initializing it...",
        )

    upload = yield from _push(
        git,
        repo_root,
        f"{BRANCH_PREFIX}{names.local_branch}:{upload_ref}",
        auth=request.destination_auth,
    )
    if isinstance(upload, PushError):
        return PromoteError(
            stage="publish",
            error_type="upload_failed",
            message=f"Could not upload objects to '{upload_ref}': {upload.message}",
            details={"destination_url": request.destination_url, "upload_ref": upload_ref},
        )
    if strategy == "temp_branch":
        artifacts.remote_branch = names.remote_branch
    else:
        artifacts.initialized_ref = default_ref

    # Step 4: Publish the reference itself
    yield ProgressEvent(f"Publishing {reference.kind} '{destination_name}'...")
    published = yield from _push(
        git,
        repo_root,
        f"{reference.local_ref}:{destination_ref}",
        auth=request.destination_auth,
    )

    if isinstance(published, PushResult):
        if not published.up_to_date or destination_ref == artifacts.initialized_ref:
            return PromoteSuccess(
                reference=reference,
                destination_name=destination_name,
                commit_sha=working_copy.commit_sha,
                upload_strategy=strategy,
                message=(
                    f"Published {reference.kind} '{destination_name}' at "
                    f"{working_copy.commit_sha[:12]} on {request.destination_url}"
                ),
            )
    elif not published.rejected_because_exists:
        return PromoteError(
            stage="publish",
            error_type="publish_failed",
            message=f"Could not publish '{destination_ref}': {published.message}",
            details={
                "destination_ref": destination_ref,
                "rejection_reason": published.rejection_reason or "",
            },
        )

    # Nothing was sent or the ref was refused as existing: confirm on the destination
    return (yield from _apply_conflict_policy(ops, request, working_copy, destination_ref))


def _apply_conflict_policy(
    ops: PromoteKit,
    request: PromoteRequest,
    working_copy: LocalWorkingCopy,
    destination_ref: str,
) -> Generator[ProgressEvent, None, PromoteSkipped | PromoteError]:
    reference = working_copy.reference
    destination_name = request.destination_name

    yield ProgressEvent(
        f"Checking whether '{destination_name}' already exists on the destination..."
    )
    existing = classify_reference(
        ops.git, request.destination_url, destination_name, auth=request.destination_auth
    )
    if isinstance(existing, RemoteRefsError) or existing.kind != reference.kind:
        found = existing.message if isinstance(existing, RemoteRefsError) else existing.kind
        return PromoteError(
            stage="publish",
            error_type="publish_failed",
            message=(
                f"Push of '{destination_ref}' was not applied and the destination does not "
                f"show it as a {reference.kind} ({found})"
            ),
            details={"destination_ref": destination_ref},
        )

    kind = reference.kind.capitalize()
    message = f"{kind} '{destination_name}' already exists on the destination"
    if request.on_tag_exists == "skip":
        return PromoteSkipped(
            reference=reference,
            destination_name=destination_name,
            message=message,
        )
    return PromoteError(
        stage="publish",
        error_type="ref_already_exists",
        message=message,
        details={"destination_ref": destination_ref, "policy": request.on_tag_exists},
    )
