"""Classify a reference name on a remote as tag, branch or unresolved."""

import logging

from gitlab_fork.gateway.git.abc import Git
from gitlab_fork.gateway.git.auth import GitAuth
from gitlab_fork.gateway.git.types import BRANCH_PREFIX, TAG_PREFIX, RemoteRef, RemoteRefsError
from gitlab_fork.promote.types import Reference

logger = logging.getLogger(__name__)


def classify_from_refs(refs: list[RemoteRef], name: str) -> Reference:
    """Classify `name` against an already listed set of remote refs.

    A name that exists both as tag and as branch is a tag.
    """
    advertised = {ref.name for ref in refs}
    if f"{TAG_PREFIX}{name}" in advertised:
        return Reference(name=name, kind="tag")
    if f"{BRANCH_PREFIX}{name}" in advertised:
        return Reference(name=name, kind="branch")
    return Reference(name=name, kind="unresolved")


def classify_reference(
    git: Git, url: str, name: str, *, auth: GitAuth
) -> Reference | RemoteRefsError:
    """Query `url` and classify `name` on it.

    Read-only: only the ref advertisement is fetched, no objects.

    Returns:
        The classified Reference, or RemoteRefsError if the remote could not be listed
    """
    refs = git.list_remote_refs(url, auth=auth)
    if isinstance(refs, RemoteRefsError):
        logger.debug("Listing refs of %s failed: %s", url, refs.message)
        return refs

    reference = classify_from_refs(refs, name)
    logger.debug("Classified '%s' on %s as %s", name, url, reference.kind)
    return reference
