"""Type definitions for the promotion pipeline."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from gitlab_fork.gateway.git.auth import GitAuth, NoAuth
from gitlab_fork.gateway.git.types import BRANCH_PREFIX, TAG_PREFIX

RefKind = Literal["tag", "branch", "unresolved"]

TagExistsPolicy = Literal["error", "skip"]

TAG_EXISTS_POLICIES: tuple[TagExistsPolicy, ...] = ("error", "skip")

UploadStrategy = Literal["temp_branch", "initialize_default_branch"]

PromoteStage = Literal["classify", "clone", "publish"]

PromoteErrorType = Literal[
    "source_unreachable",
    "source_ref_not_found",
    "clone_failed",
    "local_git_failed",
    "destination_unreachable",
    "upload_failed",
    "publish_failed",
    "ref_already_exists",
]

DEFAULT_BRANCH_NAME = "main"

# History depth requested from the source; only the tip commit is needed.
SHALLOW_CLONE_DEPTH = 1


@dataclass(frozen=True)
class Reference:
    """A named ref on one remote, classified as tag, branch or unresolved."""

    name: str
    kind: RefKind

    @property
    def is_resolved(self) -> bool:
        return self.kind != "unresolved"

    @property
    def full_name(self) -> str:
        return self.full_name_for(self.name)

    def full_name_for(self, name: str) -> str:
        """Full ref name of the same kind for another short name."""
        if self.kind == "tag":
            return f"{TAG_PREFIX}{name}"
        if self.kind == "branch":
            return f"{BRANCH_PREFIX}{name}"
        raise ValueError(f"Reference '{self.name}' is unresolved and has no full name")

    @property
    def local_ref(self) -> str:
        """Ref holding the commit inside a single-ref clone of the source."""
        if self.kind == "branch":
            return f"refs/remotes/origin/{self.name}"
        return self.full_name


@dataclass(frozen=True)
class PromoteRequest:
    """Immutable input of one promotion.

    Attributes:
        source_url: Repository the reference is read from
        source_ref: Short tag or branch name on the source
        destination_url: Repository the reference is published to
        destination_ref: Name on the destination; None keeps the source name
        work_dir: Local directory for the working copy
        on_tag_exists: What to do when the reference is already published
        default_branch: Name of the destination's primary branch
        remove_reused_work_dir: Delete work_dir at cleanup even when it held a
            repository before this run
        source_auth: Credential provider for the source
        destination_auth: Credential provider for the destination
    """

    source_url: str
    source_ref: str
    destination_url: str
    destination_ref: str | None
    work_dir: Path
    on_tag_exists: TagExistsPolicy = "error"
    default_branch: str = DEFAULT_BRANCH_NAME
    remove_reused_work_dir: bool = False
    source_auth: GitAuth = field(default_factory=NoAuth)
    destination_auth: GitAuth = field(default_factory=NoAuth)

    @property
    def destination_name(self) -> str:
        return self.destination_ref or self.source_ref


@dataclass(frozen=True)
class LocalWorkingCopy:
    """Minimal clone of the source reference."""

    path: Path
    reused: bool
    reference: Reference
    commit_sha: str


@dataclass(frozen=True)
class EphemeralNames:
    """Per-run unique names of the disposable branches."""

    local_branch: str
    remote_branch: str


@dataclass
class TransientArtifacts:
    """What this run created and cleanup has to remove.

    Mutable on purpose: stages record each artifact as soon as it exists so
    cleanup still sees it when a later step fails unexpectedly.
    """

    local_branch: str | None = None
    remote_branch: str | None = None
    initialized_ref: str | None = None


@dataclass(frozen=True)
class PromoteSuccess:
    """The reference is published on the destination."""

    reference: Reference
    destination_name: str
    commit_sha: str
    upload_strategy: UploadStrategy
    message: str
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class PromoteSkipped:
    """The reference was already present and the policy says skip."""

    reference: Reference
    destination_name: str
    message: str
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class PromoteError:
    """The promotion failed in `stage`."""

    stage: PromoteStage
    error_type: PromoteErrorType
    message: str
    details: dict[str, str]
    warnings: tuple[str, ...] = ()


PromoteOutcome = PromoteSuccess | PromoteSkipped | PromoteError
