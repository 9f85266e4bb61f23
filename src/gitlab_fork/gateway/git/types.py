"""Result types for git gateway operations.

Network-touching operations return `Result | Error` unions instead of raising,
so callers decide which failures are fatal.
"""

from dataclasses import dataclass

TAG_PREFIX = "refs/tags/"
BRANCH_PREFIX = "refs/heads/"
PEELED_SUFFIX = "^{}"


@dataclass(frozen=True)
class RemoteRef:
    """One advertised reference from `git ls-remote`.

    Attributes:
        name: Full ref name with any peel marker removed (e.g. "refs/tags/v1")
        sha: Object id advertised for this entry
        peeled: True if this entry was the peeled (^{}) line of an annotated tag
    """

    name: str
    sha: str
    peeled: bool

    @property
    def is_tag(self) -> bool:
        return self.name.startswith(TAG_PREFIX)

    @property
    def is_branch(self) -> bool:
        return self.name.startswith(BRANCH_PREFIX)

    @property
    def short_name(self) -> str:
        if self.is_tag:
            return self.name[len(TAG_PREFIX) :]
        if self.is_branch:
            return self.name[len(BRANCH_PREFIX) :]
        return self.name


@dataclass(frozen=True)
class RemoteRefsError:
    """Listing remote refs failed (unreachable host, TLS, auth, timeout)."""

    url: str
    message: str

    @property
    def error_type(self) -> str:
        return "ls-remote-failed"


@dataclass(frozen=True)
class CloneResult:
    """Success result from a clone."""

    path: str


@dataclass(frozen=True)
class CloneError:
    """Error result from a clone."""

    message: str

    @property
    def error_type(self) -> str:
        return "clone-failed"


@dataclass(frozen=True)
class PushResult:
    """Success result from pushing one refspec.

    Attributes:
        up_to_date: True when the remote already had the ref at this object
            and nothing was transferred ("Everything up-to-date")
    """

    up_to_date: bool


@dataclass(frozen=True)
class PushError:
    """Error result from pushing one refspec.

    Attributes:
        message: Combined git output describing the failure
        rejection_reason: Reason git printed for a rejected ref, e.g.
            "already exists" or "non-fast-forward"; None when the push failed
            before any ref status was reported
    """

    message: str
    rejection_reason: str | None

    @property
    def error_type(self) -> str:
        return "push-failed"

    @property
    def rejected_because_exists(self) -> bool:
        return self.rejection_reason == "already exists"
