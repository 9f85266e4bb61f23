"""Push failures that are known to be misreported successes.

Some servers finish a push correctly but send the report-status on a side band
channel older git clients do not understand. The objects and refs are stored;
only the acknowledgement is garbled.
"""

from gitlab_fork.gateway.git.types import PushError

KNOWN_PUSH_FALSE_NEGATIVES: tuple[str, ...] = (
    "decode report-status: unknown channel unpack ok",
)


def is_known_push_false_negative(error: PushError) -> bool:
    """Return True if `error` is a misreported successful push.

    A rejected ref is never a false negative.
    """
    if error.rejection_reason is not None:
        return False
    return any(marker in error.message for marker in KNOWN_PUSH_FALSE_NEGATIVES)
