"""Events yielded by long-running operations.

Operations are generators: they yield ProgressEvent for every step worth
showing to a person and finish with exactly one CompletionEvent carrying the
result (success or error dataclass).
"""

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

T = TypeVar("T")

ProgressStyle = Literal["info", "success", "warning", "error"]


@dataclass(frozen=True)
class ProgressEvent:
    """Human-readable progress line."""

    message: str
    style: ProgressStyle = "info"


@dataclass(frozen=True)
class CompletionEvent(Generic[T]):
    """Final event of an operation, carrying its result."""

    result: T
