"""Abstract clock so that time-dependent code can be tested deterministically."""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract interface for time operations."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current local time."""
        ...
