"""Fake clock for tests."""

from datetime import datetime

from gitlab_fork.gateway.time.abc import Time

DEFAULT_FAKE_TIME = datetime(2024, 1, 15, 14, 30, 0)


class FakeTime(Time):
    """Clock frozen at a configurable instant."""

    def __init__(self, current_time: datetime | None = None) -> None:
        self._current_time = current_time if current_time is not None else DEFAULT_FAKE_TIME

    def now(self) -> datetime:
        return self._current_time
