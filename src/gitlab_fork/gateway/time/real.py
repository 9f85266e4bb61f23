"""Production clock."""

from datetime import datetime

from gitlab_fork.gateway.time.abc import Time


class RealTime(Time):
    """Clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now()
