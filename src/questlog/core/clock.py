"""Wall-clock wrappers producing ISO-8601 UTC timestamps."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def format_timestamp(moment: datetime) -> str:
    """Render an aware datetime as a second-resolution UTC timestamp."""
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


class Clock:
    """Wrapper around the system clock that returns UTC timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def timestamp(self) -> str:
        """Return the current time as an ISO-8601 UTC string."""
        return format_timestamp(self.now())


class SteppingClock(Clock):
    """Deterministic clock that advances by a fixed step on every read."""

    def __init__(self, start: datetime | None = None, step_seconds: int = 1) -> None:
        self._current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._step = timedelta(seconds=step_seconds)

    def now(self) -> datetime:
        current = self._current
        self._current = current + self._step
        return current
