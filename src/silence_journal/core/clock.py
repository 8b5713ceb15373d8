"""Clock abstraction for time-windowed analytics.

WallClock: real local wall-clock time
FixedClock: deterministic time for tests and reproducible reports

Analytics never call datetime.now() directly; windowed metrics take a clock.
Trade timestamps are naive local time, so both clocks return naive datetimes.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol


class IClock(Protocol):
    """Clock interface used by all time-dependent code."""

    def now(self) -> datetime:
        """Current local time as a naive datetime."""
        ...


class WallClock:
    """Real wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock pinned to an explicit instant.

    Time advances only when explicitly set.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._time = start or datetime(2024, 1, 1)

    def now(self) -> datetime:
        return self._time

    def set_time(self, t: datetime) -> None:
        """Move the clock. Must be monotonically increasing."""
        if t < self._time:
            raise ValueError(
                f"FixedClock cannot go backwards: {t} < {self._time}"
            )
        self._time = t

    def advance(self, **kwargs: float) -> None:
        """Advance time by a ``timedelta(**kwargs)``."""
        self.set_time(self._time + timedelta(**kwargs))


def window_start(clock: IClock | None, days: int) -> datetime:
    """Inclusive start of a trailing window of ``days`` days."""
    now = (clock or WallClock()).now()
    return now - timedelta(days=days)
