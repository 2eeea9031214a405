"""Clocks supplying the evaluation instant ("now") to calculations."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time of the running process."""

    def now(self) -> datetime:
        return datetime.now()


@dataclass
class FixedClock:
    """Clock frozen at a given instant, for reproducible evaluation."""

    instant: datetime

    def now(self) -> datetime:
        return self.instant

    def advance(self, delta: timedelta) -> None:
        """Move the frozen instant forward by ``delta``."""
        self.instant = self.instant + delta


def resolve_now(as_of: datetime | None) -> datetime:
    """Return ``as_of`` or the system time when none is given."""
    return as_of if as_of is not None else SystemClock().now()
