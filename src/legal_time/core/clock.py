"""Clock capability used by the tracker and the stats windows."""

from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell the current local time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now()


class FrozenClock:
    """Clock that only moves when told to.

    Example:
        >>> clock = FrozenClock(datetime(2025, 3, 4, 9, 0))
        >>> clock.advance(seconds=90)
        >>> clock.now()
        datetime.datetime(2025, 3, 4, 9, 1, 30)
    """

    def __init__(self, moment: datetime):
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def set(self, moment: datetime) -> None:
        self._moment = moment

    def advance(self, **kwargs: float) -> None:
        """Move the clock forward by ``timedelta(**kwargs)``."""
        self._moment += timedelta(**kwargs)
