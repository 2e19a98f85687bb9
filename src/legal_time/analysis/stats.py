"""Productivity statistics over time windows."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from legal_time.core.models import TaskType, TimeEntry, User

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_MINUTE = 60 * 1000
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class Window(str, Enum):
    """Dashboard time window, measured back from now."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"

    @property
    def label(self) -> str:
        return {"today": "Today", "week": "This Week", "month": "This Month"}[self.value]


def window_start(window: Window, now: datetime, week_start: str = "sunday") -> datetime:
    """Get the local midnight a window starts at.

    Args:
        window: Window to compute
        now: Reference time
        week_start: 'sunday' or 'monday'

    Returns:
        Start of the window (inclusive)
    """
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if window == Window.TODAY:
        return start_of_day
    if window == Window.WEEK:
        # weekday(): Monday is 0, Sunday is 6
        offset = now.weekday() if week_start == "monday" else (now.weekday() + 1) % 7
        return start_of_day - timedelta(days=offset)
    return start_of_day.replace(day=1)


def _share(part: int, total: int) -> float:
    return part / total if total > 0 else 0


@dataclass(frozen=True)
class Stats:
    """Summed durations (milliseconds) of closed entries in a window.

    Uncategorized entries count toward no bucket and are left out of
    total_time; completed_sessions counts every closed entry.
    """

    prod_direct_time: int = 0
    prod_indirect_time: int = 0
    non_prod_time: int = 0
    completed_sessions: int = 0

    @property
    def total_time(self) -> int:
        return self.prod_direct_time + self.prod_indirect_time + self.non_prod_time

    @property
    def total_prod_time(self) -> int:
        return self.prod_direct_time + self.prod_indirect_time

    @property
    def prod_direct_decimal(self) -> float:
        return _share(self.prod_direct_time, self.total_time)

    @property
    def prod_indirect_decimal(self) -> float:
        return _share(self.prod_indirect_time, self.total_time)

    @property
    def non_prod_decimal(self) -> float:
        return _share(self.non_prod_time, self.total_time)

    @property
    def prod_direct_percentage(self) -> float:
        return self.prod_direct_decimal * 100

    @property
    def prod_indirect_percentage(self) -> float:
        return self.prod_indirect_decimal * 100

    @property
    def non_prod_percentage(self) -> float:
        return self.non_prod_decimal * 100

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for JSON output."""
        return {
            "total_time": self.total_time,
            "prod_direct_time": self.prod_direct_time,
            "prod_indirect_time": self.prod_indirect_time,
            "non_prod_time": self.non_prod_time,
            "total_prod_time": self.total_prod_time,
            "completed_sessions": self.completed_sessions,
            "prod_direct_percentage": self.prod_direct_percentage,
            "prod_indirect_percentage": self.prod_indirect_percentage,
            "non_prod_percentage": self.non_prod_percentage,
            "prod_direct_decimal": self.prod_direct_decimal,
            "prod_indirect_decimal": self.prod_indirect_decimal,
            "non_prod_decimal": self.non_prod_decimal,
        }


def filter_window(
    entries: Iterable[TimeEntry],
    window: Window,
    now: Optional[datetime] = None,
    week_start: str = "sunday",
) -> list[TimeEntry]:
    """Keep entries that started inside the window."""
    start = window_start(window, now or datetime.now(), week_start)
    return [e for e in entries if e.start_time >= start]


def summarize(entries: Iterable[TimeEntry]) -> Stats:
    """Sum closed entries into productivity buckets, ignoring windows."""
    buckets = {
        TaskType.PROD_DIRECT: 0,
        TaskType.PROD_INDIRECT: 0,
        TaskType.NON_PROD: 0,
    }
    completed = 0
    for entry in entries:
        if entry.end_time is None:
            continue
        completed += 1
        if entry.task_type in buckets:
            buckets[entry.task_type] += entry.total_time or 0

    return Stats(
        prod_direct_time=buckets[TaskType.PROD_DIRECT],
        prod_indirect_time=buckets[TaskType.PROD_INDIRECT],
        non_prod_time=buckets[TaskType.NON_PROD],
        completed_sessions=completed,
    )


def aggregate(
    entries: Iterable[TimeEntry],
    window: Window,
    now: Optional[datetime] = None,
    week_start: str = "sunday",
) -> Stats:
    """Sum closed entries of a window into productivity buckets.

    Args:
        entries: Entries to summarize
        window: Today, Week or Month
        now: Reference time. Defaults to the current time.
        week_start: First day of the week for the Week window

    Returns:
        Stats for the window
    """
    return summarize(filter_window(entries, window, now, week_start))


@dataclass(frozen=True)
class UserSummary:
    """One row of the admin overview."""

    user: User
    stats: Stats
    last_activity: Optional[datetime]
    tracking: bool


def summarize_users(
    entries: Iterable[TimeEntry],
    users: Iterable[User],
    window: Window,
    now: Optional[datetime] = None,
    week_start: str = "sunday",
) -> list[UserSummary]:
    """Aggregate each user's entries for the admin overview.

    Args:
        entries: Entries of all users
        users: Users to report on
        window: Window to aggregate over
        now: Reference time. Defaults to the current time.
        week_start: First day of the week for the Week window

    Returns:
        One summary per user, busiest first
    """
    now = now or datetime.now()
    by_user: dict[str, list[TimeEntry]] = {}
    for entry in entries:
        by_user.setdefault(entry.user_id, []).append(entry)

    summaries = []
    for user in users:
        user_entries = by_user.get(user.id, [])
        moments = [e.end_time or e.start_time for e in user_entries]
        summaries.append(
            UserSummary(
                user=user,
                stats=aggregate(user_entries, window, now, week_start),
                last_activity=max(moments) if moments else None,
                tracking=any(e.is_active for e in user_entries),
            )
        )

    summaries.sort(key=lambda s: s.stats.total_time, reverse=True)
    return summaries


def format_duration(milliseconds: Optional[int], show_seconds: bool = False) -> str:
    """Format a duration as hours and minutes.

    Args:
        milliseconds: Duration, or None for an active entry
        show_seconds: Append seconds

    Returns:
        e.g. "1h 30m", or "Active" for None
    """
    if milliseconds is None:
        return "Active"

    hours = milliseconds // MS_PER_HOUR
    minutes = (milliseconds % MS_PER_HOUR) // MS_PER_MINUTE
    if show_seconds:
        seconds = (milliseconds % MS_PER_MINUTE) // 1000
        return f"{hours}h {minutes}m {seconds}s"
    return f"{hours}h {minutes}m"
