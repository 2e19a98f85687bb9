"""Core time tracking engine."""

import logging
from datetime import datetime, timedelta
from typing import Optional, Union
from uuid import UUID

from legal_time.core.clock import Clock, SystemClock
from legal_time.core.exceptions import AlreadyClosedError, NotFoundError, ValidationError
from legal_time.core.models import TaskType, TimeEntry
from legal_time.core.taxonomy import TaskClassifier, TaskTaxonomy, normalize_task

logger = logging.getLogger(__name__)

LUNCH_JURISDICTION = "IN-PROGRESS"


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Exact whole milliseconds between two timestamps."""
    return (end - start) // timedelta(milliseconds=1)


class TimeTracker:
    """Owns time entries and the single active entry of each user."""

    def __init__(
        self,
        entries: Optional[list[TimeEntry]] = None,
        clock: Optional[Clock] = None,
        taxonomy: Optional[TaskTaxonomy] = None,
    ):
        """Initialize time tracker.

        Args:
            entries: Previously persisted entries, in insertion order
            clock: Time source. Uses the system clock if None.
            taxonomy: Task taxonomy for classification. Built-in lists if None.
        """
        self.clock = clock or SystemClock()
        self.classifier = TaskClassifier(taxonomy)
        self._entries: list[TimeEntry] = list(entries or [])
        self._active: dict[str, UUID] = {}
        self._rebuild_active()

    def _rebuild_active(self) -> None:
        """Index open entries per user, closing all but the newest one."""
        open_by_user: dict[str, list[TimeEntry]] = {}
        for entry in self._entries:
            if entry.is_active:
                open_by_user.setdefault(entry.user_id, []).append(entry)

        for user_id, open_entries in open_by_user.items():
            open_entries.sort(key=lambda e: e.start_time)
            newest = open_entries[-1]
            for stale in open_entries[:-1]:
                logger.warning(
                    f"User {user_id} had several open entries; closing {stale.id} "
                    f"at {newest.start_time.isoformat()}"
                )
                self._close(stale, newest.start_time)
            self._active[user_id] = newest.id

    def _find(self, entry_id: Union[UUID, str]) -> Optional[TimeEntry]:
        key = str(entry_id)
        for entry in self._entries:
            if str(entry.id) == key:
                return entry
        return None

    def _close(self, entry: TimeEntry, now: datetime) -> None:
        if now < entry.start_time:
            logger.warning(
                f"Clock is behind the start of entry {entry.id}; using its start time"
            )
            now = entry.start_time
        entry.end_time = now
        entry.total_time = elapsed_ms(entry.start_time, now)
        entry.updated_at = now
        if self._active.get(entry.user_id) == entry.id:
            del self._active[entry.user_id]

    def _open(
        self,
        user_id: str,
        task: str,
        jurisdiction: str,
        task_type: TaskType,
        case_id: Optional[str],
    ) -> TimeEntry:
        now = self.clock.now()

        # Close the previous session first so its end never follows the new start
        current = self.active_entry(user_id)
        if current:
            self._close(current, now)
            logger.info(f"Closed entry {current.id} ({current.task}) before starting a new one")

        entry = TimeEntry(
            user_id=user_id,
            task=task,
            jurisdiction=jurisdiction,
            task_type=task_type,
            start_time=now,
            case_id=case_id,
            created_at=now,
            updated_at=now,
        )
        self._entries.append(entry)
        self._active[user_id] = entry.id
        logger.info(f"Started entry {entry.id}: {task} [{task_type.value}] for {user_id}")
        return entry

    def start_entry(
        self,
        task: str,
        jurisdiction: str,
        user_id: str,
        case_id: Optional[str] = None,
    ) -> TimeEntry:
        """Start tracking a new task for a user.

        Any entry the user still has running is closed first.

        Args:
            task: Task name
            jurisdiction: Jurisdiction label
            user_id: Owner of the entry
            case_id: Optional case identifier

        Returns:
            Created entry

        Raises:
            ValidationError: If task or jurisdiction is empty
        """
        if not task or not task.strip():
            raise ValidationError("Task is required")
        if not jurisdiction or not jurisdiction.strip():
            raise ValidationError("Jurisdiction is required")

        task = task.strip()
        case_id = case_id.strip() if case_id else None
        return self._open(
            user_id,
            task,
            jurisdiction.strip(),
            self.classifier.classify(task),
            case_id or None,
        )

    def start_quick_action(self, task: str, user_id: str) -> TimeEntry:
        """Start a non-productive activity (break, lunch, meeting, ...).

        Args:
            task: Activity name
            user_id: Owner of the entry

        Returns:
            Created entry, always of type Non-Prod

        Raises:
            ValidationError: If task is empty
        """
        if not task or not task.strip():
            raise ValidationError("Activity is required")

        task = task.strip()
        jurisdiction = LUNCH_JURISDICTION if normalize_task(task) == "LUNCH" else ""
        return self._open(user_id, task, jurisdiction, TaskType.NON_PROD, None)

    def end_entry(self, entry_id: Union[UUID, str]) -> TimeEntry:
        """End a running entry.

        Args:
            entry_id: ID of entry to end

        Returns:
            Updated entry

        Raises:
            NotFoundError: If entry does not exist
            AlreadyClosedError: If entry was already ended
        """
        entry = self._find(entry_id)
        if entry is None:
            raise NotFoundError(f"Entry not found: {entry_id}")
        if not entry.is_active:
            raise AlreadyClosedError(f"Entry already ended: {entry_id}")

        self._close(entry, self.clock.now())
        logger.info(f"Ended entry {entry.id} after {entry.total_time} ms")
        return entry

    def stop_active(self, user_id: str) -> Optional[TimeEntry]:
        """End the user's running entry, if any.

        Returns:
            Ended entry or None if nothing was running
        """
        current = self.active_entry(user_id)
        if current is None:
            return None
        return self.end_entry(current.id)

    def active_entry(self, user_id: str) -> Optional[TimeEntry]:
        """Get the user's running entry."""
        entry_id = self._active.get(user_id)
        if entry_id is None:
            return None
        return self._find(entry_id)

    def delete_entry(self, entry_id: Union[UUID, str]) -> None:
        """Delete an entry by ID.

        A running entry is removed as is, without being ended first.
        Unknown IDs are ignored.

        Args:
            entry_id: ID of entry to delete
        """
        entry = self._find(entry_id)
        if entry is None:
            logger.debug(f"Delete ignored, no entry {entry_id}")
            return

        self._entries.remove(entry)
        if self._active.get(entry.user_id) == entry.id:
            del self._active[entry.user_id]
        logger.info(f"Deleted entry {entry.id}")

    def get_entry(self, entry_id: Union[UUID, str]) -> TimeEntry:
        """Get an entry by ID.

        Raises:
            NotFoundError: If entry does not exist
        """
        entry = self._find(entry_id)
        if entry is None:
            raise NotFoundError(f"Entry not found: {entry_id}")
        return entry

    def list_entries(self, user_id: str) -> list[TimeEntry]:
        """Get a user's entries in the order they were started."""
        return [e for e in self._entries if e.user_id == user_id]

    def all_entries(self) -> list[TimeEntry]:
        """Get every user's entries in insertion order."""
        return list(self._entries)
