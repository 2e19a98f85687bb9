"""CSV storage manager with atomic operations."""

import csv
import logging
import os
import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from legal_time.core.models import ActivityLog, TimeEntry, User

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENTRY_FIELDS = [
    "id",
    "user_id",
    "case_id",
    "task",
    "jurisdiction",
    "task_type",
    "start_time",
    "end_time",
    "total_time",
    "created_at",
    "updated_at",
]

USER_FIELDS = ["id", "username", "email", "role", "status", "created_at"]

ACTIVITY_FIELDS = ["id", "user_id", "username", "action", "timestamp", "details"]


def _lock_file(file_obj: Any, exclusive: bool = True) -> None:
    """Lock a file in a cross-platform way.

    Args:
        file_obj: File object to lock
        exclusive: If True, acquire exclusive lock; if False, acquire shared lock
    """
    if sys.platform == "win32":
        import msvcrt  # type: ignore[import-not-found]

        mode = msvcrt.LK_NBLCK if exclusive else msvcrt.LK_NBRLCK
        msvcrt.locking(file_obj.fileno(), mode, 1)
    else:
        import fcntl  # type: ignore[import-not-found]

        mode = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(file_obj.fileno(), mode)


def _unlock_file(file_obj: Any) -> None:
    """Unlock a file in a cross-platform way."""
    if sys.platform == "win32":
        import msvcrt  # type: ignore[import-not-found]

        msvcrt.locking(file_obj.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        import fcntl  # type: ignore[import-not-found]

        fcntl.flock(file_obj.fileno(), fcntl.LOCK_UN)


class StorageManager:
    """Persists entries, users and the activity log as CSV files.

    The tracker keeps entries in memory; callers load them before an
    operation and save them after a mutation.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize storage manager.

        Args:
            data_dir: Custom data directory. Defaults to ~/.legal-time/data
        """
        if data_dir is None:
            data_dir = Path.home() / ".legal-time" / "data"

        self.data_dir = Path(data_dir).expanduser()
        self.entries_file = self.data_dir / "entries.csv"
        self.users_file = self.data_dir / "users.csv"
        self.activity_file = self.data_dir / "activity.csv"
        self.session_file = self.data_dir / "session"
        self.backup_dir = self.data_dir.parent / "backups"

        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.backup_dir.mkdir(parents=True, exist_ok=True)

        self._initialize_files()

    def _initialize_files(self) -> None:
        """Create CSV files with headers if they don't exist."""
        for file_path, fieldnames in (
            (self.entries_file, ENTRY_FIELDS),
            (self.users_file, USER_FIELDS),
            (self.activity_file, ACTIVITY_FIELDS),
        ):
            if not file_path.exists():
                self._write_csv_atomic(file_path, fieldnames, [])

    def _write_csv_atomic(
        self, file_path: Path, fieldnames: list[str], rows: list[dict[str, Any]]
    ) -> None:
        """Write CSV file atomically using temporary file and rename.

        Args:
            file_path: Target file path
            fieldnames: CSV field names
            rows: List of row dictionaries
        """
        temp_file = file_path.with_suffix(".tmp")

        try:
            with open(temp_file, "w", newline="", encoding="utf-8") as f:
                _lock_file(f, exclusive=True)

                writer = csv.DictWriter(f, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(rows)

                f.flush()
                os.fsync(f.fileno())

                _unlock_file(f)

            temp_file.replace(file_path)

        except Exception:
            if temp_file.exists():
                temp_file.unlink()
            raise

    def _read_csv(self, file_path: Path) -> list[dict[str, Any]]:
        """Read CSV file with a shared lock.

        Args:
            file_path: CSV file to read

        Returns:
            List of row dictionaries
        """
        if not file_path.exists():
            return []

        with open(file_path, newline="", encoding="utf-8") as f:
            _lock_file(f, exclusive=False)

            try:
                reader = csv.DictReader(f)
                rows = list(reader)
            finally:
                _unlock_file(f)

        return rows

    def _parse_rows(self, file_path: Path, parse: Callable[[dict[str, Any]], T]) -> list[T]:
        records = []
        for line_no, row in enumerate(self._read_csv(file_path), start=2):
            try:
                records.append(parse(row))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Corrupt row {line_no} in {file_path}: {e}") from e
        return records

    def backup(self, label: Optional[str] = None) -> Path:
        """Create backup of all data files.

        Args:
            label: Optional label for backup. Defaults to timestamp

        Returns:
            Path to backup directory
        """
        if label is None:
            label = datetime.now().strftime("%Y%m%d_%H%M%S")

        backup_path = self.backup_dir / label
        backup_path.mkdir(parents=True, exist_ok=True)

        for file in [self.entries_file, self.users_file, self.activity_file]:
            if file.exists():
                shutil.copy2(file, backup_path / file.name)

        logger.info(f"Backed up data files to {backup_path}")
        return backup_path

    # Entry operations

    def load_entries(self) -> list[TimeEntry]:
        """Load all entries in the order they were saved.

        Raises:
            ValueError: If a row cannot be parsed
        """
        return self._parse_rows(self.entries_file, TimeEntry.from_dict)

    def save_entries(self, entries: list[TimeEntry]) -> None:
        """Replace the stored entries.

        Args:
            entries: Every entry to keep, in insertion order
        """
        self._write_csv_atomic(
            self.entries_file, ENTRY_FIELDS, [entry.to_dict() for entry in entries]
        )
        logger.debug(f"Saved {len(entries)} entries")

    # User operations

    def load_users(self) -> list[User]:
        """Load all registered users."""
        return self._parse_rows(self.users_file, User.from_dict)

    def save_users(self, users: list[User]) -> None:
        """Replace the stored users."""
        self._write_csv_atomic(self.users_file, USER_FIELDS, [u.to_dict() for u in users])

    # Activity log

    def load_activity(self) -> list[ActivityLog]:
        """Load the activity log, oldest first."""
        return self._parse_rows(self.activity_file, ActivityLog.from_dict)

    def append_activity(self, log: ActivityLog) -> None:
        """Append one record to the activity log."""
        rows = self._read_csv(self.activity_file)
        rows.append(log.to_dict())
        self._write_csv_atomic(self.activity_file, ACTIVITY_FIELDS, rows)

    # Signed-in user

    def load_session(self) -> Optional[str]:
        """Get the username signed in on this machine, if any."""
        if not self.session_file.exists():
            return None
        username = self.session_file.read_text(encoding="utf-8").strip()
        return username or None

    def save_session(self, username: str) -> None:
        """Remember the signed-in username."""
        self.session_file.write_text(username, encoding="utf-8")

    def clear_session(self) -> None:
        """Forget the signed-in username."""
        if self.session_file.exists():
            self.session_file.unlink()
