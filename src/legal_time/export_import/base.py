"""Shared plumbing for time log exporters and the entry importer."""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from legal_time.analysis.stats import DATETIME_FORMAT, Window, filter_window
from legal_time.core.exceptions import ValidationError
from legal_time.core.models import TimeEntry
from legal_time.core.tracker import elapsed_ms

logger = logging.getLogger(__name__)


def check_entry(entry: TimeEntry) -> None:
    """Reject an entry whose end and duration disagree.

    Raises:
        ValidationError: If the entry ends before it starts, has a duration
            without an end (or the reverse), or a duration other than the
            elapsed milliseconds
    """
    if (entry.end_time is None) != (entry.total_time is None):
        raise ValidationError(f"Entry {entry.id}: end_time and total_time must be set together")
    if entry.end_time is None:
        return
    if entry.end_time < entry.start_time:
        raise ValidationError(f"Entry {entry.id} ends before it starts")
    expected = elapsed_ms(entry.start_time, entry.end_time)
    if entry.total_time != expected:
        raise ValidationError(
            f"Entry {entry.id}: total_time {entry.total_time} ms does not match "
            f"the {expected} ms between start and end"
        )


class Exporter(ABC):
    """Writes a user's (or a team's) time log to a file."""

    def __init__(self, output_path: Path, datetime_format: str = DATETIME_FORMAT):
        """Initialize exporter.

        Args:
            output_path: File to write
            datetime_format: strftime format for start and end times
        """
        self.output_path = Path(output_path)
        self.datetime_format = datetime_format

    @abstractmethod
    def export_entries(
        self,
        entries: list[TimeEntry],
        window: Optional[Window] = None,
        now: Optional[datetime] = None,
        week_start: str = "sunday",
        **kwargs: Any,
    ) -> None:
        """Write the entries that started inside the window.

        Args:
            entries: Entries to export
            window: Today, Week or Month. Every entry when None.
            now: Reference time for the window. Defaults to the current time.
            week_start: First day of the week for the Week window
            **kwargs: Format-specific options
        """

    @abstractmethod
    def get_file_extension(self) -> str:
        """File extension including the dot, e.g. '.csv'."""

    def select_entries(
        self,
        entries: list[TimeEntry],
        window: Optional[Window],
        now: Optional[datetime],
        week_start: str,
    ) -> list[TimeEntry]:
        """Prepare the output directory and pick the entries of the window."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        if window is None:
            return list(entries)
        return filter_window(entries, window, now, week_start)

    def format_time(self, moment: Optional[datetime]) -> str:
        return moment.strftime(self.datetime_format) if moment else "Active"


class Importer(ABC):
    """Reads entries back from an export."""

    def __init__(self, input_path: Path):
        self.input_path = Path(input_path)

    @abstractmethod
    def import_entries(self, **kwargs: Any) -> list[TimeEntry]:
        """Read every valid entry from the input file.

        Raises:
            FileNotFoundError: If the input file does not exist
            ValueError: If the file cannot be parsed
            ValidationError: If an entry is invalid and validation is on
        """

    @abstractmethod
    def get_file_extension(self) -> str:
        """Expected file extension including the dot."""

    def validate_input_path(self) -> None:
        """Check the input file exists and has the expected extension.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the extension is wrong
        """
        if not self.input_path.exists():
            raise FileNotFoundError(f"Input file not found: {self.input_path}")

        expected_ext = self.get_file_extension()
        if self.input_path.suffix.lower() != expected_ext.lower():
            raise ValueError(f"Expected {expected_ext} file, got {self.input_path.suffix}")

    def build_entry(self, data: Any, strict: bool) -> Optional[TimeEntry]:
        """Turn one raw record into a checked entry.

        Args:
            data: Record as read from the file
            strict: Raise on a bad record instead of skipping it

        Returns:
            The entry, or None when a bad record is skipped

        Raises:
            ValidationError: On a bad record when strict
        """
        try:
            if not isinstance(data, dict):
                raise ValidationError(f"Expected an object, got {type(data).__name__}")
            entry = TimeEntry.from_dict(data)
            check_entry(entry)
        except (KeyError, TypeError, ValueError) as e:
            if strict:
                raise ValidationError(f"Invalid entry data: {e}") from e
            logger.warning(f"Skipping invalid entry in {self.input_path}: {e}")
            return None
        return entry
