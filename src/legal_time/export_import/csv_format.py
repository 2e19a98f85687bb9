"""CSV export of the time log."""

import csv
from datetime import datetime
from typing import Any, Optional

from legal_time.analysis.stats import Window, format_duration
from legal_time.core.models import TimeEntry
from legal_time.export_import.base import Exporter

CSV_HEADERS = [
    "Case ID",
    "Task",
    "Jurisdiction",
    "Start Time",
    "End Time",
    "Total Time",
    "Task Type",
]


class CSVExporter(Exporter):
    """Export the time log as a spreadsheet-friendly CSV file."""

    def get_file_extension(self) -> str:
        return ".csv"

    def export_entries(
        self,
        entries: list[TimeEntry],
        window: Optional[Window] = None,
        now: Optional[datetime] = None,
        week_start: str = "sunday",
        **kwargs: Any,
    ) -> None:
        """Export entries to CSV, one row per entry.

        Active entries show 'Active' for end and total time. Every field is
        quoted.
        """
        selected = self.select_entries(entries, window, now, week_start)

        with open(self.output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_ALL)
            writer.writerow(CSV_HEADERS)
            for entry in selected:
                writer.writerow(
                    [
                        entry.case_id or "",
                        entry.task,
                        entry.jurisdiction,
                        self.format_time(entry.start_time),
                        self.format_time(entry.end_time),
                        format_duration(entry.total_time),
                        entry.task_type.value,
                    ]
                )
