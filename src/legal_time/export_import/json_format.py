"""JSON backup and restore of time entries."""

import json
from datetime import datetime
from typing import Any, Optional

from legal_time.analysis.stats import Window, summarize
from legal_time.core.models import TimeEntry
from legal_time.export_import.base import Exporter, Importer

FORMAT_VERSION = "1.0"


class JSONExporter(Exporter):
    """Full-fidelity export that the importer can read back."""

    def get_file_extension(self) -> str:
        return ".json"

    def export_entries(
        self,
        entries: list[TimeEntry],
        window: Optional[Window] = None,
        now: Optional[datetime] = None,
        week_start: str = "sunday",
        **kwargs: Any,
    ) -> None:
        """Write entries with their raw timestamps and millisecond durations.

        Keyword options:
            include_metadata (bool): Add window, owners and bucket totals (default: True)
        """
        now = now or datetime.now()
        selected = self.select_entries(entries, window, now, week_start)

        document: dict[str, Any] = {"entries": [entry.to_dict() for entry in selected]}

        if kwargs.get("include_metadata", True):
            stats = summarize(selected)
            document["metadata"] = {
                "format_version": FORMAT_VERSION,
                "exported_at": now.isoformat(),
                "window": window.value if window else None,
                "week_start": week_start,
                "entry_count": len(selected),
                "user_ids": sorted({e.user_id for e in selected}),
                "totals": stats.to_dict(),
            }

        with open(self.output_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)


class JSONImporter(Importer):
    """Restore entries written by JSONExporter."""

    def get_file_extension(self) -> str:
        return ".json"

    def import_entries(self, **kwargs: Any) -> list[TimeEntry]:
        """Read entries from an export or from a bare list of entries.

        Each entry must end no earlier than it starts and carry exactly the
        elapsed milliseconds as total_time.

        Keyword options:
            validate (bool): Raise on the first bad entry; when False bad
                entries are skipped (default: True)
        """
        self.validate_input_path()

        try:
            with open(self.input_path, encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON file: {e}")

        if isinstance(document, dict) and "entries" in document:
            records = document["entries"]
        elif isinstance(document, list):
            records = document
        else:
            raise ValueError("JSON must contain 'entries' array or be an array itself")

        strict = kwargs.get("validate", True)
        entries = []
        for record in records:
            entry = self.build_entry(record, strict)
            if entry is not None:
                entries.append(entry)
        return entries
