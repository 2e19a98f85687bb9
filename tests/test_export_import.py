"""Tests for export and import."""

import csv
import json
from datetime import datetime
from pathlib import Path

import openpyxl  # type: ignore[import-untyped]
import pytest  # type: ignore[import-not-found]

from legal_time.analysis.stats import Window
from legal_time.core.exceptions import ValidationError
from legal_time.core.models import TaskType, TimeEntry
from legal_time.export_import import CSVExporter, ExcelExporter, JSONExporter, JSONImporter
from legal_time.export_import.base import check_entry


@pytest.fixture
def sample_entries() -> list[TimeEntry]:
    """One closed entry per productive type plus a running break."""
    return [
        TimeEntry(
            user_id="u1",
            task="RECORDS",
            jurisdiction="FL-Hillsborough",
            task_type=TaskType.PROD_DIRECT,
            case_id="2024-CF-001",
            start_time=datetime(2025, 3, 4, 9, 0, 0),
            end_time=datetime(2025, 3, 4, 10, 30, 0),
            total_time=90 * 60_000,
        ),
        TimeEntry(
            user_id="u1",
            task="SBS",
            jurisdiction="VA-Fairfax",
            task_type=TaskType.PROD_INDIRECT,
            start_time=datetime(2025, 3, 5, 9, 0, 0),
            end_time=datetime(2025, 3, 5, 9, 30, 0),
            total_time=30 * 60_000,
        ),
        TimeEntry(
            user_id="u1",
            task="BREAK",
            jurisdiction="",
            task_type=TaskType.NON_PROD,
            start_time=datetime(2025, 3, 5, 9, 30, 0),
        ),
    ]


class TestCSVExporter:
    """Test CSV export."""

    def test_export(self, temp_dir: Path, sample_entries: list[TimeEntry]) -> None:
        """Test the exported rows."""
        output = temp_dir / "log.csv"

        CSVExporter(output).export_entries(sample_entries)

        with open(output, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == [
            "Case ID",
            "Task",
            "Jurisdiction",
            "Start Time",
            "End Time",
            "Total Time",
            "Task Type",
        ]
        assert rows[1] == [
            "2024-CF-001",
            "RECORDS",
            "FL-Hillsborough",
            "2025-03-04 09:00:00",
            "2025-03-04 10:30:00",
            "1h 30m",
            "Prod Direct",
        ]
        assert rows[3][4] == "Active"
        assert rows[3][5] == "Active"

    def test_every_field_quoted(self, temp_dir: Path, sample_entries: list[TimeEntry]) -> None:
        """Test that values are always quoted."""
        output = temp_dir / "log.csv"

        CSVExporter(output).export_entries(sample_entries)

        assert output.read_text(encoding="utf-8").startswith('"Case ID","Task"')

    def test_window_filter(self, temp_dir: Path, sample_entries: list[TimeEntry]) -> None:
        """Test exporting only the entries started today."""
        output = temp_dir / "log.csv"

        CSVExporter(output).export_entries(
            sample_entries, Window.TODAY, now=datetime(2025, 3, 5, 12, 0, 0)
        )

        with open(output, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert [row[1] for row in rows[1:]] == ["SBS", "BREAK"]

    def test_configured_datetime_format(
        self, temp_dir: Path, sample_entries: list[TimeEntry]
    ) -> None:
        """Test that start and end times use the given format."""
        output = temp_dir / "log.csv"

        CSVExporter(output, "%d/%m/%Y %H:%M").export_entries(sample_entries)

        with open(output, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[1][3:5] == ["04/03/2025 09:00", "04/03/2025 10:30"]


class TestExcelExporter:
    """Test Excel export."""

    def test_export(self, temp_dir: Path, sample_entries: list[TimeEntry]) -> None:
        """Test workbook sheets and values."""
        output = temp_dir / "report.xlsx"

        ExcelExporter(output).export_entries(sample_entries)

        wb = openpyxl.load_workbook(output)
        assert wb.sheetnames == ["Summary", "Time Log"]
        log = wb["Time Log"]
        assert log.cell(1, 1).value == "Case ID"
        assert log.cell(2, 6).value == 1.5
        assert log.cell(4, 5).value == "Active"
        summary = wb["Summary"]
        assert summary["B3"].value == 2
        assert summary["B4"].value == 1

    def test_export_without_summary(
        self, temp_dir: Path, sample_entries: list[TimeEntry]
    ) -> None:
        """Test skipping the summary sheet."""
        output = temp_dir / "report.xlsx"

        ExcelExporter(output).export_entries(sample_entries, include_summary=False)

        assert openpyxl.load_workbook(output).sheetnames == ["Time Log"]


class TestJSON:
    """Test JSON export and import."""

    def test_export_metadata(self, temp_dir: Path, sample_entries: list[TimeEntry]) -> None:
        """Test the exported document."""
        output = temp_dir / "backup.json"

        JSONExporter(output).export_entries(sample_entries)

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["metadata"]["entry_count"] == 3
        assert data["metadata"]["user_ids"] == ["u1"]
        assert data["metadata"]["totals"]["total_time"] == 120 * 60_000
        assert data["metadata"]["totals"]["completed_sessions"] == 2
        assert data["entries"][0]["task"] == "RECORDS"

    def test_export_without_metadata(
        self, temp_dir: Path, sample_entries: list[TimeEntry]
    ) -> None:
        """Test leaving out metadata."""
        output = temp_dir / "backup.json"

        JSONExporter(output).export_entries(sample_entries, include_metadata=False)

        assert "metadata" not in json.loads(output.read_text(encoding="utf-8"))

    def test_import_exported_file(
        self, temp_dir: Path, sample_entries: list[TimeEntry]
    ) -> None:
        """Test that an exported file imports the same entries."""
        output = temp_dir / "backup.json"
        JSONExporter(output).export_entries(sample_entries)

        imported = JSONImporter(output).import_entries()

        assert [e.id for e in imported] == [e.id for e in sample_entries]
        assert imported[2].is_active

    def test_import_bare_list(self, temp_dir: Path, sample_entries: list[TimeEntry]) -> None:
        """Test importing a plain array of entries."""
        path = temp_dir / "entries.json"
        path.write_text(json.dumps([sample_entries[0].to_dict()]), encoding="utf-8")

        assert len(JSONImporter(path).import_entries()) == 1

    def test_import_invalid_json(self, temp_dir: Path) -> None:
        """Test that malformed JSON is rejected."""
        path = temp_dir / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON"):
            JSONImporter(path).import_entries()

    def test_import_invalid_entry(self, temp_dir: Path) -> None:
        """Test strict and lenient handling of bad entries."""
        path = temp_dir / "bad.json"
        path.write_text(json.dumps({"entries": [{"task": "RECORDS"}]}), encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid entry"):
            JSONImporter(path).import_entries()
        assert JSONImporter(path).import_entries(validate=False) == []

    def test_import_missing_file(self, temp_dir: Path) -> None:
        """Test importing a file that does not exist."""
        with pytest.raises(FileNotFoundError):
            JSONImporter(temp_dir / "missing.json").import_entries()

    def test_import_wrong_extension(self, temp_dir: Path) -> None:
        """Test that only .json files are accepted."""
        path = temp_dir / "entries.txt"
        path.write_text("[]", encoding="utf-8")

        with pytest.raises(ValueError, match="Expected .json"):
            JSONImporter(path).import_entries()

    def test_import_rejects_end_before_start(
        self, temp_dir: Path, sample_entries: list[TimeEntry]
    ) -> None:
        """Test that an entry ending before it starts is refused."""
        record = sample_entries[0].to_dict()
        record["end_time"] = "2025-03-04T08:00:00"
        path = temp_dir / "bad.json"
        path.write_text(json.dumps([record]), encoding="utf-8")

        with pytest.raises(ValidationError, match="ends before it starts"):
            JSONImporter(path).import_entries()

    def test_import_rejects_wrong_total(
        self, temp_dir: Path, sample_entries: list[TimeEntry]
    ) -> None:
        """Test that total_time must equal the elapsed milliseconds."""
        record = sample_entries[0].to_dict()
        record["total_time"] = 999_999_999
        path = temp_dir / "bad.json"
        path.write_text(json.dumps({"entries": [record]}), encoding="utf-8")

        with pytest.raises(ValidationError, match="does not match"):
            JSONImporter(path).import_entries()

    def test_import_rejects_unknown_task_type(
        self, temp_dir: Path, sample_entries: list[TimeEntry]
    ) -> None:
        """Test that task types outside the four categories are refused."""
        record = sample_entries[0].to_dict()
        record["task_type"] = "Billable"
        path = temp_dir / "bad.json"
        path.write_text(json.dumps([record]), encoding="utf-8")

        with pytest.raises(ValidationError):
            JSONImporter(path).import_entries()

    def test_lenient_import_skips_bad_entries(
        self, temp_dir: Path, sample_entries: list[TimeEntry]
    ) -> None:
        """Test that bad entries are dropped when validation is off."""
        bad = sample_entries[0].to_dict()
        bad["end_time"] = "2025-03-04T08:00:00"
        path = temp_dir / "mixed.json"
        path.write_text(json.dumps([bad, sample_entries[1].to_dict()]), encoding="utf-8")

        imported = JSONImporter(path).import_entries(validate=False)

        assert [e.task for e in imported] == ["SBS"]


class TestCheckEntry:
    """Test the duration checks applied to imported entries."""

    def test_valid_entries(self, sample_entries: list[TimeEntry]) -> None:
        """Test that closed and running entries pass."""
        for entry in sample_entries:
            check_entry(entry)

    def test_total_without_end(self, sample_entries: list[TimeEntry]) -> None:
        """Test that a running entry cannot carry a duration."""
        entry = sample_entries[2]
        entry.total_time = 60_000

        with pytest.raises(ValidationError, match="set together"):
            check_entry(entry)

    def test_end_without_total(self, sample_entries: list[TimeEntry]) -> None:
        """Test that a closed entry needs a duration."""
        entry = sample_entries[0]
        entry.total_time = None

        with pytest.raises(ValidationError, match="set together"):
            check_entry(entry)
