"""Excel export functionality with a productivity summary."""

from collections import defaultdict
from datetime import datetime
from typing import Any, Optional

import openpyxl  # type: ignore[import-untyped]
from openpyxl.chart import PieChart, Reference  # type: ignore[import-untyped]
from openpyxl.styles import Alignment, Font, PatternFill  # type: ignore[import-untyped]
from openpyxl.utils import get_column_letter  # type: ignore[import-untyped]

from legal_time.analysis.stats import Window
from legal_time.core.models import TaskType, TimeEntry
from legal_time.export_import.base import Exporter

MS_PER_HOUR = 3_600_000


class ExcelExporter(Exporter):
    """Export time tracking data to an Excel workbook."""

    def get_file_extension(self) -> str:
        return ".xlsx"

    def export_entries(
        self,
        entries: list[TimeEntry],
        window: Optional[Window] = None,
        now: Optional[datetime] = None,
        week_start: str = "sunday",
        **kwargs: Any,
    ) -> None:
        """Export entries to an Excel file.

        Args:
            entries: List of entries to export
            window: Today, Week or Month. Every entry when None.
            now: Reference time for the window
            week_start: First day of the week for the Week window
            **kwargs: Additional options
                - include_charts (bool): Include charts (default: True)
                - include_summary (bool): Include summary sheet (default: True)
        """
        filtered_entries = self.select_entries(entries, window, now, week_start)

        wb = openpyxl.Workbook()
        wb.remove(wb.active)

        self._create_entries_sheet(wb, filtered_entries)

        if kwargs.get("include_summary", True):
            self._create_summary_sheet(wb, filtered_entries, kwargs.get("include_charts", True))

        wb.save(self.output_path)

    def _create_entries_sheet(self, wb: Any, entries: list[TimeEntry]) -> None:
        """Create the time log sheet.

        Args:
            wb: Workbook object
            entries: List of entries
        """
        ws = wb.create_sheet("Time Log")

        headers = [
            "Case ID",
            "Task",
            "Jurisdiction",
            "Start Time",
            "End Time",
            "Total (hrs)",
            "Task Type",
        ]

        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF")

        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = Alignment(horizontal="center", vertical="center")

        for row, entry in enumerate(entries, start=2):
            ws.cell(row, 1, entry.case_id or "")
            ws.cell(row, 2, entry.task)
            ws.cell(row, 3, entry.jurisdiction)
            ws.cell(row, 4, self.format_time(entry.start_time))
            if entry.end_time:
                ws.cell(row, 5, self.format_time(entry.end_time))
                ws.cell(row, 6, round((entry.total_time or 0) / MS_PER_HOUR, 2))
            else:
                ws.cell(row, 5, "Active")
                ws.cell(row, 6, "-")
            ws.cell(row, 7, entry.task_type.value)

        for col in range(1, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18

    def _create_summary_sheet(
        self, wb: Any, entries: list[TimeEntry], include_charts: bool = True
    ) -> None:
        """Create summary sheet with hours per task type and per task.

        Args:
            wb: Workbook object
            entries: List of entries
            include_charts: Whether to include a task type pie chart
        """
        ws = wb.create_sheet("Summary", 0)

        closed = [e for e in entries if e.end_time is not None]

        type_hours: dict[TaskType, float] = defaultdict(float)
        task_hours: dict[str, float] = defaultdict(float)
        for entry in closed:
            hours = (entry.total_time or 0) / MS_PER_HOUR
            type_hours[entry.task_type] += hours
            task_hours[entry.task] += hours

        ws["A1"] = "Productivity Summary"
        ws["A1"].font = Font(bold=True, size=14)

        ws["A3"] = "Completed Sessions:"
        ws["B3"] = len(closed)
        ws["A4"] = "Active Sessions:"
        ws["B4"] = len(entries) - len(closed)

        row = 6
        ws[f"A{row}"] = "Task Type"
        ws[f"B{row}"] = "Hours"
        ws[f"A{row}"].font = Font(bold=True)
        ws[f"B{row}"].font = Font(bold=True)
        type_start_row = row + 1
        for task_type in TaskType:
            row += 1
            ws[f"A{row}"] = task_type.value
            ws[f"B{row}"] = round(type_hours.get(task_type, 0.0), 2)
        type_end_row = row

        row += 2
        ws[f"A{row}"] = "Task"
        ws[f"B{row}"] = "Hours"
        ws[f"A{row}"].font = Font(bold=True)
        ws[f"B{row}"].font = Font(bold=True)
        for task, hours in sorted(task_hours.items(), key=lambda x: x[1], reverse=True):
            row += 1
            ws[f"A{row}"] = task
            ws[f"B{row}"] = round(hours, 2)

        if include_charts and closed:
            chart = PieChart()
            chart.title = "Time by Task Type"
            data = Reference(ws, min_col=2, min_row=type_start_row - 1, max_row=type_end_row)
            labels = Reference(ws, min_col=1, min_row=type_start_row, max_row=type_end_row)
            chart.add_data(data, titles_from_data=True)
            chart.set_categories(labels)
            chart.height = 10
            chart.width = 15
            ws.add_chart(chart, "D3")

        ws.column_dimensions["A"].width = 40
        ws.column_dimensions["B"].width = 15
