"""Report rendering for time tracking data."""

from datetime import datetime
from typing import Optional

from rich.console import Console  # type: ignore[import-not-found]
from rich.table import Table  # type: ignore[import-not-found]
from rich.text import Text  # type: ignore[import-not-found]

from legal_time.analysis.stats import DATETIME_FORMAT, Stats, UserSummary, format_duration
from legal_time.core.models import TaskType, TimeEntry

TASK_TYPE_STYLES = {
    TaskType.PROD_DIRECT: "green",
    TaskType.PROD_INDIRECT: "blue",
    TaskType.NON_PROD: "yellow",
    TaskType.UNCATEGORIZED: "dim",
}


class ReportGenerator:
    """Render dashboards and logs to a rich console."""

    def __init__(
        self,
        console: Optional[Console] = None,
        show_seconds: bool = False,
        datetime_format: str = DATETIME_FORMAT,
    ):
        """Initialize report generator.

        Args:
            console: Rich console for output. Creates default if None.
            show_seconds: Include seconds in durations
            datetime_format: strftime format for timestamps
        """
        self.console = console or Console()
        self.show_seconds = show_seconds
        self.datetime_format = datetime_format

    def _duration(self, milliseconds: Optional[int]) -> str:
        return format_duration(milliseconds, self.show_seconds)

    def _timestamp(self, moment: datetime) -> str:
        return moment.strftime(self.datetime_format)

    def dashboard_report(self, stats: Stats, period_label: str = "Today") -> None:
        """Display productivity buckets for a period.

        Args:
            stats: Aggregated statistics
            period_label: Label for the report period
        """
        self.console.print(f"\n[bold cyan]Analytics Dashboard - {period_label}[/bold cyan]\n")

        if stats.completed_sessions == 0:
            self.console.print("[yellow]No completed sessions for this period[/yellow]")
            return

        overview = Table(show_header=False, box=None, padding=(0, 2))
        overview.add_column(style="dim")
        overview.add_column(style="bold")
        overview.add_row("Total Time:", self._duration(stats.total_time))
        overview.add_row("Productive Time:", self._duration(stats.total_prod_time))
        overview.add_row("Completed Sessions:", str(stats.completed_sessions))
        self.console.print(overview)
        self.console.print()

        table = Table(title="Time by Task Type")
        table.add_column("Task Type", style="cyan")
        table.add_column("Duration", style="magenta", justify="right")
        table.add_column("% Total", style="green", justify="right")
        table.add_column("Decimal", justify="right")
        table.add_column("Bar")

        for task_type, duration, pct, decimal in (
            (
                TaskType.PROD_DIRECT,
                stats.prod_direct_time,
                stats.prod_direct_percentage,
                stats.prod_direct_decimal,
            ),
            (
                TaskType.PROD_INDIRECT,
                stats.prod_indirect_time,
                stats.prod_indirect_percentage,
                stats.prod_indirect_decimal,
            ),
            (
                TaskType.NON_PROD,
                stats.non_prod_time,
                stats.non_prod_percentage,
                stats.non_prod_decimal,
            ),
        ):
            table.add_row(
                task_type.value,
                self._duration(duration),
                f"{pct:.1f}%",
                f"{decimal:.2f}",
                self._create_bar(pct, style=TASK_TYPE_STYLES[task_type]),
            )

        self.console.print(table)

    def time_log_report(
        self,
        entries: list[TimeEntry],
        task_type: Optional[TaskType] = None,
        title: str = "My Time Log",
    ) -> None:
        """Display entries, newest first.

        Args:
            entries: Entries to display
            task_type: Only show entries of this type
            title: Table title
        """
        if task_type is not None:
            entries = [e for e in entries if e.task_type == task_type]

        if not entries:
            self.console.print("[yellow]No time entries found[/yellow]")
            return

        table = Table(title=f"{title} ({len(entries)})")
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("Case ID")
        table.add_column("Task", style="bold")
        table.add_column("Jurisdiction")
        table.add_column("Start", style="cyan")
        table.add_column("End", style="cyan")
        table.add_column("Total", style="magenta", justify="right")
        table.add_column("Type")

        for entry in sorted(entries, key=lambda e: e.start_time, reverse=True):
            task_display = f"▶ {entry.task}" if entry.is_active else entry.task
            table.add_row(
                str(entry.id)[:8],
                entry.case_id or "-",
                task_display,
                entry.jurisdiction or "-",
                self._timestamp(entry.start_time),
                self._timestamp(entry.end_time) if entry.end_time else "Active",
                self._duration(entry.total_time),
                Text(entry.task_type.value, style=TASK_TYPE_STYLES[entry.task_type]),
            )

        self.console.print(table)

    def admin_report(self, summaries: list[UserSummary], period_label: str = "Today") -> None:
        """Display the per-user productivity overview.

        Args:
            summaries: One summary per user
            period_label: Label for the report period
        """
        if not summaries:
            self.console.print("[yellow]No users registered[/yellow]")
            return

        table = Table(title=f"Team Productivity - {period_label}")
        table.add_column("User", style="bold")
        table.add_column("Role")
        table.add_column("Total", style="magenta", justify="right")
        table.add_column("Prod Direct", justify="right")
        table.add_column("Prod Indirect", justify="right")
        table.add_column("Non-Prod", justify="right")
        table.add_column("Productive %", style="green", justify="right")
        table.add_column("Sessions", justify="right")
        table.add_column("Last Activity", style="cyan")

        for summary in summaries:
            stats = summary.stats
            prod_pct = stats.prod_direct_percentage + stats.prod_indirect_percentage
            name = f"● {summary.user.username}" if summary.tracking else summary.user.username
            table.add_row(
                name,
                summary.user.role,
                self._duration(stats.total_time),
                self._duration(stats.prod_direct_time),
                self._duration(stats.prod_indirect_time),
                self._duration(stats.non_prod_time),
                f"{prod_pct:.1f}%",
                str(stats.completed_sessions),
                self._timestamp(summary.last_activity) if summary.last_activity else "-",
            )

        self.console.print(table)

    def _create_bar(self, percentage: float, width: int = 25, style: str = "blue") -> Text:
        """Create a visual bar for percentage display.

        Args:
            percentage: Percentage value (0-100)
            width: Width of the bar in characters
            style: Style of the filled part

        Returns:
            Rich Text object with colored bar
        """
        filled = int((percentage / 100) * width)
        empty = width - filled

        bar = Text()
        bar.append("█" * filled, style=style)
        bar.append("░" * empty, style="dim")

        return bar
