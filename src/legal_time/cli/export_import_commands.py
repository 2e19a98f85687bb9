"""Export and import CLI commands."""

import sys
from pathlib import Path
from typing import Optional

import click

from legal_time.analysis.stats import Window, format_duration
from legal_time.cli.context import console, error_console, get_app
from legal_time.core.tracker import TimeTracker
from legal_time.export_import import CSVExporter, ExcelExporter, JSONExporter, JSONImporter

EXPORTERS = {
    "csv": CSVExporter,
    "excel": ExcelExporter,
    "json": JSONExporter,
}

FORMAT_BY_EXTENSION = {
    ".csv": "csv",
    ".xlsx": "excel",
    ".json": "json",
}


@click.command(name="export")
@click.argument("output_file", type=click.Path())
@click.option(
    "--format",
    "-f",
    "export_format",
    type=click.Choice(list(EXPORTERS), case_sensitive=False),
    help="Export format (auto-detected from file extension if not specified)",
)
@click.option(
    "--period",
    type=click.Choice([w.value for w in Window]),
    help="Only entries started in this period",
)
@click.option("--all-users", is_flag=True, help="Export every user's entries (admins only)")
@click.option(
    "--include-charts/--no-charts",
    default=True,
    help="Include charts in Excel export (default: yes)",
)
@click.pass_context
def export_command(
    ctx: click.Context,
    output_file: str,
    export_format: Optional[str],
    period: Optional[str],
    all_users: bool,
    include_charts: bool,
) -> None:
    """Export your time log to CSV, Excel or JSON.

    Examples:
      legal-time export time-log.csv --period today
      legal-time export report.xlsx --period month
      legal-time export backup.json
    """
    app = get_app(ctx)
    output_path = Path(output_file)

    if not export_format:
        export_format = FORMAT_BY_EXTENSION.get(output_path.suffix.lower())
        if not export_format:
            export_format = app.config.get("export.default_format", "csv")
            extension = EXPORTERS[export_format](output_path).get_file_extension()
            output_path = output_path.with_suffix(extension)

    try:
        user = app.current_user()
        if all_users and not user.is_admin:
            raise ValueError(f"{user.username} is not allowed to export other users' entries")

        tracker = app.load_tracker()
        entries = tracker.all_entries() if all_users else tracker.list_entries(user.id)
        if not entries:
            console.print("[yellow]Warning:[/yellow] No entries to export")

        exporter = EXPORTERS[export_format](output_path, app.datetime_format)
        exporter.export_entries(
            entries,
            Window(period) if period else None,
            week_start=app.week_start,
            include_charts=include_charts,
            include_metadata=app.config.get("export.include_metadata", True),
        )
    except (OSError, ValueError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Exported entries to {output_path}")


@click.command(name="import")
@click.argument("input_file", type=click.Path(exists=True))
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be imported without actually importing",
)
@click.pass_context
def import_command(ctx: click.Context, input_file: str, dry_run: bool) -> None:
    """Import entries from a JSON export, skipping ones already stored.

    Entries are checked before anything is saved. Only admins and managers
    may import entries that belong to other users.

    Examples:
      legal-time import backup.json
      legal-time import backup.json --dry-run
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        imported = JSONImporter(Path(input_file)).import_entries()
        foreign = sorted({e.user_id for e in imported if e.user_id != user.id})
        if foreign and not user.is_admin:
            raise ValueError(
                f"{user.username} is not allowed to import entries of other users "
                f"({', '.join(foreign)})"
            )
        existing = app.storage.load_entries()
    except (OSError, ValueError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    known_ids = {e.id for e in existing}
    new_entries = [e for e in imported if e.id not in known_ids]

    console.print(f"Found {len(imported)} entries, {len(new_entries)} not yet stored")

    if dry_run:
        console.print("[yellow]Dry run - showing first 5 entries:[/yellow]")
        for i, entry in enumerate(new_entries[:5], 1):
            console.print(
                f"  {i}. {entry.task} - "
                f"{app.format_time(entry.start_time)} - "
                f"{format_duration(entry.total_time)}"
            )
        if len(new_entries) > 5:
            console.print(f"  ... and {len(new_entries) - 5} more")
        return

    if not new_entries:
        return

    # Rebuilding the tracker closes any doubled-up open entries per user
    tracker = TimeTracker(existing + new_entries, taxonomy=app.config.taxonomy())
    app.save(tracker)
    console.print(f"[green]✓[/green] Imported {len(new_entries)} entries")
