"""Main CLI application."""

import json
import sys
from datetime import datetime
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from legal_time import __version__
from legal_time.analysis.stats import Window, aggregate, filter_window, format_duration
from legal_time.analysis.stats import summarize_users
from legal_time.cli.config_commands import config
from legal_time.cli.context import console, error_console, get_app
from legal_time.cli.export_import_commands import export_command, import_command
from legal_time.cli.user_commands import activity, login, logout, users
from legal_time.core.models import TaskType, TimeEntry

PERIOD_CHOICE = click.Choice([w.value for w in Window])
TYPE_CHOICE = click.Choice(["all"] + [t.value for t in TaskType], case_sensitive=False)


def resolve_entry(entries: list[TimeEntry], entry_id: str) -> TimeEntry:
    """Find an entry by full ID or unique ID prefix.

    Raises:
        ValueError: If no entry or more than one entry matches
    """
    matches = [e for e in entries if str(e.id).startswith(entry_id.lower())]
    if not matches:
        raise ValueError(f"Entry not found: {entry_id}")
    if len(matches) > 1:
        raise ValueError(f"Entry ID prefix is ambiguous: {entry_id}")
    return matches[0]


@click.group()
@click.version_option(version=__version__)
@click.option("--data-dir", help="Custom data directory", type=click.Path())
@click.option("--config", "config_path", help="Custom config file", type=click.Path())
@click.option("--user", envvar="LEGAL_TIME_USER", help="Act as this user")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.pass_context
def cli(
    ctx: click.Context,
    data_dir: Optional[str],
    config_path: Optional[str],
    user: Optional[str],
    no_color: bool,
) -> None:
    """Legal Time Tracker - track productive time by task and jurisdiction.

    Start and stop work sessions, log breaks, and review productivity.
    """
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    ctx.obj["config_path"] = config_path
    ctx.obj["user"] = user

    if no_color:
        console.no_color = True
        error_console.no_color = True


@cli.command()
@click.argument("task")
@click.option("-j", "--jurisdiction", required=True, help="Jurisdiction")
@click.option("-c", "--case-id", help="Case identifier")
@click.pass_context
def start(ctx: click.Context, task: str, jurisdiction: str, case_id: Optional[str]) -> None:
    """Start tracking a task. A running session is stopped first.

    Example:
        legal-time start RECORDS -j FL-Hillsborough -c 2024-CF-001
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        tracker = app.load_tracker()
        previous = tracker.active_entry(user.id)
        entry = tracker.start_entry(task, jurisdiction, user.id, case_id)
        app.save(tracker)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if previous:
        console.print(
            f"[yellow]⏹[/yellow]  Stopped: {previous.task} ({format_duration(previous.total_time)})"
        )
    console.print(f"[green]✓[/green] Started tracking: {entry.task}")
    console.print(f"  Jurisdiction: {entry.jurisdiction}")
    if entry.case_id:
        console.print(f"  Case: {entry.case_id}")
    console.print(f"  Type: {entry.task_type.value}")
    console.print(f"  Started: {app.format_time(entry.start_time)}")

    if not tracker.classifier.is_known_jurisdiction(entry.jurisdiction):
        console.print(f"[dim]Note: '{entry.jurisdiction}' is not on the jurisdiction list[/dim]")


@cli.command()
@click.argument("activity_name", metavar="ACTIVITY")
@click.pass_context
def quick(ctx: click.Context, activity_name: str) -> None:
    """Log a break, lunch, meeting or other non-productive activity.

    Example:
        legal-time quick BREAK
        legal-time quick "EMAIL CHECKING"
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        tracker = app.load_tracker()
        previous = tracker.active_entry(user.id)
        entry = tracker.start_quick_action(activity_name, user.id)
        app.save(tracker)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if previous:
        console.print(
            f"[yellow]⏹[/yellow]  Stopped: {previous.task} ({format_duration(previous.total_time)})"
        )
    console.print(f"[green]▶[/green]  Started: {entry.task} ({entry.task_type.value})")
    if not tracker.classifier.is_non_productive(entry.task):
        console.print(f"[dim]Note: '{entry.task}' is not on the non-productive menu[/dim]")


@cli.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Stop the running session.

    Example:
        legal-time stop
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        tracker = app.load_tracker()
        entry = tracker.stop_active(user.id)
        if entry is None:
            raise ValueError("No active session to end")
        app.save(tracker)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Stopped tracking: {entry.task}")
    console.print(f"  Duration: {format_duration(entry.total_time, show_seconds=True)}")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the running session.

    Example:
        legal-time status
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        entry = app.load_tracker().active_entry(user.id)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if not entry:
        console.print("[yellow]No active session[/yellow]")
        console.print('\nStart tracking with: [cyan]legal-time start TASK -j JURISDICTION[/cyan]')
        return

    elapsed = int((datetime.now() - entry.start_time).total_seconds() * 1000)

    content = f"""[bold]{entry.task}[/bold] - {entry.jurisdiction or "-"}

[dim]Type:[/dim] {entry.task_type.value}
[dim]Started:[/dim] {app.format_time(entry.start_time)}
[dim]Elapsed:[/dim] {format_duration(max(elapsed, 0), show_seconds=True)}"""

    if entry.case_id:
        content += f"\n[dim]Case:[/dim] {entry.case_id}"
    content += f"\n[dim]Entry ID:[/dim] {entry.id}"

    console.print(Panel(content, title=f"Active Session ({user.username})", border_style="green"))


@cli.command()
@click.argument("entry_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete(ctx: click.Context, entry_id: str, yes: bool) -> None:
    """Delete one of your entries by ID (or ID prefix).

    Deleting the running session discards it without recording a duration.

    Example:
        legal-time delete 3f2a9c1b
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        tracker = app.load_tracker()
        entry = resolve_entry(tracker.list_entries(user.id), entry_id)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    prompt = f"Delete '{entry.task}' started {app.format_time(entry.start_time)}?"
    if not yes and not click.confirm(prompt):
        console.print("Cancelled")
        return

    tracker.delete_entry(entry.id)
    app.save(tracker)
    console.print(f"[green]✓[/green] Deleted entry: {entry.task}")


@cli.command()
@click.option("-t", "--type", "task_type", type=TYPE_CHOICE, default="all", help="Filter by task type")
@click.option("--period", type=PERIOD_CHOICE, help="Only entries started in this period")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def log(ctx: click.Context, task_type: str, period: Optional[str], as_json: bool) -> None:
    """List your time entries.

    Example:
        legal-time log
        legal-time log -t "Prod Direct" --period week
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        entries = app.load_tracker().list_entries(user.id)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if period:
        entries = filter_window(entries, Window(period), week_start=app.week_start)

    selected_type = None
    if task_type.lower() != "all":
        selected_type = next(t for t in TaskType if t.value.lower() == task_type.lower())

    if as_json:
        if selected_type is not None:
            entries = [e for e in entries if e.task_type == selected_type]
        print(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    app.reports().time_log_report(entries, selected_type)


@cli.command()
@click.option("--period", type=PERIOD_CHOICE, default="today", help="Time period")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def dashboard(ctx: click.Context, period: str, as_json: bool) -> None:
    """Show your productivity breakdown.

    Example:
        legal-time dashboard --period week
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        entries = app.load_tracker().list_entries(user.id)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    window = Window(period)
    stats = aggregate(entries, window, week_start=app.week_start)

    if as_json:
        print(json.dumps(stats.to_dict(), indent=2))
        return

    app.reports().dashboard_report(stats, window.label)


@cli.command()
@click.option("--period", type=PERIOD_CHOICE, default="today", help="Time period")
@click.pass_context
def admin(ctx: click.Context, period: str) -> None:
    """Review every user's productivity (admins and managers only).

    Example:
        legal-time admin --period month
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        if not user.is_admin:
            raise ValueError(f"{user.username} is not allowed to view team statistics")
        everyone = app.load_tracker().all_entries()
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    window = Window(period)
    summaries = summarize_users(
        everyone,
        app.accounts.list_users(),
        window,
        week_start=app.week_start,
    )
    app.reports().admin_report(summaries, window.label)


@cli.command()
@click.option("--jurisdictions", is_flag=True, help="List jurisdictions instead of tasks")
@click.pass_context
def tasks(ctx: click.Context, jurisdictions: bool) -> None:
    """List the configured tasks and their productivity type.

    Example:
        legal-time tasks
        legal-time tasks --jurisdictions
    """
    taxonomy = get_app(ctx).config.taxonomy()

    if jurisdictions:
        for name in taxonomy.jurisdictions:
            console.print(name)
        return

    table = Table(title="Tasks")
    table.add_column("Task", style="bold")
    table.add_column("Type")
    for name in taxonomy.prod_direct:
        table.add_row(name, f"[green]{TaskType.PROD_DIRECT.value}[/green]")
    for name in taxonomy.prod_indirect:
        table.add_row(name, f"[blue]{TaskType.PROD_INDIRECT.value}[/blue]")
    for name in taxonomy.non_productive:
        table.add_row(name, f"[yellow]{TaskType.NON_PROD.value}[/yellow] (quick)")
    console.print(table)


cli.add_command(login)
cli.add_command(logout)
cli.add_command(users)
cli.add_command(activity)
cli.add_command(config)
cli.add_command(export_command)
cli.add_command(import_command)


if __name__ == "__main__":
    cli(obj={})
