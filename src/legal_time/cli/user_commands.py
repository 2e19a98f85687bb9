"""CLI commands for user accounts and the activity log."""

import sys

import click
from rich.table import Table

from legal_time.analysis.stats import format_duration
from legal_time.cli.context import console, error_console, get_app
from legal_time.core.models import USER_ROLES


@click.command()
@click.argument("username")
@click.pass_context
def login(ctx: click.Context, username: str) -> None:
    """Sign in as USERNAME on this machine.

    Example:
        legal-time login AJ
    """
    app = get_app(ctx)

    try:
        user = app.accounts.sign_in(username)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    app.storage.save_session(user.username)
    console.print(f"[green]✓[/green] Welcome back, {user.username}")


@click.command()
@click.pass_context
def logout(ctx: click.Context) -> None:
    """Sign out, stopping any running session.

    Example:
        legal-time logout
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        tracker = app.load_tracker()
        stopped = app.accounts.sign_out(user.username, tracker)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if stopped:
        app.save(tracker)
        console.print(
            f"[yellow]⏹[/yellow]  Stopped: {stopped.task} ({format_duration(stopped.total_time)})"
        )
    app.storage.clear_session()
    console.print(f"[green]✓[/green] Signed out {user.username}")


@click.group()
def users() -> None:
    """Manage user accounts."""


@users.command("register")
@click.argument("username")
@click.argument("email")
@click.option("--role", type=click.Choice(USER_ROLES), default="user", help="Account role")
@click.pass_context
def users_register(ctx: click.Context, username: str, email: str, role: str) -> None:
    """Register a new user.

    Example:
        legal-time users register Gen gen@example.com
    """
    app = get_app(ctx)

    try:
        user = app.accounts.register(username, email, role)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Registered {user.username} ({user.role})")


@users.command("list")
@click.pass_context
def users_list(ctx: click.Context) -> None:
    """List registered users."""
    app = get_app(ctx)
    registered = app.accounts.list_users()

    if not registered:
        console.print("[yellow]No users registered[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("Username", style="bold")
    table.add_column("Email")
    table.add_column("Role", style="cyan")
    table.add_column("Status")
    table.add_column("Registered", style="dim")

    date_format = app.config.get("general.date_format", "%Y-%m-%d")
    for user in registered:
        state = "[green]active[/green]" if user.is_active else "[red]inactive[/red]"
        table.add_row(
            user.username, user.email, user.role, state, user.created_at.strftime(date_format)
        )

    console.print(table)


@users.command("deactivate")
@click.argument("username")
@click.pass_context
def users_deactivate(ctx: click.Context, username: str) -> None:
    """Deactivate a user so they can no longer sign in."""
    app = get_app(ctx)

    try:
        user = app.accounts.deactivate(username)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Deactivated {user.username}")


@users.command("seed-demo")
@click.pass_context
def users_seed_demo(ctx: click.Context) -> None:
    """Create the demo accounts on an empty registry."""
    app = get_app(ctx)
    created = app.accounts.seed_demo_users()

    if not created:
        console.print("[yellow]Users already registered, nothing seeded[/yellow]")
        return

    console.print(
        f"[green]✓[/green] Created {len(created)} demo users: "
        + ", ".join(u.username for u in created)
    )


@click.command()
@click.option("--all", "show_all", is_flag=True, help="Everyone's activity (admins only)")
@click.option("-n", "--count", default=20, help="Number of records to show")
@click.pass_context
def activity(ctx: click.Context, show_all: bool, count: int) -> None:
    """Show recent account activity (logins, logouts, registrations).

    Example:
        legal-time activity
        legal-time activity --all
    """
    app = get_app(ctx)

    try:
        user = app.current_user()
        if show_all and not user.is_admin:
            raise ValueError(f"{user.username} is not allowed to view everyone's activity")
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    records = app.accounts.activity(None if show_all else user.id)[:count]

    if not records:
        console.print("[yellow]No activity recorded[/yellow]")
        return

    table = Table(title="Activity")
    table.add_column("Time", style="cyan")
    table.add_column("User", style="bold")
    table.add_column("Action")
    table.add_column("Details", style="dim")

    for record in records:
        table.add_row(
            app.format_time(record.timestamp),
            record.username,
            record.action,
            record.details or "",
        )

    console.print(table)
