"""CLI commands for configuration management."""

import json
import sys
from pathlib import Path
from typing import Any

import click  # type: ignore[import-not-found]
import yaml  # type: ignore[import-untyped]
from rich.table import Table  # type: ignore[import-not-found]

from legal_time.cli.context import console, error_console
from legal_time.core.config import ConfigManager


def _config_manager(ctx: click.Context) -> ConfigManager:
    """Open the config file chosen on the command line."""
    path = ctx.find_root().obj.get("config_path")
    try:
        return ConfigManager(Path(path) if path else None)
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@click.group()  # type: ignore[misc]
def config() -> None:
    """Manage Legal Time Tracker configuration.

    Configuration is stored in ~/.legal-time/config.yml
    """


@config.command("show")  # type: ignore[misc]
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")  # type: ignore[misc]
@click.pass_context  # type: ignore[misc]
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show all configuration settings.

    Example:
        legal-time config show
        legal-time config show --json
    """
    config_mgr = _config_manager(ctx)

    if as_json:
        print(json.dumps(config_mgr.to_dict(), indent=2))
        return

    table = Table(title="Legal Time Tracker Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key in config_mgr.get_all_keys():
        value = config_mgr.get(key)
        if isinstance(value, list):
            value = f"{len(value)} items"
        if value is None and key.startswith("taxonomy."):
            value = "(built-in)"
        table.add_row(key, str(value))

    console.print(table)
    console.print(f"\nConfig file: {config_mgr.config_path}")


@config.command("get")  # type: ignore[misc]
@click.argument("key")  # type: ignore[misc]
@click.pass_context  # type: ignore[misc]
def config_get(ctx: click.Context, key: str) -> None:
    """Get a specific configuration value.

    Uses dot notation to access nested values.

    Example:
        legal-time config get general.week_start
    """
    value = _config_manager(ctx).get(key)

    if value is None:
        error_console.print(f"[red]Error:[/red] Configuration key '{key}' not found")
        sys.exit(1)

    if isinstance(value, (dict, list)):
        console.print(json.dumps(value, indent=2))
    else:
        console.print(str(value))


@config.command("set")  # type: ignore[misc]
@click.argument("key")  # type: ignore[misc]
@click.argument("value")  # type: ignore[misc]
@click.pass_context  # type: ignore[misc]
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Set a configuration value.

    Values are parsed as YAML, so 'true', '3' and '[A, B]' become a
    boolean, an integer and a list.

    Example:
        legal-time config set general.week_start monday
        legal-time config set taxonomy.prod_direct "[RECORDS, INITIAL]"
    """
    config_mgr = _config_manager(ctx)

    try:
        converted_value: Any = yaml.safe_load(value)
    except yaml.YAMLError:
        converted_value = value

    try:
        config_mgr.set(key, converted_value)
        console.print(f"[green]✓[/green] Set {key} = {converted_value}")
    except ValueError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@config.command("reset")  # type: ignore[misc]
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")  # type: ignore[misc]
@click.pass_context  # type: ignore[misc]
def config_reset(ctx: click.Context, yes: bool) -> None:
    """Reset configuration to defaults.

    Example:
        legal-time config reset --yes
    """
    config_mgr = _config_manager(ctx)

    if not yes:
        console.print("[yellow]Warning:[/yellow] This will reset all configuration to defaults.")
        if not click.confirm("Continue?"):
            console.print("Cancelled")
            return

    config_mgr.reset()
    console.print("[green]✓[/green] Configuration reset to defaults")
