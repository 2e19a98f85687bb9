"""Shared CLI wiring: configuration, storage and the signed-in user."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from legal_time.analysis.reports import ReportGenerator
from legal_time.core.accounts import AccountService
from legal_time.core.config import ConfigManager
from legal_time.core.exceptions import NotFoundError
from legal_time.core.models import User
from legal_time.core.storage import StorageManager
from legal_time.core.tracker import TimeTracker

console = Console()
error_console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level_name: str) -> None:
    """Send package logs to stderr at the configured level."""
    package_logger = logging.getLogger("legal_time")
    package_logger.setLevel(getattr(logging, level_name.upper(), logging.WARNING))

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)


class AppContext:
    """Everything a command needs, built once per invocation."""

    def __init__(
        self,
        data_dir: Optional[str] = None,
        config_path: Optional[str] = None,
        username: Optional[str] = None,
    ):
        """Initialize application context.

        Args:
            data_dir: Overrides general.data_dir from the config
            config_path: Config file. Defaults to ~/.legal-time/config.yml
            username: Acts as this user instead of the signed-in one
        """
        self.config = ConfigManager(Path(config_path) if config_path else None)
        self.storage = StorageManager(Path(data_dir or self.config.get("general.data_dir")))
        self.accounts = AccountService(self.storage)
        self.username = username
        self.week_start: str = self.config.get("general.week_start", "sunday")
        self.datetime_format = self.config.datetime_format()

        if self.config.get("advanced.backup_on_start", False):
            self.storage.backup()

    def load_tracker(self) -> TimeTracker:
        """Build a tracker over the stored entries."""
        return TimeTracker(self.storage.load_entries(), taxonomy=self.config.taxonomy())

    def format_time(self, moment: datetime) -> str:
        return moment.strftime(self.datetime_format)

    def reports(self) -> ReportGenerator:
        """Report generator using the configured display settings."""
        return ReportGenerator(
            console,
            show_seconds=self.config.get("display.show_seconds", False),
            datetime_format=self.datetime_format,
        )

    def save(self, tracker: TimeTracker) -> None:
        """Persist the tracker's entries."""
        self.storage.save_entries(tracker.all_entries())

    def current_user(self) -> User:
        """Resolve the acting user.

        Raises:
            NotFoundError: If nobody is signed in or the user is unknown
        """
        username = self.username or self.storage.load_session()
        if not username:
            raise NotFoundError("Not signed in. Use 'legal-time login USERNAME' first")
        return self.accounts.get_user(username)


def get_app(ctx: click.Context) -> AppContext:
    """Get the AppContext for this invocation, creating it on first use."""
    obj = ctx.find_root().obj
    if obj.get("app") is None:
        try:
            app = AppContext(obj.get("data_dir"), obj.get("config_path"), obj.get("user"))
        except ValueError as e:
            error_console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)
        setup_logging(app.config.get("advanced.log_level", "WARNING"))
        obj["app"] = app
    return obj["app"]
