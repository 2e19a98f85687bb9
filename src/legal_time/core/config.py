"""Configuration management for Legal Time Tracker."""

import copy
from pathlib import Path
from typing import Any, Optional

import yaml  # type: ignore[import-untyped]
from jsonschema import ValidationError, validate  # type: ignore[import-untyped]

from legal_time.core.taxonomy import TaskTaxonomy

_NAME_LIST = {"type": ["array", "null"], "items": {"type": "string", "minLength": 1}}


class ConfigManager:
    """Manage application configuration."""

    DEFAULT_CONFIG = {
        "version": "1.0",
        "general": {
            "data_dir": "~/.legal-time/data",
            "week_start": "sunday",
            "date_format": "%Y-%m-%d",
            "time_format": "%H:%M:%S",
        },
        "taxonomy": {
            "prod_direct": None,
            "prod_indirect": None,
            "non_productive": None,
            "jurisdictions": None,
        },
        "export": {
            "default_format": "csv",
            "include_metadata": True,
        },
        "display": {
            "show_seconds": False,
        },
        "advanced": {
            "backup_on_start": False,
            "log_level": "WARNING",
        },
    }

    CONFIG_SCHEMA = {
        "type": "object",
        "properties": {
            "version": {"type": "string"},
            "general": {
                "type": "object",
                "properties": {
                    "data_dir": {"type": "string"},
                    "week_start": {"type": "string", "enum": ["monday", "sunday"]},
                    "date_format": {"type": "string"},
                    "time_format": {"type": "string"},
                },
            },
            "taxonomy": {
                "type": "object",
                "properties": {
                    "prod_direct": _NAME_LIST,
                    "prod_indirect": _NAME_LIST,
                    "non_productive": _NAME_LIST,
                    "jurisdictions": _NAME_LIST,
                },
            },
            "export": {
                "type": "object",
                "properties": {
                    "default_format": {"type": "string", "enum": ["csv", "excel", "json"]},
                    "include_metadata": {"type": "boolean"},
                },
            },
            "display": {
                "type": "object",
                "properties": {
                    "show_seconds": {"type": "boolean"},
                },
            },
            "advanced": {
                "type": "object",
                "properties": {
                    "backup_on_start": {"type": "boolean"},
                    "log_level": {
                        "type": "string",
                        "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                    },
                },
            },
        },
        "required": ["version"],
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to config file. Defaults to ~/.legal-time/config.yml
        """
        if config_path is None:
            config_path = Path.home() / ".legal-time" / "config.yml"
        self.config_path = Path(config_path)
        self._config: dict[str, Any] = {}
        self._load_or_create()

    def _load_or_create(self) -> None:
        """Load existing config or create default."""
        if self.config_path.exists():
            with open(self.config_path, encoding="utf-8") as f:
                loaded_config = yaml.safe_load(f) or {}
            self._config = self._merge_with_defaults(loaded_config)
            try:
                self.validate()
            except ValueError as e:
                # Keep the broken file around and continue on defaults
                backup_path = self.config_path.with_suffix(".yml.backup")
                self.config_path.rename(backup_path)
                self._config = copy.deepcopy(self.DEFAULT_CONFIG)
                self.save()
                raise ValueError(
                    f"Config validation failed, backed up to {backup_path}. "
                    f"Using defaults. Error: {e}"
                )
        else:
            self._config = copy.deepcopy(self.DEFAULT_CONFIG)
            self.save()

    def _merge_with_defaults(self, config: dict[str, Any]) -> dict[str, Any]:
        """Merge config with defaults to ensure all keys exist."""
        result = copy.deepcopy(self.DEFAULT_CONFIG)
        self._deep_merge(result, config)
        return result

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> None:
        """Deep merge override into base dictionary (in-place)."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., 'general.week_start')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get('general.week_start')
            'sunday'
            >>> config.get('nonexistent.key', 'default')
            'default'
        """
        keys = key.split(".")
        value: Any = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
            if value is None:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key: Configuration key in dot notation
            value: Value to set

        Raises:
            ValueError: If configuration is invalid after setting
        """
        previous = copy.deepcopy(self._config)
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value
        try:
            self.validate()
        except ValueError:
            self._config = previous
            raise
        self.save()

    def validate(self) -> bool:
        """Validate configuration against schema.

        Returns:
            True if valid

        Raises:
            ValueError: If configuration is invalid
        """
        try:
            validate(instance=self._config, schema=self.CONFIG_SCHEMA)
            return True
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e.message}")

    def save(self) -> None:
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self._config, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

    def reset(self) -> None:
        """Reset to default configuration."""
        self._config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.save()

    def to_dict(self) -> dict[str, Any]:
        """Get full configuration as dictionary."""
        return copy.deepcopy(self._config)

    def get_all_keys(self, prefix: str = "") -> list[str]:
        """Get all configuration keys in dot notation.

        Example:
            >>> config.get_all_keys()
            ['version', 'general.data_dir', 'general.week_start', ...]
        """
        keys = []
        config = self._config if not prefix else self.get(prefix, {})

        if isinstance(config, dict):
            for key, value in config.items():
                full_key = f"{prefix}.{key}" if prefix else key
                if isinstance(value, dict):
                    keys.extend(self.get_all_keys(full_key))
                else:
                    keys.append(full_key)
        return keys

    def taxonomy(self) -> TaskTaxonomy:
        """Build the task taxonomy, using built-in lists for unset keys."""
        return TaskTaxonomy.from_lists(
            prod_direct=self.get("taxonomy.prod_direct"),
            prod_indirect=self.get("taxonomy.prod_indirect"),
            non_productive=self.get("taxonomy.non_productive"),
            jurisdictions=self.get("taxonomy.jurisdictions"),
        )

    def datetime_format(self) -> str:
        """strftime format for timestamps shown to the user."""
        date_format = self.get("general.date_format", "%Y-%m-%d")
        time_format = self.get("general.time_format", "%H:%M:%S")
        return f"{date_format} {time_format}"
