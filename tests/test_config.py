"""Tests for configuration management."""

from pathlib import Path

import pytest  # type: ignore[import-not-found]
import yaml

from legal_time.core.config import ConfigManager
from legal_time.core.taxonomy import DEFAULT_TAXONOMY


@pytest.fixture
def config_path(temp_dir: Path) -> Path:
    """Config file location inside the temporary directory."""
    return temp_dir / "config.yml"


class TestConfigManager:
    """Test ConfigManager."""

    def test_creates_default_file(self, config_path: Path) -> None:
        """Test that a missing config file is created with defaults."""
        config = ConfigManager(config_path)

        assert config_path.exists()
        assert config.get("general.week_start") == "sunday"
        assert config.get("export.default_format") == "csv"
        assert config.get("display.show_seconds") is False

    def test_get_default_for_missing_key(self, config_path: Path) -> None:
        """Test dot notation lookups of unknown keys."""
        config = ConfigManager(config_path)

        assert config.get("nonexistent.key", "fallback") == "fallback"
        assert config.get("general.week_start.deeper", "x") == "x"

    def test_set_persists(self, config_path: Path) -> None:
        """Test that set values are saved to disk."""
        config = ConfigManager(config_path)
        config.set("general.week_start", "monday")

        assert ConfigManager(config_path).get("general.week_start") == "monday"

    def test_set_invalid_value_rolls_back(self, config_path: Path) -> None:
        """Test that an invalid value is rejected and not kept."""
        config = ConfigManager(config_path)

        with pytest.raises(ValueError):
            config.set("general.week_start", "friday")

        assert config.get("general.week_start") == "sunday"

    def test_loads_partial_file(self, config_path: Path) -> None:
        """Test that missing keys are filled from defaults."""
        config_path.write_text(
            yaml.dump({"version": "1.0", "general": {"week_start": "monday"}}),
            encoding="utf-8",
        )

        config = ConfigManager(config_path)

        assert config.get("general.week_start") == "monday"
        assert config.get("export.include_metadata") is True

    def test_invalid_file_is_backed_up(self, config_path: Path) -> None:
        """Test that an invalid config is moved aside and replaced."""
        config_path.write_text(
            yaml.dump({"version": "1.0", "export": {"default_format": "pdf"}}),
            encoding="utf-8",
        )

        with pytest.raises(ValueError, match="backed up"):
            ConfigManager(config_path)

        assert config_path.with_suffix(".yml.backup").exists()
        assert ConfigManager(config_path).get("export.default_format") == "csv"

    def test_reset(self, config_path: Path) -> None:
        """Test resetting to defaults."""
        config = ConfigManager(config_path)
        config.set("display.show_seconds", True)

        config.reset()

        assert config.get("display.show_seconds") is False

    def test_get_all_keys(self, config_path: Path) -> None:
        """Test listing keys in dot notation."""
        keys = ConfigManager(config_path).get_all_keys()

        assert "version" in keys
        assert "general.week_start" in keys
        assert "taxonomy.prod_direct" in keys

    def test_default_taxonomy(self, config_path: Path) -> None:
        """Test that unset task lists use the built-in ones."""
        assert ConfigManager(config_path).taxonomy() == DEFAULT_TAXONOMY

    def test_custom_taxonomy(self, config_path: Path) -> None:
        """Test overriding one task list."""
        config = ConfigManager(config_path)
        config.set("taxonomy.prod_direct", ["DOCKETING", "FILING"])

        taxonomy = config.taxonomy()

        assert taxonomy.prod_direct == ("DOCKETING", "FILING")
        assert taxonomy.prod_indirect == DEFAULT_TAXONOMY.prod_indirect
