"""Pytest configuration and shared fixtures."""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest  # type: ignore[import-not-found]

from legal_time.core.clock import FrozenClock
from legal_time.core.storage import StorageManager

# Wednesday; the week started on Sunday 2025-03-02
WEDNESDAY_9AM = datetime(2025, 3, 5, 9, 0, 0)


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest."""
    config.addinivalue_line("markers", "integration: Integration tests")


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at Wednesday 2025-03-05 09:00."""
    return FrozenClock(WEDNESDAY_9AM)


@pytest.fixture
def temp_dir() -> Path:
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def storage(temp_dir: Path) -> StorageManager:
    """Storage manager in a temporary data directory."""
    return StorageManager(temp_dir / "data")
