"""Pytest configuration and shared fixtures."""

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest

from reclaim.domain.config import RunConfig
from tests.helpers.fakes import CallLog

# ============================================================================
# Time Control
# ============================================================================
# Every wait in reclaim goes through time.sleep. Patching it keeps the suite
# fast and lets tests add up the time a run would have spent sleeping.


@pytest.fixture
def sleeps() -> Iterator[MagicMock]:
    """Patch time.sleep; the mock's calls record every requested sleep."""
    with patch("time.sleep") as mock_sleep:
        yield mock_sleep


# ============================================================================
# Config Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config_path(tmp_path, monkeypatch):
    """Point the config file at a temp location so user config never leaks in."""
    path = tmp_path / "config" / "config.toml"
    monkeypatch.setenv("RECLAIM_CONFIG", str(path))
    return path


# ============================================================================
# Fake Environment
# ============================================================================


@pytest.fixture
def call_log() -> CallLog:
    """Shared ordered log of external calls made by the fakes."""
    return CallLog()


@pytest.fixture
def config() -> RunConfig:
    """Run config with the documented defaults."""
    return RunConfig(
        port=11434,
        required_model="llama3.2-vision",
        wait_timeout_seconds=10,
        startup_delay_seconds=5,
    )

