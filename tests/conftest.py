"""
Pytest Configuration and Fixtures for the Herald Test Suite
===========================================================

Purpose
-------
Centralized test fixtures for the Herald test suite: isolated registries,
call-recording listeners, configuration managers and logging isolation.

Architecture Notes
------------------
- Every test gets its own EventRegistry; the process-wide registry is reset
  around each test.
- Listeners are plain functions produced by `CallRecorder`, so identity-based
  membership behaves as it does in application code.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable, Generator, List, Tuple

import pytest

from herald.config import Config, ConfigManager
from herald.event import EventRegistry, reset_event_registry
from herald.logging import clear_log_context
from herald.logging.logger import ContextFilter

# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Configure pytest environment."""
    os.environ["HERALD_ENVIRONMENT"] = "testing"
    os.environ["HERALD_LOG_LEVEL"] = "DEBUG"
    os.environ.pop("HERALD_CONFIG_DIR", None)
    os.environ.pop("HERALD_LOG_FILE", None)
    Config.load()


@pytest.fixture(autouse=True)
def _isolate_global_state() -> Generator[None, None, None]:
    """Reset the process-wide registry and log context around every test."""
    reset_event_registry()
    clear_log_context()
    yield
    reset_event_registry()
    clear_log_context()


# ============================================================================
# LISTENER FIXTURES
# ============================================================================


class CallRecorder:
    """Produces listeners that append `(name, payload)` to a shared log."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []

    def listener(self, name: str) -> Callable[[dict], None]:
        def _listener(payload: dict) -> None:
            self.calls.append((name, payload))

        _listener.__qualname__ = f"listener_{name}"
        return _listener

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def count(self, name: str) -> int:
        return self.names().count(name)


@pytest.fixture
def recorder() -> CallRecorder:
    """
    Call-recording listener factory.

    Scope: function
    """
    return CallRecorder()


# ============================================================================
# REGISTRY FIXTURES
# ============================================================================


@pytest.fixture
def registry() -> EventRegistry:
    """
    Fresh registry with built-in defaults.

    Scope: function
    """
    return EventRegistry()


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Empty directory for YAML override files."""
    directory = tmp_path / "config"
    directory.mkdir()
    return directory


@pytest.fixture
def config_manager(config_dir: Path) -> ConfigManager:
    """
    ConfigManager reading packaged defaults plus an (empty) override dir.

    Scope: function
    """
    return ConfigManager(config_dir=config_dir)


@pytest.fixture
def mock_config_manager(mocker):
    """
    Mock ConfigManager for unit tests.

    Scope: function
    Uses: Tests that control individual `event.*` lookups
    """
    mock_config = mocker.MagicMock(spec=ConfigManager)
    mock_config.get = mocker.MagicMock(side_effect=lambda key, default=None: default)
    return mock_config


# ============================================================================
# LOGGING FIXTURES
# ============================================================================


@pytest.fixture
def preserve_root_logger() -> Generator[logging.Logger, None, None]:
    """
    Detach handlers installed by `setup_logging()` and restore the root level.

    pytest swaps its own capture handlers per test phase, so only Herald's
    handlers (recognizable by their ContextFilter) are removed here.
    """
    root = logging.getLogger()
    level = root.level
    initialized = getattr(root, "_herald_logging_initialized", False)
    yield root
    for handler in list(root.handlers):
        if any(isinstance(f, ContextFilter) for f in handler.filters):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    setattr(root, "_herald_logging_initialized", initialized)
