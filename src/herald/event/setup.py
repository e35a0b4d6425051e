"""
Event System Initialization for Herald.

Purpose
-------
Composition-root helpers for the event registry:

- `create_event_registry()` builds a registry wired to configuration.
- `get_event_registry()` returns the process-wide registry, creating it on
  first access.
- `shutdown_event_system()` clears and discards the process-wide registry.

Applications that pass their registry explicitly never need the
process-wide instance; it exists for code that has no composition root to
receive one from.
"""

from __future__ import annotations

from typing import Any, Optional

from herald.config.manager import ConfigManager
from herald.event.registry import EventRegistry
from herald.logging.logger import get_logger

logger = get_logger(__name__)

_default_registry: Optional[EventRegistry[Any]] = None


def create_event_registry(
    config_manager: Optional[ConfigManager] = None,
    **overrides: Any,
) -> EventRegistry[Any]:
    """
    Build a registry configured from YAML defaults and HERALD_CONFIG_DIR.

    Parameters
    ----------
    config_manager:
        ConfigManager to read `event.*` settings from. A fresh one is
        loaded when None.
    overrides:
        Keyword overrides forwarded to EventRegistry
        (`enable_metrics`, `validate_signatures`, `log_dispatch`).
    """
    manager = config_manager if config_manager is not None else ConfigManager()
    return EventRegistry(config_manager=manager, **overrides)


def get_event_registry() -> EventRegistry[Any]:
    """Return the process-wide registry, creating it on first access."""
    global _default_registry

    if _default_registry is None:
        _default_registry = create_event_registry()
        logger.info("Process-wide event registry created")
    return _default_registry


def reset_event_registry() -> None:
    """Forget the process-wide registry; the next access creates a new one."""
    global _default_registry
    _default_registry = None


def shutdown_event_system() -> None:
    """Clear every listener from the process-wide registry and discard it."""
    global _default_registry

    if _default_registry is None:
        return

    logger.info("Shutting down event system...")
    removed = _default_registry.clear_all()
    _default_registry = None
    logger.info("Event system shutdown complete", extra={"removed_listeners": removed})
