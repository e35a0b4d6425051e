"""
Herald: process-local, synchronous publish/subscribe.

Provides a single import surface for:

- The event registry (EventRegistry, EventKind, process-wide helpers)
- Configuration (Config, ConfigManager)
- Logging (setup_logging, get_logger)
- Exceptions (HeraldException hierarchy)

This module is intentionally thin: re-exports only, no side effects beyond
loading static configuration from the environment.
"""

from __future__ import annotations

# Configuration is imported first: the logging subsystem reads it.
from herald.config import Config, ConfigManager
from herald.logging import get_logger, setup_logging, shutdown_logging
from herald.event import (
    EventKind,
    EventPayload,
    EventRegistry,
    Listener,
    ListenerSet,
    create_event_registry,
    get_event_registry,
    reset_event_registry,
    shutdown_event_system,
)
from herald.exceptions import (
    ErrorSeverity,
    HeraldException,
    ListenerSignatureError,
)

__version__ = "1.0.0"

__all__ = [
    # Event registry
    "EventRegistry",
    "EventKind",
    "EventPayload",
    "Listener",
    "ListenerSet",
    "create_event_registry",
    "get_event_registry",
    "reset_event_registry",
    "shutdown_event_system",
    # Configuration
    "Config",
    "ConfigManager",
    # Logging
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    # Exceptions
    "HeraldException",
    "ListenerSignatureError",
    "ErrorSeverity",
]
