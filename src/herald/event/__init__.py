"""
Event System for Herald.

Purpose
-------
Provides the synchronous, process-local event registry, its static kind
catalog and the composition-root helpers for a process-wide instance.
"""

from herald.event.context import event_log_context
from herald.event.kinds import EventKind
from herald.event.listener_set import ListenerSet
from herald.event.metrics import EventMetrics, EventMetricsRecorder
from herald.event.once import OnceListener
from herald.event.registry import EventRegistry
from herald.event.setup import (
    create_event_registry,
    get_event_registry,
    reset_event_registry,
    shutdown_event_system,
)
from herald.event.types import EventKindT, EventPayload, Listener

__all__ = [
    "EventRegistry",
    "EventKind",
    "EventKindT",
    "EventPayload",
    "Listener",
    "ListenerSet",
    "OnceListener",
    "EventMetrics",
    "EventMetricsRecorder",
    "event_log_context",
    "create_event_registry",
    "get_event_registry",
    "reset_event_registry",
    "shutdown_event_system",
]
