"""
Core Event Types for Herald.

Purpose
-------
Provides the type definitions shared by the event registry: event payloads,
listener callables and the generic event-kind parameter.

Design Decisions
----------------
- **EventPayload as dict**: simple, open-ended key/value record.
- **Listener as Callable**: any callable taking the payload; its return
  value is ignored.
- **EventKindT as TypeVar**: the registry is generic over any hashable
  identifier. `herald.event.kinds.EventKind` is the shipped catalog.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, TypeVar

# Open-ended key/value record delivered to every listener.
EventPayload = dict[str, Any]

# Listener callback: takes a single EventPayload, result discarded.
Listener = Callable[[EventPayload], Any]

EventKindT = TypeVar("EventKindT", bound=Hashable)
