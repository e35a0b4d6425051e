"""
One-shot listener wrapper.

`OnceListener` is what `EventRegistry.once` subscribes in place of the
caller's listener. On invocation it unsubscribes itself from its kind
*before* calling the wrapped listener:

- removal is guaranteed even when the wrapped listener raises;
- a dispatch of the same kind made from inside the wrapped listener does
  not reach it again.

A `fired` flag additionally blocks a second call from a dispatch pass that
snapshotted the wrapper before it fired.

Each `once` call creates its own wrapper and wrappers compare by identity,
so registering the same listener twice arms two one-shot deliveries. A
wrapper is never the bare listener it wraps.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Hashable

from herald.event.listener_set import listener_key
from herald.event.types import EventPayload, Listener

if TYPE_CHECKING:
    from herald.event.registry import EventRegistry


class OnceListener:
    """Callable that delivers at most one payload to `listener`."""

    __slots__ = ("_registry", "kind", "listener", "fired")

    def __init__(self, registry: "EventRegistry[Any]", kind: Hashable, listener: Listener) -> None:
        self._registry = registry
        self.kind = kind
        self.listener = listener
        self.fired = False

    def __call__(self, payload: EventPayload) -> None:
        if self.fired:
            return
        self.fired = True
        self._registry.unsubscribe(self.kind, self)
        self.listener(payload)

    def wraps(self, listener: Listener) -> bool:
        return listener_key(self.listener) == listener_key(listener)

    def __repr__(self) -> str:
        name = getattr(self.listener, "__qualname__", None) or repr(self.listener)
        return f"OnceListener({self.kind!r}, {name})"
