"""
EventRegistry: synchronous, process-local publish/subscribe.

Purpose
-------
Maps event kinds to ordered, unique sets of listeners and dispatches
payloads to them in-line on the caller's stack.

Responsibilities
----------------
- Subscribe/unsubscribe listeners, singly or in batches
- One-shot (`once`) listeners with guaranteed removal
- Synchronous dispatch in insertion order
- Introspection: kinds, listener sets, counts
- Metrics collection and log-context enrichment during dispatch

Design Decisions
----------------
- **Instance-based**: applications construct their registry at the
  composition root and pass it along; independent instances keep tests
  isolated. `herald.event.get_event_registry()` offers a lazy
  process-wide instance for code that wants one.
- **Idempotent membership**: re-subscribing a listener is a no-op.
- **Empty entries persist**: removing the last listener of a kind keeps
  the kind in `events` until `clear_all()`.
- **Snapshot dispatch with live removal**: the listener set is copied when
  a dispatch starts. Listeners added during the pass wait for the next
  dispatch; listeners removed during the pass are skipped if not yet
  reached.
- **No error isolation**: a raising listener is logged and counted, then
  the exception propagates out of `dispatch` and the rest of the pass is
  abandoned. One-shot listeners are removed before they run, so they stay
  removed even when they raise.
- **Metrics only for registered kinds**: dispatching a kind that has no
  entry is a no-op and leaves the metrics untouched.
- **Config-driven**: metrics, signature validation and per-dispatch debug
  logging are read from ConfigManager (`event.*` keys).

Thread Safety
-------------
None. In a multi-threaded host every call needs external synchronization.
"""

from __future__ import annotations

import inspect
from typing import Any, Generic, Iterable, Optional

from herald.config.manager import ConfigManager
from herald.event.context import event_log_context
from herald.event.errors import describe_listener, log_listener_error
from herald.event.listener_set import ListenerSet
from herald.event.metrics import EventMetrics, EventMetricsRecorder
from herald.event.once import OnceListener
from herald.event.types import EventKindT, EventPayload, Listener
from herald.exceptions import ListenerSignatureError
from herald.logging.logger import get_logger

logger = get_logger(__name__)


class EventRegistry(Generic[EventKindT]):
    """
    Registry of event kinds and their listeners.

    Examples
    --------
    >>> registry = EventRegistry()
    >>> registry.subscribe(EventKind.USER_CREATED, send_welcome_mail)
    True
    >>> registry.once(EventKind.SERVER_STARTED, warm_caches)
    True
    >>> registry.dispatch(EventKind.USER_CREATED, {"id": 7})
    1
    """

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        metrics: Optional[EventMetricsRecorder] = None,
        *,
        enable_metrics: Optional[bool] = None,
        validate_signatures: Optional[bool] = None,
        log_dispatch: Optional[bool] = None,
    ) -> None:
        """
        Initialize EventRegistry.

        Parameters
        ----------
        config_manager:
            Optional ConfigManager for `event.*` settings. Built-in defaults
            apply when None.
        metrics:
            Optional EventMetricsRecorder. Creates default if None.
        enable_metrics:
            Override for `event.metrics_enabled`.
        validate_signatures:
            Override for `event.validate_signatures`.
        log_dispatch:
            Override for `event.log_dispatch`.
        """
        self._config_manager = config_manager
        self._stack: dict[EventKindT, ListenerSet] = {}
        self._metrics = metrics or EventMetricsRecorder()

        self._metrics_enabled = self._load_flag(
            key="event.metrics_enabled", override=enable_metrics, default=True
        )
        self._validate_signatures = self._load_flag(
            key="event.validate_signatures", override=validate_signatures, default=False
        )
        self._log_dispatch = self._load_flag(
            key="event.log_dispatch", override=log_dispatch, default=True
        )

        logger.debug(
            "EventRegistry initialized",
            extra={
                "metrics_enabled": self._metrics_enabled,
                "validate_signatures": self._validate_signatures,
                "log_dispatch": self._log_dispatch,
            },
        )

    # ------------------------------------------------------------------ #
    # Configuration Loading
    # ------------------------------------------------------------------ #

    def _load_flag(self, key: str, override: Optional[bool], default: bool) -> bool:
        """Resolve a boolean setting: override → config → default."""
        if override is not None:
            return bool(override)

        if self._config_manager is None:
            return default

        value = self._config_manager.get(key, default)
        if isinstance(value, bool):
            return value

        logger.warning(
            "Ignoring non-boolean config value, using default",
            extra={"config_key": key, "config_value": repr(value), "default_value": default},
        )
        return default

    # ------------------------------------------------------------------ #
    # Listener Validation
    # ------------------------------------------------------------------ #

    @staticmethod
    def _validate_listener_signature(listener: Listener) -> None:
        """
        Ensure `listener` can be called with exactly one positional argument.

        Raises
        ------
        ListenerSignatureError:
            If the listener cannot accept a single payload.
        """
        try:
            sig = inspect.signature(listener)
        except (TypeError, ValueError):
            # Built-ins may not expose a signature; trust the caller.
            return

        try:
            sig.bind(None)
        except TypeError:
            required = [
                param
                for param in sig.parameters.values()
                if param.default is param.empty
                and param.kind not in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
            ]
            raise ListenerSignatureError(listener, len(required)) from None

    # ------------------------------------------------------------------ #
    # Subscription API
    # ------------------------------------------------------------------ #

    def subscribe(self, kind: EventKindT, listener: Listener) -> bool:
        """
        Register `listener` under `kind`.

        Returns
        -------
        bool:
            True if added, False if it was already registered for `kind`.
        """
        if self._validate_signatures:
            target = listener.listener if isinstance(listener, OnceListener) else listener
            self._validate_listener_signature(target)

        listeners = self._stack.get(kind)
        if listeners is None:
            listeners = ListenerSet()
            self._stack[kind] = listeners

        added = listeners.add(listener)

        logger.debug(
            "EventRegistry: subscribed listener" if added else "EventRegistry: listener already subscribed",
            extra={"event_kind": str(kind), "listener": describe_listener(listener)},
        )
        return added

    def unsubscribe(self, kind: EventKindT, listener: Listener) -> bool:
        """
        Remove `listener` from `kind`.

        Pending one-shot registrations of the same listener for `kind` are
        cancelled as well.

        Returns
        -------
        bool:
            True if anything was removed.
        """
        listeners = self._stack.get(kind)
        if listeners is None:
            return False

        removed = listeners.discard(listener)

        if not isinstance(listener, OnceListener):
            pending = [
                member
                for member in listeners
                if isinstance(member, OnceListener) and member.wraps(listener)
            ]
            for member in pending:
                removed = listeners.discard(member) or removed

        if removed:
            logger.debug(
                "EventRegistry: unsubscribed listener",
                extra={"event_kind": str(kind), "listener": describe_listener(listener)},
            )
        return removed

    def once(self, kind: EventKindT, listener: Listener) -> bool:
        """
        Register `listener` for the next dispatch of `kind` only.

        Every call arms a separate delivery, so calling `once` twice for the
        same listener invokes it twice on the next dispatch.

        Returns
        -------
        bool:
            True once the wrapper is registered.
        """
        return self.subscribe(kind, OnceListener(self, kind, listener))

    def batch(self, kind: EventKindT, listeners: Iterable[Listener]) -> int:
        """Subscribe every listener to `kind`; returns how many were new."""
        return sum(self.subscribe(kind, listener) for listener in listeners)

    def batch_once(self, kind: EventKindT, listeners: Iterable[Listener]) -> int:
        """Register every listener as one-shot for `kind`; returns how many were new."""
        return sum(self.once(kind, listener) for listener in listeners)

    def multiple(self, kinds: Iterable[EventKindT], listener: Listener) -> int:
        """Subscribe `listener` to each kind independently; returns how many were new."""
        return sum(self.subscribe(kind, listener) for kind in kinds)

    def multiple_once(self, kinds: Iterable[EventKindT], listener: Listener) -> int:
        """Register `listener` as one-shot per kind; each kind fires it separately."""
        return sum(self.once(kind, listener) for kind in kinds)

    def clear(self, kind: EventKindT) -> int:
        """
        Remove all listeners of `kind`, keeping the kind registered.

        Returns
        -------
        int:
            Number of listeners removed.
        """
        listeners = self._stack.get(kind)
        if listeners is None:
            return 0

        removed = listeners.clear()
        logger.debug(
            "EventRegistry: cleared kind",
            extra={"event_kind": str(kind), "removed_listeners": removed},
        )
        return removed

    def clear_all(self) -> int:
        """
        Remove every kind and listener.

        Returns
        -------
        int:
            Total number of listeners before clearing.
        """
        total = self.listener_count()
        kinds = len(self._stack)
        self._stack.clear()

        logger.info(
            "EventRegistry: cleared all listeners",
            extra={"previous_kind_count": kinds, "previous_listener_count": total},
        )
        return total

    # ------------------------------------------------------------------ #
    # Dispatch API
    # ------------------------------------------------------------------ #

    def _is_subscribed(self, kind: EventKindT, listener: Listener) -> bool:
        listeners = self._stack.get(kind)
        return listeners is not None and listener in listeners

    def dispatch(self, kind: EventKindT, payload: Optional[EventPayload] = None) -> int:
        """
        Invoke every listener registered for `kind` with `payload`.

        Runs synchronously in insertion order. Listeners may subscribe,
        unsubscribe or dispatch re-entrantly; see the module docstring for
        how that affects the current pass. An exception raised by a
        listener propagates to the caller.

        Parameters
        ----------
        kind:
            Event kind to dispatch.
        payload:
            Record passed to each listener. `None` is delivered as `{}`.

        Returns
        -------
        int:
            Number of listeners invoked.

        Examples
        --------
        >>> registry.dispatch("user:created", {"id": 7})
        2
        """
        payload = {} if payload is None else payload

        listeners = self._stack.get(kind)
        snapshot = listeners.snapshot() if listeners is not None else ()

        if self._log_dispatch:
            logger.debug(
                "EventRegistry: dispatching event",
                extra={
                    "event_kind": str(kind),
                    "payload_keys": list(payload),
                    "listener_count": len(snapshot),
                },
            )

        invoked = 0
        try:
            with event_log_context(kind, payload):
                for listener in snapshot:
                    if not self._is_subscribed(kind, listener):
                        continue
                    invoked += 1
                    try:
                        listener(payload)
                    except Exception as exc:
                        log_listener_error(
                            logger=logger,
                            kind=kind,
                            listener=listener,
                            exc=exc,
                            metrics=self._metrics if self._metrics_enabled else None,
                        )
                        raise
        finally:
            if self._metrics_enabled and listeners is not None:
                self._metrics.record_dispatch(kind, invoked)

        return invoked

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def get(self, kind: EventKindT) -> Optional[ListenerSet]:
        """
        Live listener set for `kind`, or None if the kind was never registered.

        The returned set is the registry's own; treat it as read-only.
        """
        return self._stack.get(kind)

    @property
    def events(self) -> list[EventKindT]:
        """Registered kinds, including empty ones, in first-registration order."""
        return list(self._stack.keys())

    @property
    def listeners(self) -> list[ListenerSet]:
        """Listener sets, positionally aligned with `events`."""
        return list(self._stack.values())

    @property
    def count(self) -> int:
        """Number of registered kinds (not listeners)."""
        return len(self._stack)

    @property
    def empty(self) -> bool:
        return not self._stack

    def listener_count(self, kind: Optional[EventKindT] = None) -> int:
        """
        Number of listeners for `kind`, or across all kinds when omitted.

        >>> registry.listener_count()
        42
        >>> registry.listener_count("user:created")
        5
        """
        if kind is not None:
            listeners = self._stack.get(kind)
            return len(listeners) if listeners is not None else 0
        return sum(len(listeners) for listeners in self._stack.values())

    def has_listeners(self, kind: EventKindT) -> bool:
        return self.listener_count(kind) > 0

    def __len__(self) -> int:
        return len(self._stack)

    def __contains__(self, kind: object) -> bool:
        return kind in self._stack

    def __repr__(self) -> str:
        return f"EventRegistry(kinds={len(self._stack)}, listeners={self.listener_count()})"

    # ------------------------------------------------------------------ #
    # Metrics
    # ------------------------------------------------------------------ #

    @property
    def metrics_enabled(self) -> bool:
        return self._metrics_enabled

    def get_metrics(self) -> Optional[EventMetrics]:
        """
        Return an immutable snapshot of current metrics.

        Returns
        -------
        Optional[EventMetrics]:
            Metrics snapshot if metrics are enabled, None otherwise.
        """
        if not self._metrics_enabled:
            return None
        return self._metrics.snapshot(total_listeners=self.listener_count())

    def get_metrics_summary(self) -> dict[str, Any]:
        """Formatted metrics summary, or `{}` when metrics are disabled."""
        metrics = self.get_metrics()
        if metrics is None:
            return {}
        return metrics.get_summary()

    def reset_metrics(self) -> None:
        self._metrics.reset()
