"""
EventMetrics and EventMetricsRecorder for Herald.

Purpose
-------
Observability for the event registry: how often each kind is dispatched,
how many listener calls those dispatches made, and how many of them raised.

Design Decisions
----------------
- **Immutable snapshots**: EventMetrics is frozen; mutations go through
  the recorder.
- **Listener count is not tracked here**: it is read from the registry when
  the snapshot is taken, so it can never drift from the real state.
- **Keys are stringified**: metrics are reporting data, so event kinds are
  stored by their string form.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Hashable


@dataclass(frozen=True)
class EventMetrics:
    """
    Immutable snapshot of registry metrics.

    Attributes
    ----------
    dispatches:
        Mapping of event kind to dispatch count.
    invocations:
        Mapping of event kind to listener invocation count.
    listener_errors:
        Mapping of event kind to count of dispatches a listener raised in.
    total_listeners:
        Listeners registered across all kinds when the snapshot was taken.

    Examples
    --------
    >>> metrics = EventMetrics(
    ...     dispatches={"user:created": 40},
    ...     listener_errors={"user:created": 1},
    ...     total_listeners=3,
    ... )
    >>> metrics.get_summary()["error_rate"]
    2.5
    """

    dispatches: dict[str, int] = field(default_factory=dict)
    invocations: dict[str, int] = field(default_factory=dict)
    listener_errors: dict[str, int] = field(default_factory=dict)
    total_listeners: int = 0

    def get_summary(self) -> dict[str, Any]:
        """
        Generate a formatted summary of metrics.

        Returns
        -------
        dict[str, Any]:
            - total_dispatches / dispatches_by_kind
            - total_invocations / invocations_by_kind
            - total_errors / errors_by_kind
            - total_listeners
            - error_rate: percentage of dispatches that hit a raising listener
        """
        total_dispatches = sum(self.dispatches.values())
        total_errors = sum(self.listener_errors.values())

        error_rate = (total_errors / max(1, total_dispatches)) * 100.0

        return {
            "total_dispatches": total_dispatches,
            "dispatches_by_kind": dict(self.dispatches),
            "total_invocations": sum(self.invocations.values()),
            "invocations_by_kind": dict(self.invocations),
            "total_errors": total_errors,
            "errors_by_kind": dict(self.listener_errors),
            "total_listeners": self.total_listeners,
            "error_rate": round(error_rate, 2),
        }


class EventMetricsRecorder:
    """
    Mutable metrics recorder for EventRegistry.

    Thread Safety
    -------------
    Not thread-safe, like the registry it observes.

    Examples
    --------
    >>> recorder = EventMetricsRecorder()
    >>> recorder.record_dispatch("user:created", invoked=2)
    >>> recorder.snapshot(total_listeners=2).invocations["user:created"]
    2
    """

    def __init__(self) -> None:
        self._dispatches: defaultdict[str, int] = defaultdict(int)
        self._invocations: defaultdict[str, int] = defaultdict(int)
        self._listener_errors: defaultdict[str, int] = defaultdict(int)

    def record_dispatch(self, kind: Hashable, invoked: int) -> None:
        """Record one dispatch of `kind` that called `invoked` listeners."""
        key = str(kind)
        self._dispatches[key] += 1
        self._invocations[key] += invoked

    def record_error(self, kind: Hashable) -> None:
        """Record a listener raising during a dispatch of `kind`."""
        self._listener_errors[str(kind)] += 1

    def reset(self) -> None:
        self._dispatches.clear()
        self._invocations.clear()
        self._listener_errors.clear()

    def snapshot(self, total_listeners: int = 0) -> EventMetrics:
        """
        Return an immutable snapshot of current metrics.

        Creates new dict instances to prevent accidental mutation leaks.
        """
        return EventMetrics(
            dispatches=dict(self._dispatches),
            invocations=dict(self._invocations),
            listener_errors=dict(self._listener_errors),
            total_listeners=total_listeners,
        )
