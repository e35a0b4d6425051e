"""
Error Handling Helpers for Herald.

Purpose
-------
Centralized reporting for listeners that raise during dispatch. The
registry does not isolate listener failures: it reports them here and then
lets the exception propagate to the caller of `dispatch`.
"""

from __future__ import annotations

import logging
from logging import Logger
from typing import Hashable, Optional

from herald.event.metrics import EventMetricsRecorder
from herald.event.once import OnceListener
from herald.event.types import Listener
from herald.exceptions import get_error_severity

_SEVERITY_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def describe_listener(listener: Listener) -> str:
    """
    Human-readable listener name for log records.

    >>> describe_listener(describe_listener)
    'herald.event.errors.describe_listener'
    """
    if isinstance(listener, OnceListener):
        return f"once({describe_listener(listener.listener)})"
    module = getattr(listener, "__module__", None) or "unknown"
    qualname = getattr(listener, "__qualname__", None) or getattr(
        listener, "__name__", None
    )
    if qualname is None:
        return repr(listener)
    return f"{module}.{qualname}"


def log_listener_error(
    *,
    logger: Logger,
    kind: Hashable,
    listener: Listener,
    exc: BaseException,
    metrics: Optional[EventMetricsRecorder],
) -> None:
    """
    Log a listener failure with full context and update metrics.

    Never raises; the caller re-raises `exc` afterwards.

    Parameters
    ----------
    logger:
        Logger instance to use.
    kind:
        Event kind that was being dispatched.
    listener:
        The listener that raised.
    exc:
        The exception that was raised.
    metrics:
        Optional EventMetricsRecorder to update. If None, metrics are skipped.
    """
    if metrics is not None:
        metrics.record_error(kind)

    level = _SEVERITY_LEVELS[get_error_severity(exc).value]
    logger.log(
        level,
        "Event listener raised",
        extra={
            "event_kind": str(kind),
            "listener": describe_listener(listener),
            "error": str(exc),
            "error_type": type(exc).__name__,
        },
        exc_info=(type(exc), exc, exc.__traceback__),
    )
