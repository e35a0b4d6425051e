"""
Event Log Context Helpers for Herald.

Purpose
-------
Enrich the log context with event metadata for the duration of a dispatch,
so every record a listener emits carries the kind being dispatched.

Design Decisions
----------------
- **Scoped**: the previous context is restored when the dispatch ends, so
  nested dispatches report their own kind and the outer one resumes after.
- **Minimal payload exposure**: only payload keys are recorded, never values,
  to avoid logging sensitive data. Keys keep payload order; they are not
  sorted, since keys of mixed types do not compare.
- **Best-effort**: a failure to build the context is logged at DEBUG and
  never breaks dispatch.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Hashable, Iterator

from herald.event.types import EventPayload
from herald.logging.logger import get_logger, reset_log_context, set_log_context

logger = get_logger(__name__)


@contextmanager
def event_log_context(kind: Hashable, payload: EventPayload) -> Iterator[None]:
    """
    Bind `event_kind` and `event_keys` to the log context inside the block.

    Examples
    --------
    >>> with event_log_context("user:created", {"id": 7}):
    ...     logger.info("handled")  # record carries event_kind="user:created"
    """
    token = None
    try:
        token = set_log_context(event_kind=str(kind), event_keys=list(payload))
    except Exception as exc:
        # Never let logging context setup break event dispatch.
        logger.debug(
            "Failed to apply event log context",
            extra={"error": str(exc), "error_type": type(exc).__name__},
        )

    try:
        yield
    finally:
        if token is not None:
            reset_log_context(token)
