"""
Exceptions for Herald.

Purpose
-------
Define the structured exception hierarchy for library-level concerns.
Configuration errors live in `herald.config.errors`.

Design Notes
------------
- All Herald exceptions inherit from `HeraldException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict)
  - `severity`: `ErrorSeverity` value for logging decisions
  - `error_code`: short, stable identifier for programmatic use
- Registry operations themselves define no failure conditions. Exceptions
  raised by listeners propagate unchanged and are never wrapped.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for logging."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class HeraldException(Exception):
    """
    Base exception for all Herald errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        severity: Error severity level for logging handlers
        error_code: Optional code for programmatic handling

    Example:
        >>> raise HeraldException(
        ...     "Listener rejected",
        ...     {"event_kind": "user:created"}
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}"
            ")"
        )


class ListenerSignatureError(HeraldException):
    """
    Raised when a listener cannot accept exactly one payload argument.

    Only raised by `EventRegistry.subscribe` when signature validation is
    enabled (`event.validate_signatures`).

    Args:
        listener: The rejected callable
        parameter_count: Number of required positional parameters found
    """

    DEFAULT_SEVERITY = ErrorSeverity.ERROR

    def __init__(self, listener: Callable[..., Any], parameter_count: int) -> None:
        self.listener = listener
        self.parameter_count = parameter_count
        name = getattr(listener, "__qualname__", None) or getattr(
            listener, "__name__", repr(listener)
        )
        super().__init__(
            f"Event listener must accept exactly 1 parameter (EventPayload), "
            f"got {parameter_count} for '{name}'",
            details={"listener": name, "parameter_count": parameter_count},
            error_code="LISTENER_SIGNATURE",
        )


def get_error_severity(exc: BaseException) -> ErrorSeverity:
    """
    Get the severity level of an exception for logging.

    Args:
        exc: Exception to check

    Returns:
        ErrorSeverity level.
    """
    if isinstance(exc, HeraldException):
        return exc.severity
    return ErrorSeverity.ERROR
