"""
Herald Logging Subsystem.

Purpose
-------
Provide structured logging for Herald and the applications that embed it:

- Structured JSON logs for aggregation and analysis.
- ContextVar-based propagation of context (event kind, payload keys,
  correlation IDs) into every record emitted while it is active.
- Console handler (JSON in production, colored human text on a TTY).
- Optional rotating JSON file handler.

Responsibilities
----------------
- Configure the root logger on request (`setup_logging`), never on import.
- Enrich all log records with contextual fields:
  - correlation_id, component, operation
  - event_kind, event_keys
- Merge `extra={...}` fields into JSON output.
- Provide helper APIs:
  - get_logger()
  - LogContext (context manager)
  - set_log_context() / clear_log_context() / get_log_context()

Dependencies
------------
- herald.config.config.Config
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from herald.config.config import Config


# ============================================================================
# Context (ContextVars)
# ============================================================================

_log_context: ContextVar[Dict[str, Any]] = ContextVar("herald_log_context", default={})


# ============================================================================
# Config / Environment
# ============================================================================


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Configuration for the logging subsystem."""

    CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    FILE_MAX_BYTES: int = 5 * 1024 * 1024
    FILE_BACKUP_COUNT: int = 3

    @property
    def log_level(self) -> int:
        return getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO)

    @property
    def use_json(self) -> bool:
        if Config.LOG_JSON is None:
            return Config.is_production()
        return Config.LOG_JSON

    @property
    def use_colors(self) -> bool:
        if Config.is_production() or self.use_json:
            return False
        return Config.LOG_COLORS and sys.stdout.isatty()


LOGGER_CONFIG = LoggerConfig()


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    """Copy the active log context onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context: Dict[str, Any] = dict(_log_context.get())
        context.setdefault("correlation_id", "N/A")
        context.setdefault("component", record.name.split(".", 1)[0])
        context.setdefault("operation", "N/A")
        context.setdefault("event_kind", "N/A")
        context.setdefault("event_keys", "N/A")

        # Fields passed via `extra=` win over the ambient context.
        for key, value in context.items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True


class ColoredFormatter(logging.Formatter):
    COLORS: Dict[str, str] = {
        "DEBUG": "\033[90m",
        "INFO": "\033[94m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[91m\033[1m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        original = record.levelname
        prefix = self.COLORS.get(original, "")
        reset = self.COLORS["RESET"] if prefix else ""

        if prefix:
            record.levelname = f"{prefix}{original}{reset}"

        try:
            return super().format(record)
        finally:
            record.levelname = original


class JSONFormatter(logging.Formatter):
    STANDARD_ATTRS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }

    CONTEXT_ATTRS = {
        "correlation_id",
        "component",
        "operation",
        "event_kind",
        "event_keys",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        created_dt = datetime.fromtimestamp(record.created, tz=timezone.utc)

        log_data: Dict[str, Any] = {
            "timestamp": created_dt.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for attr in self.CONTEXT_ATTRS:
            value = getattr(record, attr, None)
            if value not in (None, "N/A"):
                log_data[attr] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra: Dict[str, Any] = {}
        for key, val in record.__dict__.items():
            if key in self.STANDARD_ATTRS or key in self.CONTEXT_ATTRS:
                continue
            if key.startswith("_"):
                continue
            extra[key] = val

        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, ensure_ascii=False, default=str)


# ============================================================================
# Global Setup
# ============================================================================

_INITIALIZED_FLAG = "_herald_logging_initialized"


def _build_console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(LOGGER_CONFIG.log_level)

    if LOGGER_CONFIG.use_json:
        handler.setFormatter(JSONFormatter())
    elif LOGGER_CONFIG.use_colors:
        handler.setFormatter(
            ColoredFormatter(
                fmt=LOGGER_CONFIG.CONSOLE_FORMAT,
                datefmt=LOGGER_CONFIG.DATE_FORMAT,
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt=LOGGER_CONFIG.CONSOLE_FORMAT,
                datefmt=LOGGER_CONFIG.DATE_FORMAT,
            )
        )

    return handler


def _build_file_handler() -> Optional[logging.Handler]:
    if Config.LOG_FILE is None:
        return None

    Config.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(Config.LOG_FILE),
        maxBytes=LOGGER_CONFIG.FILE_MAX_BYTES,
        backupCount=LOGGER_CONFIG.FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(LOGGER_CONFIG.log_level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging() -> None:
    """
    Configure the root logger for an application embedding Herald.

    Idempotent: repeated calls are ignored until `shutdown_logging()`.
    """
    root = logging.getLogger()

    if getattr(root, _INITIALIZED_FLAG, False):
        return

    root.setLevel(LOGGER_CONFIG.log_level)
    root.handlers.clear()

    console = _build_console_handler()
    console.addFilter(ContextFilter())
    root.addHandler(console)

    file_handler = _build_file_handler()
    if file_handler is not None:
        file_handler.addFilter(ContextFilter())
        root.addHandler(file_handler)

    setattr(root, _INITIALIZED_FLAG, True)

    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={
            "environment": Config.ENVIRONMENT.value,
            "log_level": logging.getLevelName(LOGGER_CONFIG.log_level),
            "json": LOGGER_CONFIG.use_json,
            "colors": LOGGER_CONFIG.use_colors,
            "log_file": str(Config.LOG_FILE) if Config.LOG_FILE else None,
        },
    )


def shutdown_logging() -> None:
    """Flush, close and detach the handlers installed by `setup_logging()`."""
    root = logging.getLogger()

    if not getattr(root, _INITIALIZED_FLAG, False):
        return

    logging.getLogger(__name__).info("Shutting down logging subsystem.")

    for handler in list(root.handlers):
        handler.flush()
        handler.close()
        root.removeHandler(handler)

    setattr(root, _INITIALIZED_FLAG, False)


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Bind context fields to every log record emitted inside the block.

    Nested contexts inherit the outer fields and restore them on exit.

    Example
    -------
    >>> with LogContext(component="billing", operation="refund"):
    ...     logger.info("Refund issued")
    """

    def __init__(
        self,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        inherited = _log_context.get()
        self.context: Dict[str, Any] = dict(inherited)
        self.context["correlation_id"] = (
            correlation_id
            or inherited.get("correlation_id")
            or self._generate_correlation_id()
        )
        if component is not None:
            self.context["component"] = component
        if operation is not None:
            self.context["operation"] = operation
        self.context.update(extra)

        self._token: Optional[Token[Dict[str, Any]]] = None

    @staticmethod
    def _generate_correlation_id() -> str:
        return str(uuid.uuid4())[:8]

    def __enter__(self) -> "LogContext":
        self._token = _log_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


def set_log_context(
    component: Optional[str] = None,
    operation: Optional[str] = None,
    correlation_id: Optional[str] = None,
    **extra: Any,
) -> Token[Dict[str, Any]]:
    """
    Merge fields into the current log context.

    Returns the ContextVar token so callers can restore the previous context
    with `reset_log_context(token)`.
    """
    current = dict(_log_context.get())

    if component is not None:
        current["component"] = component
    if operation is not None:
        current["operation"] = operation
    if correlation_id:
        current["correlation_id"] = correlation_id

    current.update(extra)
    return _log_context.set(current)


def reset_log_context(token: Token[Dict[str, Any]]) -> None:
    _log_context.reset(token)


def get_log_context() -> Dict[str, Any]:
    return dict(_log_context.get())


def clear_log_context() -> None:
    _log_context.set({})
