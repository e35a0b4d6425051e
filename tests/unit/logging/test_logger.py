"""
Unit Tests for the Logging Subsystem
====================================

Purpose
-------
Test formatters, context propagation and root logger setup.

Test Coverage
-------------
- JSONFormatter fields, context and `extra=` merging
- ContextFilter defaults and precedence
- LogContext / set_log_context / reset_log_context
- setup_logging idempotency, file handler and shutdown
"""

import json
import logging
import sys

import pytest

from herald.config import Config
from herald.logging import (
    LogContext,
    clear_log_context,
    get_log_context,
    reset_log_context,
    set_log_context,
    setup_logging,
    shutdown_logging,
)
from herald.logging.logger import ColoredFormatter, ContextFilter, JSONFormatter


def _record(msg="hello", level=logging.INFO, name="herald.test", **extra):
    record = logging.LogRecord(name, level, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# ============================================================================
# FORMATTER TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.logging
class TestJSONFormatter:
    """Test structured output."""

    def test_core_fields(self):
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "herald.test"
        assert data["message"] == "hello"
        assert data["timestamp"].endswith("+00:00")

    def test_context_fields_hoisted_and_na_dropped(self):
        record = _record(event_kind="user:created", correlation_id="N/A")

        data = json.loads(JSONFormatter().format(record))

        assert data["event_kind"] == "user:created"
        assert "correlation_id" not in data

    def test_extra_fields_grouped(self):
        record = _record(listener="mod.fn", payload_keys=["id"])

        data = json.loads(JSONFormatter().format(record))

        assert data["extra"] == {"listener": "mod.fn", "payload_keys": ["id"]}

    def test_exception_included(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad" in data["exception"]

    def test_non_serializable_extra_stringified(self):
        record = _record(path=object())

        data = json.loads(JSONFormatter().format(record))

        assert data["extra"]["path"].startswith("<object object")


@pytest.mark.unit
@pytest.mark.logging
class TestColoredFormatter:
    """Test ANSI level coloring."""

    def test_level_colored_and_restored(self):
        record = _record(level=logging.WARNING)

        output = ColoredFormatter(fmt="%(levelname)s %(message)s").format(record)

        assert output.startswith("\033[93mWARNING\033[0m")
        assert record.levelname == "WARNING"


# ============================================================================
# CONTEXT TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.logging
class TestLogContext:
    """Test ContextVar-based context propagation."""

    def test_filter_applies_defaults(self):
        record = _record(name="herald.event.registry")

        ContextFilter().filter(record)

        assert record.correlation_id == "N/A"
        assert record.component == "herald"
        assert record.event_kind == "N/A"

    def test_filter_copies_active_context(self):
        with LogContext(component="billing", operation="refund", correlation_id="abc"):
            record = _record()
            ContextFilter().filter(record)

        assert (record.component, record.operation, record.correlation_id) == (
            "billing",
            "refund",
            "abc",
        )

    def test_extra_fields_win_over_context(self):
        token = set_log_context(event_kind="outer")
        try:
            record = _record(event_kind="explicit")
            ContextFilter().filter(record)
        finally:
            reset_log_context(token)

        assert record.event_kind == "explicit"

    def test_log_context_nesting_restores_outer(self):
        with LogContext(component="outer", correlation_id="c1"):
            with LogContext(operation="inner"):
                inner = get_log_context()
            outer = get_log_context()

        assert inner == {"component": "outer", "operation": "inner", "correlation_id": "c1"}
        assert outer == {"component": "outer", "correlation_id": "c1"}
        assert get_log_context() == {}

    def test_log_context_generates_correlation_id(self):
        with LogContext() as ctx:
            assert len(ctx.context["correlation_id"]) == 8

    def test_set_and_reset(self):
        token = set_log_context(component="worker", job="sync")

        assert get_log_context() == {"component": "worker", "job": "sync"}

        reset_log_context(token)
        assert get_log_context() == {}

    def test_clear(self):
        set_log_context(component="worker")

        clear_log_context()

        assert get_log_context() == {}


# ============================================================================
# SETUP TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.logging
class TestSetupLogging:
    """Test root logger configuration."""

    def test_setup_installs_console_handler(self, preserve_root_logger):
        # Arrange
        shutdown_logging()

        # Act
        setup_logging()

        # Assert
        root = preserve_root_logger
        assert len(root.handlers) == 1
        assert root.level == logging.getLevelName(Config.LOG_LEVEL)
        assert any(isinstance(f, ContextFilter) for f in root.handlers[0].filters)

    def test_setup_is_idempotent(self, preserve_root_logger):
        shutdown_logging()
        setup_logging()
        handlers = list(preserve_root_logger.handlers)

        setup_logging()

        assert preserve_root_logger.handlers == handlers

    def test_file_handler_writes_json(self, preserve_root_logger, tmp_path, monkeypatch):
        # Arrange
        log_file = tmp_path / "logs" / "herald.log"
        monkeypatch.setattr(Config, "LOG_FILE", log_file)
        shutdown_logging()

        # Act
        setup_logging()
        with LogContext(component="billing"):
            logging.getLogger("herald.test").warning("written", extra={"invoice": 7})
        shutdown_logging()

        # Assert
        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        written = [line for line in lines if line["message"] == "written"]
        assert written[0]["component"] == "billing"
        assert written[0]["extra"] == {"invoice": 7}

    def test_shutdown_detaches_handlers(self, preserve_root_logger):
        shutdown_logging()
        setup_logging()

        shutdown_logging()

        assert preserve_root_logger.handlers == []
        assert getattr(preserve_root_logger, "_herald_logging_initialized") is False
