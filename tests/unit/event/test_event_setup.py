"""
Unit Tests for Event System Setup
=================================

Purpose
-------
Test registry construction from configuration and the lazily created
process-wide registry.
"""

import pytest

from herald.config import ConfigManager
from herald.event import (
    EventRegistry,
    create_event_registry,
    get_event_registry,
    reset_event_registry,
    shutdown_event_system,
)


# ============================================================================
# CONFIGURATION TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.event
class TestRegistryConfiguration:
    """Test how registry flags are resolved."""

    def test_builtin_defaults_without_config(self):
        registry = EventRegistry()

        assert registry.metrics_enabled is True
        assert registry._validate_signatures is False
        assert registry._log_dispatch is True

    def test_flags_read_from_config_manager(self, mock_config_manager):
        # Arrange
        values = {"event.metrics_enabled": False, "event.validate_signatures": True}
        mock_config_manager.get.side_effect = lambda key, default=None: values.get(key, default)

        # Act
        registry = EventRegistry(config_manager=mock_config_manager)

        # Assert
        assert registry.metrics_enabled is False
        assert registry._validate_signatures is True
        assert registry._log_dispatch is True
        mock_config_manager.get.assert_any_call("event.metrics_enabled", True)

    def test_overrides_win_over_config(self, mock_config_manager):
        mock_config_manager.get.side_effect = lambda key, default=None: False

        registry = EventRegistry(config_manager=mock_config_manager, enable_metrics=True)

        assert registry.metrics_enabled is True

    def test_non_boolean_config_value_falls_back(self, mock_config_manager, caplog):
        # Arrange
        mock_config_manager.get.side_effect = lambda key, default=None: (
            "yes" if key == "event.metrics_enabled" else default
        )

        # Act
        registry = EventRegistry(config_manager=mock_config_manager)

        # Assert
        assert registry.metrics_enabled is True
        assert any(r.getMessage().startswith("Ignoring non-boolean") for r in caplog.records)

    def test_yaml_override_file_applies(self, config_dir):
        # Arrange
        (config_dir / "event.yaml").write_text("event:\n  validate_signatures: true\n")

        # Act
        registry = create_event_registry(ConfigManager(config_dir=config_dir))

        # Assert
        assert registry._validate_signatures is True
        assert registry.metrics_enabled is True

    def test_create_forwards_keyword_overrides(self, config_manager):
        registry = create_event_registry(config_manager, log_dispatch=False)

        assert registry._log_dispatch is False


# ============================================================================
# PROCESS-WIDE REGISTRY TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.event
class TestProcessWideRegistry:
    """Test the lazily created shared registry."""

    def test_get_returns_same_instance(self):
        first = get_event_registry()

        assert get_event_registry() is first

    def test_reset_creates_new_instance(self):
        first = get_event_registry()

        reset_event_registry()

        assert get_event_registry() is not first

    def test_shutdown_clears_listeners(self, recorder):
        # Arrange
        registry = get_event_registry()
        registry.subscribe("k", recorder.listener("a"))

        # Act
        shutdown_event_system()

        # Assert
        assert registry.empty is True
        assert get_event_registry() is not registry

    def test_shutdown_without_registry_is_noop(self):
        shutdown_event_system()
        shutdown_event_system()
