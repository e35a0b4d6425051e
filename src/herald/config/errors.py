"""
Configuration error hierarchy for Herald.

Exception Hierarchy
-------------------
ConfigError (base)
├── ConfigValidationError (validator rejected a value)
└── ConfigLoadError (YAML file could not be read or parsed)
"""


class ConfigError(Exception):
    """
    Base exception for all configuration-related errors.

    Example
    -------
    >>> try:
    ...     manager.set("event.metrics_enabled", "maybe")
    ... except ConfigError as e:
    ...     logger.error(f"Config operation failed: {e}")
    """


class ConfigValidationError(ConfigError):
    """Raised when a registered validator rejects a configuration value."""


class ConfigLoadError(ConfigError):
    """
    Raised when a YAML configuration file cannot be loaded.

    Only raised for the packaged defaults; broken override files are logged
    and skipped.
    """


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConfigLoadError",
]
