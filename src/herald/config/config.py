"""
Static configuration for Herald.

Purpose
-------
Provides static configuration loaded from environment variables with
sensible defaults and type validation. This module handles settings that
are fixed at process startup: environment, logging level and format, and
where YAML overrides for the ConfigManager live.

Non-Responsibilities
--------------------
- Runtime registry settings (handled by ConfigManager)
- Secrets management

Architecture Notes
------------------
- Singleton pattern via class methods (no instantiation)
- Loads on module import via Config.load(); call again to reload
- Invalid values fall back to defaults with a warning, never raise
- Load metrics track which values came from environment vs defaults

Environment Variables
---------------------
- HERALD_ENVIRONMENT: development | testing | staging | production
- HERALD_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR | CRITICAL
- HERALD_LOG_JSON: emit JSON console logs (default: production only)
- HERALD_LOG_COLORS: colored console logs on a TTY (default: on)
- HERALD_LOG_FILE: optional path for a rotating JSON log file
- HERALD_CONFIG_DIR: optional directory of YAML overrides

Dependencies
------------
- python-dotenv: .env loading
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "HERALD_"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment string safely with fallback.

        Example
        -------
        >>> Environment.from_string("production") == Environment.PRODUCTION
        True
        >>> Environment.from_string("invalid") == Environment.DEVELOPMENT
        True
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            logging.warning(f"Unknown environment '{value}', defaulting to development")
            return cls.DEVELOPMENT


class _ConfigLoadMetrics:
    """Tracks which values came from the environment and any validation errors."""

    def __init__(self) -> None:
        self.env_vars_loaded: Dict[str, bool] = {}
        self.validation_errors: Dict[str, str] = {}
        self.defaults_used: Dict[str, Any] = {}
        self.last_reload: Optional[str] = None

    def record_env_load(self, key: str, from_env: bool, default: Any) -> None:
        self.env_vars_loaded[key] = from_env
        if not from_env:
            self.defaults_used[key] = default

    def record_validation_error(self, key: str, error: str) -> None:
        self.validation_errors[key] = error

    def get_summary(self) -> Dict[str, Any]:
        return {
            "total_configs": len(self.env_vars_loaded),
            "from_environment": sum(1 for v in self.env_vars_loaded.values() if v),
            "from_defaults": sum(1 for v in self.env_vars_loaded.values() if not v),
            "validation_errors": len(self.validation_errors),
            "defaults_used": list(self.defaults_used.keys()),
            "last_reload": self.last_reload,
        }


class Config:
    """
    Centralized static configuration for Herald.

    Usage
    -----
    >>> Config.LOG_LEVEL
    'INFO'
    >>> Config.is_production()
    False
    >>> Config.get_config_summary()["environment"]
    'development'
    """

    _metrics: Optional[_ConfigLoadMetrics] = None

    ENVIRONMENT: Environment = Environment.DEVELOPMENT
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_COLORS: bool = True
    LOG_FILE: Optional[Path] = None
    CONFIG_DIR: Optional[Path] = None

    # =========================================================================
    # Safe Parsing Helpers
    # =========================================================================

    @classmethod
    def _init_metrics(cls) -> None:
        if cls._metrics is None:
            cls._metrics = _ConfigLoadMetrics()

    @classmethod
    def _warn(cls, key: str, error: str) -> None:
        logging.warning(error)
        if cls._metrics:
            cls._metrics.record_validation_error(key, error)

    @classmethod
    def _safe_bool(cls, key: str, default: Optional[bool]) -> Optional[bool]:
        """
        Safely parse boolean from environment.

        Recognizes: true/false, yes/no, 1/0, on/off (case-insensitive).
        """
        cls._init_metrics()
        name = ENV_PREFIX + key
        raw_value = os.getenv(name)

        if raw_value is None:
            cls._metrics.record_env_load(name, False, default)
            return default

        normalized = raw_value.lower().strip()
        if normalized in {"true", "yes", "1", "on"}:
            value = True
        elif normalized in {"false", "no", "0", "off"}:
            value = False
        else:
            cls._warn(name, f"{name}='{raw_value}' is not a valid boolean, using default {default}")
            return default

        cls._metrics.record_env_load(name, True, default)
        return value

    @classmethod
    def _safe_str(cls, key: str, default: str) -> str:
        cls._init_metrics()
        name = ENV_PREFIX + key
        value = os.getenv(name, default)
        cls._metrics.record_env_load(name, name in os.environ, default)
        return value

    @classmethod
    def _safe_path(cls, key: str) -> Optional[Path]:
        cls._init_metrics()
        name = ENV_PREFIX + key
        raw_value = os.getenv(name)
        cls._metrics.record_env_load(name, raw_value is not None, None)
        if not raw_value:
            return None
        return Path(raw_value).expanduser()

    @classmethod
    def _safe_log_level(cls, default: str) -> str:
        level = cls._safe_str("LOG_LEVEL", default).strip().upper()
        if level not in VALID_LOG_LEVELS:
            cls._warn(
                ENV_PREFIX + "LOG_LEVEL",
                f"Invalid {ENV_PREFIX}LOG_LEVEL '{level}', using {default}",
            )
            return default
        return level

    # =========================================================================
    # Configuration Loading
    # =========================================================================

    @classmethod
    def load(cls) -> None:
        """
        Load all configuration from environment variables.

        Called automatically on module import; call again to pick up
        changed environment variables.
        """
        cls._metrics = _ConfigLoadMetrics()

        cls.ENVIRONMENT = Environment.from_string(
            cls._safe_str("ENVIRONMENT", Environment.DEVELOPMENT.value)
        )
        cls.LOG_LEVEL = cls._safe_log_level("INFO")
        cls.LOG_JSON = cls._safe_bool("LOG_JSON", None)
        cls.LOG_COLORS = bool(cls._safe_bool("LOG_COLORS", True))
        cls.LOG_FILE = cls._safe_path("LOG_FILE")
        cls.CONFIG_DIR = cls._safe_path("CONFIG_DIR")

        cls._metrics.last_reload = datetime.now(timezone.utc).isoformat()

    # =========================================================================
    # Environment Checks
    # =========================================================================

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT is Environment.PRODUCTION

    @classmethod
    def is_testing(cls) -> bool:
        return cls.ENVIRONMENT is Environment.TESTING

    # =========================================================================
    # Metrics & Summary
    # =========================================================================

    @classmethod
    def get_metrics(cls) -> Optional[_ConfigLoadMetrics]:
        """Get configuration loading metrics."""
        return cls._metrics

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        """
        Get configuration summary for debugging.

        Example
        -------
        >>> Config.get_config_summary()["log_level"]
        'INFO'
        """
        return {
            "environment": cls.ENVIRONMENT.value,
            "log_level": cls.LOG_LEVEL,
            "log_json": cls.LOG_JSON,
            "log_colors": cls.LOG_COLORS,
            "log_file": str(cls.LOG_FILE) if cls.LOG_FILE else None,
            "config_dir": str(cls.CONFIG_DIR) if cls.CONFIG_DIR else None,
        }


Config.load()
