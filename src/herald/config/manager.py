"""
ConfigManager: dot-notation runtime settings for Herald.

Purpose
-------
Provides runtime configuration for the event registry with YAML-backed
defaults and in-memory overrides.

Responsibilities
----------------
- Load the packaged `defaults.yaml`
- Deep-merge every `*.yaml` / `*.yml` file from an override directory
- Resolve values by dot-notation path (e.g. `"event.metrics_enabled"`)
- Apply registered validators on write

Design Decisions
----------------
- **Instance-based**: each registry can be given its own manager, which
  keeps tests isolated.
- **Defaults are authoritative**: a broken packaged defaults file raises
  `ConfigLoadError`; a broken override file is logged and skipped.
- **Read path never raises**: missing keys resolve to the caller's default.

Dependencies
------------
- PyYAML: `yaml.safe_load`
- herald.config.config (override directory from HERALD_CONFIG_DIR)
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable, Dict, List, MutableMapping, Optional

import yaml

from herald.config.config import Config
from herald.config.errors import ConfigLoadError, ConfigValidationError
from herald.logging.logger import get_logger

logger = get_logger(__name__)

DEFAULTS_FILE = Path(__file__).with_name("defaults.yaml")

_MISSING = object()


class ConfigManager:
    """
    YAML-backed configuration with dot-notation access.

    Examples
    --------
    >>> manager = ConfigManager()
    >>> manager.get("event.metrics_enabled")
    True
    >>> manager.set("event.log_dispatch", False)
    >>> manager.get("event.log_dispatch")
    False
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        *,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Parameters
        ----------
        config_dir:
            Directory of YAML override files. Falls back to
            `Config.CONFIG_DIR` (HERALD_CONFIG_DIR) when None.
        overrides:
            Mapping deep-merged last, after all YAML files.
        """
        self._config_dir = config_dir if config_dir is not None else Config.CONFIG_DIR
        self._overrides = overrides or {}
        self._defaults: Dict[str, Any] = {}
        self._cache: Dict[str, Any] = {}
        self._validators: Dict[str, Callable[[Any], Any]] = {}
        self.load()

    # =========================================================================
    # YAML LOADING & DEFAULTS
    # =========================================================================

    @staticmethod
    def _deep_merge_dict(
        target: MutableMapping[str, Any],
        source: MutableMapping[str, Any],
    ) -> None:
        """Recursively merge `source` into `target` (in-place)."""
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                ConfigManager._deep_merge_dict(target[key], value)
            else:
                target[key] = copy.deepcopy(value)

    @staticmethod
    def _read_yaml(path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)

    def _load_packaged_defaults(self) -> Dict[str, Any]:
        try:
            data = self._read_yaml(DEFAULTS_FILE)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"Cannot load packaged defaults from {DEFAULTS_FILE}") from exc
        return data if isinstance(data, dict) else {}

    def _load_override_dir(self, config_dir: Path) -> int:
        """Merge override files into `_defaults`; returns the number loaded."""
        if not config_dir.is_dir():
            logger.warning(
                "Config directory not found; using built-in defaults only",
                extra={"config_dir": str(config_dir)},
            )
            return 0

        yaml_files = sorted(config_dir.rglob("*.yaml")) + sorted(config_dir.rglob("*.yml"))
        loaded_count = 0

        for yaml_file in yaml_files:
            try:
                data = self._read_yaml(yaml_file)
            except (OSError, yaml.YAMLError) as exc:
                logger.warning(
                    "Failed to load YAML config",
                    extra={
                        "file": str(yaml_file),
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                    },
                )
                continue

            if isinstance(data, dict):
                self._deep_merge_dict(self._defaults, data)
                loaded_count += 1
                logger.debug("Loaded YAML config", extra={"file": str(yaml_file)})
            elif data is not None:
                logger.warning(
                    "Ignoring non-dict YAML root object",
                    extra={"file": str(yaml_file), "root_type": type(data).__name__},
                )

        return loaded_count

    def load(self) -> None:
        """(Re)load defaults and overrides, discarding values set at runtime."""
        self._defaults = self._load_packaged_defaults()

        loaded_count = 0
        if self._config_dir is not None:
            loaded_count = self._load_override_dir(Path(self._config_dir))

        self._deep_merge_dict(self._defaults, self._overrides)
        self._cache = copy.deepcopy(self._defaults)

        logger.debug(
            "ConfigManager loaded",
            extra={
                "yaml_override_count": loaded_count,
                "total_keys": len(self._cache),
            },
        )

    # =========================================================================
    # VALIDATION HOOKS
    # =========================================================================

    def register_validator(self, key: str, validator: Callable[[Any], Any]) -> None:
        """
        Register a validator for an exact dot-notation key.

        Validators are invoked on `set` and must either return the value to
        store or raise to block the write.
        """
        self._validators[key] = validator

    def _apply_validator(self, key: str, value: Any) -> Any:
        validator = self._validators.get(key)
        if not validator:
            return value
        try:
            return validator(value)
        except Exception as exc:
            logger.error(
                "Config validation failed",
                extra={
                    "config_key": key,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            raise ConfigValidationError(f"Validation failed for config key '{key}'") from exc

    # =========================================================================
    # READ / WRITE API
    # =========================================================================

    @staticmethod
    def _resolve(source: Dict[str, Any], key: str) -> Any:
        value: Any = source
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return _MISSING
            value = value[part]
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a configuration value by dot-notation path.

        Examples
        --------
        >>> manager.get("event.validate_signatures")
        False
        >>> manager.get("event.unknown", 5)
        5
        """
        value = self._resolve(self._cache, key)
        if value is _MISSING or value is None:
            return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a value in memory, creating intermediate sections as needed."""
        value = self._apply_validator(key, value)

        *parents, leaf = key.split(".")
        node = self._cache
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[leaf] = value

        logger.debug("Config value set", extra={"config_key": key})

    def get_default(self, key: str, default: Any = None) -> Any:
        """Value from YAML defaults/overrides, ignoring runtime `set` calls."""
        value = self._resolve(self._defaults, key)
        return default if value is _MISSING else value

    def get_all_keys(self) -> List[str]:
        """Return all top-level configuration keys."""
        return list(self._cache.keys())

    def reset(self) -> None:
        """Discard runtime changes and restore the loaded defaults."""
        self._cache = copy.deepcopy(self._defaults)
