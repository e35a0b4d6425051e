"""
Configuration subsystem for Herald.

- **config.py**: static configuration from environment variables (.env support)
- **manager.py**: dot-notation runtime settings from YAML defaults
- **errors.py**: configuration exception hierarchy

Usage
-----
```python
from herald.config import Config, ConfigManager

if Config.is_production():
    ...

manager = ConfigManager()
manager.get("event.metrics_enabled")
```
"""

from herald.config.config import Config, Environment
from herald.config.errors import ConfigError, ConfigLoadError, ConfigValidationError
from herald.config.manager import ConfigManager

__all__ = [
    "Config",
    "Environment",
    "ConfigManager",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
]
