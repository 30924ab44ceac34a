"""
Configuration management subsystem for Fateweaver.

Purpose
-------
Provides static (environment-based) and dynamic (YAML-backed) configuration
with validation, caching and metrics.

Architecture
------------
- **config.py**: Static configuration from environment variables
- **manager.py**: Dynamic balance configuration from config/*.yaml
- **validator.py**: Schema-based configuration validation
- **errors.py**: Domain-specific exception hierarchy

Static vs Dynamic Configuration
--------------------------------
**Static (Config):**
- Loaded from environment variables at import (.env supported)
- Includes: environment name, log settings, config directory, RNG seed

**Dynamic (ConfigManager):**
- Loaded from YAML files under Config.CONFIG_DIR on first access
- Includes: rarity tables, encounter tables, gear and flee constants
- In-memory overrides validated against registered schemas

Usage Examples
--------------
```python
from fateweaver.core.config import Config, ConfigManager

if Config.is_production():
    logger.info("Running in production mode")

cap = ConfigManager.get("flee.max_chance", 0.95)
ConfigManager.set("resolution.raid.weapon_multiplier", 2.5)
```
"""

# Static configuration (environment-based)
from fateweaver.core.config.config import Config, Environment

# Error hierarchy
from fateweaver.core.config.errors import (
    ConfigError,
    ConfigInitializationError,
    ConfigValidationError,
)

# Validation and schema management
from fateweaver.core.config.validator import (
    ConfigSchema,
    SchemaField,
    get_schema_for_top_key,
    register_schema,
    unregister_schema,
    validate_config_value,
)

# Dynamic configuration manager (YAML-backed)
from fateweaver.core.config.manager import ConfigManager

__all__ = [
    # Static configuration
    "Config",
    "Environment",
    # Dynamic configuration manager
    "ConfigManager",
    # Error hierarchy
    "ConfigError",
    "ConfigInitializationError",
    "ConfigValidationError",
    # Validation
    "ConfigSchema",
    "SchemaField",
    "get_schema_for_top_key",
    "register_schema",
    "unregister_schema",
    "validate_config_value",
]
