"""
Configuration error hierarchy for Fateweaver.

Purpose
-------
Provides domain-specific exceptions for configuration management operations
with clear error classification and helpful error messages.

Non-Responsibilities
--------------------
- Error logging (handled by logger)
- Error recovery logic (handled by ConfigManager)

Exception Hierarchy
-------------------
ConfigError (base)
├── ConfigValidationError (schema/type validation failures)
└── ConfigInitializationError (startup/init failures)
"""


class ConfigError(Exception):
    """
    Base exception for all configuration-related errors.

    Example
    -------
    >>> try:
    ...     ConfigManager.set("resolution.raid", "not-a-mapping")
    ... except ConfigError as e:
    ...     logger.error(f"Config operation failed: {e}")
    """

    pass


class ConfigValidationError(ConfigError):
    """
    Raised when configuration validation fails.

    This exception is raised when:
    - Schema validation fails (wrong type, invalid structure)
    - A probability table is malformed (non-numeric or negative weights)
    - An override written through ConfigManager.set() does not match its schema
    """

    pass


class ConfigInitializationError(ConfigError):
    """
    Raised when ConfigManager initialization fails.

    This exception is raised when a YAML file exists but cannot be parsed
    and ConfigManager.initialize() was called with strict=True.
    """

    pass


__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConfigInitializationError",
]
