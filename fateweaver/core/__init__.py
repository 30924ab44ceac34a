"""
Core infrastructure layer for Fateweaver.

Purpose
-------
Provide a single import surface for the infrastructure the resolution
modules share:

- Configuration management (Config, ConfigManager)
- Logging (structured logging, logger factory, LogContext)

Non-Responsibilities
--------------------
- Game rules (delegated to fateweaver.modules)
- Any side effects beyond the logging setup performed by the logger module
"""

from fateweaver.core.config import Config, ConfigManager
from fateweaver.core.logging import LogContext, get_logger

__all__ = [
    "Config",
    "ConfigManager",
    "LogContext",
    "get_logger",
]
