"""
Dynamic balance configuration for Fateweaver.

Purpose
-------
Serve the tunable numbers of the resolution engine (rarity tables, encounter
tables, gear constants, flee constants) from YAML files, with dot-notation
lookups, sparse in-memory overrides and metrics.

Responsibilities
----------------
- Recursively load every *.yaml / *.yml file under Config.CONFIG_DIR
- Provide hierarchical access with dot notation (e.g. 'flee.max_chance')
- Fall back to the caller-supplied default when a key is missing
- Validate overrides against registered schemas before they reach the cache
- Track gets, hits, misses, fallbacks and timing

Non-Responsibilities
--------------------
- Environment settings (handled by Config)
- Persisting overrides (overrides live for the life of the process)

Design Notes
------------
- Class-level singleton state; there is one balance table per process.
- Lazily initialized on the first get() so library callers need no setup.
- YAML load failures are logged and skipped unless initialize(strict=True).
"""

from __future__ import annotations

import copy
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from fateweaver.core.config.config import Config
from fateweaver.core.config.errors import ConfigInitializationError
from fateweaver.core.config.validator import validate_config_value
from fateweaver.core.logging.logger import get_logger

logger = get_logger(__name__)

_MISSING = object()


def _new_metrics() -> Dict[str, Any]:
    return {
        "gets": 0,
        "sets": 0,
        "cache_hits": 0,
        "cache_misses": 0,
        "fallback_to_defaults": 0,
        "reload_count": 0,
        "errors": 0,
        "total_get_time_ms": 0.0,
    }


class ConfigManager:
    """
    YAML-backed balance configuration with dot-notation access.

    Example
    -------
    >>> ConfigManager.get("flee.max_chance", 0.95)
    0.95
    >>> ConfigManager.set("resolution.raid.weapon_multiplier", 2.5)
    """

    _defaults: Dict[str, Any] = {}
    _overrides: Dict[str, Any] = {}
    _cache: Dict[str, Any] = {}
    _initialized: bool = False
    _loaded_files: List[str] = []

    _metrics: Dict[str, Any] = _new_metrics()

    # =========================================================================
    # INITIALIZATION
    # =========================================================================

    @classmethod
    def _load_yaml_configs(cls, config_dir: Path, strict: bool) -> None:
        """
        Load every YAML file under config_dir into _defaults.

        Top-level keys from later files replace earlier ones; files are read
        in sorted order so the merge is deterministic.
        """
        if not config_dir.exists():
            logger.warning(
                "Config directory not found, using code defaults",
                extra={"config_dir": str(config_dir)},
            )
            return

        yaml_files = sorted(config_dir.rglob("*.yaml")) + sorted(config_dir.rglob("*.yml"))
        if not yaml_files:
            logger.info("No YAML config files found", extra={"config_dir": str(config_dir)})
            return

        for yaml_file in yaml_files:
            relative = str(yaml_file.relative_to(config_dir))
            try:
                with open(yaml_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                cls._metrics["errors"] += 1
                if strict:
                    raise ConfigInitializationError(
                        f"Failed to load YAML config {relative}: {e}"
                    ) from e
                logger.warning(
                    f"Failed to load YAML config {relative}: {e}",
                    extra={"file": str(yaml_file), "error": str(e)},
                )
                continue

            if not data:
                continue

            if not isinstance(data, dict):
                cls._metrics["errors"] += 1
                if strict:
                    raise ConfigInitializationError(
                        f"YAML config {relative} must contain a mapping at the top level"
                    )
                logger.warning(
                    f"Ignoring YAML config {relative}: top level is not a mapping",
                    extra={"file": str(yaml_file)},
                )
                continue

            for top_key, value in data.items():
                validate_config_value(top_key, value)
                cls._defaults[top_key] = value

            cls._loaded_files.append(relative)
            logger.debug(f"Loaded YAML config: {relative}")

    @classmethod
    def initialize(cls, config_dir: Optional[Path] = None, strict: bool = False) -> None:
        """
        Load YAML configuration into the cache.

        Args:
            config_dir: Directory to scan; defaults to Config.CONFIG_DIR.
            strict: Raise ConfigInitializationError on unreadable files
                instead of logging and skipping them.

        Raises:
            ConfigInitializationError: strict mode and a file failed to load.
            ConfigValidationError: a known top-level key has the wrong shape.
        """
        directory = Path(config_dir) if config_dir is not None else Path(Config.CONFIG_DIR)

        cls._defaults = {}
        cls._loaded_files = []
        cls._load_yaml_configs(directory, strict)
        cls._rebuild_cache()
        cls._initialized = True

        logger.info(
            f"ConfigManager initialized from {len(cls._loaded_files)} YAML files",
            extra={
                "config_dir": str(directory),
                "yaml_count": len(cls._loaded_files),
                "total_keys": len(cls._cache),
                "override_count": len(cls._overrides),
            },
        )

    @classmethod
    def reload(cls, config_dir: Optional[Path] = None) -> None:
        """Re-read YAML files; in-memory overrides survive the reload."""
        cls.initialize(config_dir)
        cls._metrics["reload_count"] += 1

    @classmethod
    def _rebuild_cache(cls) -> None:
        cache = copy.deepcopy(cls._defaults)
        for top_key, value in cls._overrides.items():
            cache[top_key] = copy.deepcopy(value)
        cls._cache = cache

    @classmethod
    def _ensure_initialized(cls) -> None:
        if not cls._initialized:
            cls.initialize()

    # =========================================================================
    # PUBLIC METHODS
    # =========================================================================

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Retrieve config value by dot notation path.

        Args:
            key: Dot-notation config path (e.g., 'resolution.raid.armor_multiplier')
            default: Value returned when the path does not exist

        Returns:
            Config value or default. Falsy values stored in YAML (0, False)
            are returned as-is.

        Example:
            >>> ConfigManager.get("encounters.tables.standard")
            [{'tier': None, 'weight': 20}, ...]
        """
        start_time = time.perf_counter()
        cls._metrics["gets"] += 1
        cls._ensure_initialized()

        value = cls._traverse(cls._cache, key)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        cls._metrics["total_get_time_ms"] += elapsed_ms

        if value is _MISSING:
            cls._metrics["cache_misses"] += 1
            cls._metrics["fallback_to_defaults"] += 1
            return default

        cls._metrics["cache_hits"] += 1
        return value

    @staticmethod
    def _traverse(source: Dict[str, Any], key: str) -> Any:
        value: Any = source
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return _MISSING
            value = value[part]
        return value

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """
        Override a config value in memory.

        The whole top-level section is re-validated before it is committed, so
        a bad override never reaches the cache.

        Raises:
            ConfigValidationError: the resulting section fails its schema.

        Example:
            >>> ConfigManager.set("resolution.raid.weapon_multiplier", 2.5)
        """
        cls._metrics["sets"] += 1
        cls._ensure_initialized()

        keys = key.split(".")
        top_key = keys[0]

        if len(keys) > 1:
            section = copy.deepcopy(cls._cache.get(top_key, {}))
            if not isinstance(section, dict):
                section = {}
            current = section
            for part in keys[1:-1]:
                nested = current.get(part)
                if not isinstance(nested, dict):
                    nested = {}
                    current[part] = nested
                current = nested
            current[keys[-1]] = value
            final_value = section
        else:
            final_value = value

        try:
            validate_config_value(top_key, final_value)
        except Exception:
            cls._metrics["errors"] += 1
            raise

        cls._overrides[top_key] = final_value
        cls._cache[top_key] = copy.deepcopy(final_value)

        logger.info(
            f"ConfigManager override applied: key={key}",
            extra={"config_key": key},
        )

    @classmethod
    def clear_overrides(cls) -> None:
        """Drop every in-memory override and restore the YAML values."""
        cls._overrides.clear()
        cls._rebuild_cache()
        logger.info("ConfigManager overrides cleared")

    @classmethod
    def clear_cache(cls) -> None:
        """Clear memory cache, overrides and initialization state."""
        cls._cache = {}
        cls._defaults = {}
        cls._overrides = {}
        cls._loaded_files = []
        cls._initialized = False
        logger.info("ConfigManager cache cleared")

    @classmethod
    def get_all_keys(cls) -> List[str]:
        """Get list of all top-level config keys."""
        cls._ensure_initialized()
        return list(cls._cache.keys())

    @classmethod
    def get_loaded_files(cls) -> List[str]:
        return list(cls._loaded_files)

    # =========================================================================
    # METRICS & MONITORING
    # =========================================================================

    @classmethod
    def get_metrics(cls) -> Dict[str, Any]:
        """
        Get ConfigManager performance metrics.

        Example:
            >>> metrics = ConfigManager.get_metrics()
            >>> print(f"Cache hit rate: {metrics['cache_hit_rate']:.1f}%")
        """
        total_gets = cls._metrics["gets"]
        cache_hit_rate = (
            (cls._metrics["cache_hits"] / total_gets * 100)
            if total_gets > 0 else 0.0
        )
        avg_get_time = (
            cls._metrics["total_get_time_ms"] / total_gets
            if total_gets > 0 else 0.0
        )

        return {
            "gets": cls._metrics["gets"],
            "sets": cls._metrics["sets"],
            "cache_hits": cls._metrics["cache_hits"],
            "cache_misses": cls._metrics["cache_misses"],
            "cache_hit_rate": round(cache_hit_rate, 2),
            "fallback_to_defaults": cls._metrics["fallback_to_defaults"],
            "reload_count": cls._metrics["reload_count"],
            "errors": cls._metrics["errors"],
            "avg_get_time_ms": round(avg_get_time, 4),
            "initialized": cls._initialized,
            "cached_configs": len(cls._cache),
            "override_count": len(cls._overrides),
        }

    @classmethod
    def reset_metrics(cls) -> None:
        """Reset all metrics counters."""
        cls._metrics = _new_metrics()
        logger.info("ConfigManager metrics reset")
