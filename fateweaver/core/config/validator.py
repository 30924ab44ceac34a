"""
Configuration validation and schema management for Fateweaver.

Purpose
-------
Provides recursive schema-based validation for the nested balance tables
loaded from YAML. Ensures type safety and structural integrity of
configuration values before they reach the cache that the resolution engine
reads from.

Responsibilities
----------------
- Define ConfigSchema class for recursive validation
- Maintain schema registry for known top-level configuration keys
- Reject invalid overrides with detailed, dot-notation error messages
- Support type coercion for compatible types (int→float)

Non-Responsibilities
--------------------
- Configuration storage or caching (handled by ConfigManager)
- Semantic checks such as "probability table sums to 100" (handled by the
  encounter module, which only warns because that is a caller precondition)

Key Validation Rules
--------------------
1. Top-level config values must be Mapping types (dict-like)
2. Known fields are validated against specified types or nested schemas
3. Type coercion: int values accepted where float expected
4. Missing fields are allowed (sparse configuration support)
5. Unknown fields allowed by default (set allow_extra=False to forbid)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from fateweaver.core.config.errors import ConfigValidationError


# Type alias for schema field definitions
SchemaField = Union[type, "ConfigSchema"]


@dataclass(slots=True)
class ConfigSchema:
    """
    Recursive schema for nested configuration validation.

    Examples
    --------
    >>> schema = ConfigSchema(fields={"count": int, "rate": float})
    >>> schema.validate({"count": 10, "rate": 0.5})
    {'count': 10, 'rate': 0.5}

    >>> try:
    ...     schema.validate({"count": "not_an_int"})
    ... except ConfigValidationError as e:
    ...     print(e)
    Config value at 'count' must be int; got str
    """

    fields: Mapping[str, SchemaField]
    allow_extra: bool = True

    def validate(self, value: Any, path: str = "") -> Any:
        """
        Validate value against this schema with detailed error reporting.

        Raises
        ------
        ConfigValidationError
            If validation fails with detailed error message including path.
        """
        if not isinstance(value, Mapping):
            raise ConfigValidationError(
                f"Config value at '{path or '<root>'}' must be a mapping; "
                f"got {type(value).__name__}"
            )

        for key, expected in self.fields.items():
            full_path = f"{path}.{key}" if path else key

            # Missing fields are allowed (sparse configs)
            if key not in value:
                continue

            raw = value[key]

            if isinstance(expected, ConfigSchema):
                expected.validate(raw, path=full_path)
                continue

            # bool is a subclass of int; a flag is never a valid number here
            if expected in (int, float) and isinstance(raw, bool):
                raise ConfigValidationError(
                    f"Config value at '{full_path}' must be {expected.__name__}; got bool"
                )

            if expected is float and isinstance(raw, int):
                continue

            if not isinstance(raw, expected):
                raise ConfigValidationError(
                    f"Config value at '{full_path}' must be {expected.__name__}; "
                    f"got {type(raw).__name__}"
                )

        if not self.allow_extra:
            unknown_keys = set(value.keys()) - set(self.fields.keys())
            if unknown_keys:
                unknown_list = ", ".join(sorted(str(k) for k in unknown_keys))
                raise ConfigValidationError(
                    f"Unexpected config keys at '{path or '<root>'}': {unknown_list}"
                )

        return value


# ============================================================================
# Schema Registry
# ============================================================================

# Only well-understood fields are specified; unknown keys still pass so that
# new balance knobs can ship in YAML before code reads them.

_SCHEMAS: Dict[str, ConfigSchema] = {
    "resolution": ConfigSchema(
        fields={
            "final_value": ConfigSchema(
                fields={
                    "attack_chance_per_point": float,
                    "defense_chance_per_point": float,
                    "weapon_bonus_factor": float,
                    "armor_bonus_factor": float,
                    "blight_multiplier": float,
                    "blight_stage": int,
                    "min_roll": int,
                    "max_roll": int,
                },
            ),
            "raid": ConfigSchema(
                fields={
                    "weapon_multiplier": float,
                    "armor_multiplier": float,
                },
            ),
            "buffs": ConfigSchema(
                fields={
                    "defense_success_weighting": float,
                },
            ),
        },
    ),
    "loot": ConfigSchema(
        fields={
            "rarity_weights": dict,
            "rarity_bonuses": list,
            "village_bonuses": dict,
            "job_boosts": list,
        },
    ),
    "encounters": ConfigSchema(
        fields={
            "tables": dict,
            "exploration_tier_weights": dict,
            "wave_difficulty_groups": dict,
        },
    ),
    "flee": ConfigSchema(
        fields={
            "base_chance": float,
            "per_failure_bonus": float,
            "boost_bonus_per_level": float,
            "max_chance": float,
        },
    ),
}


def get_schema_for_top_key(top_key: str) -> Optional[ConfigSchema]:
    """
    Return the validation schema for a given top-level configuration key.

    >>> get_schema_for_top_key("unknown_key") is None
    True
    """
    return _SCHEMAS.get(top_key)


def register_schema(top_key: str, schema: ConfigSchema) -> None:
    """Register a new schema for a top-level configuration key."""
    _SCHEMAS[top_key] = schema


def unregister_schema(top_key: str) -> Optional[ConfigSchema]:
    """Unregister a schema, returning the one removed (if any)."""
    return _SCHEMAS.pop(top_key, None)


def validate_config_value(top_key: str, value: Any) -> Any:
    """
    Validate a top-level configuration value against its schema.

    If no schema is registered for the key, the value passes unchanged.

    >>> validate_config_value("flee", {"base_chance": 0.5})
    {'base_chance': 0.5}
    """
    schema = get_schema_for_top_key(top_key)

    if schema is None:
        return value

    return schema.validate(value, path=top_key)


__all__ = [
    "ConfigSchema",
    "SchemaField",
    "get_schema_for_top_key",
    "register_schema",
    "unregister_schema",
    "validate_config_value",
]
