"""
Fateweaver Shared Module

Purpose
-------
Domain-level foundations for every resolution module:
- Domain exceptions and error handling
- Balance constants (code defaults for config/*.yaml)
- Pure formulas
- Input coercion and strict validators
- The default random source

Usage
-----
    from fateweaver.modules.shared import (
        InvalidInputError,
        calculate_flee_chance,
        coerce_roll,
    )
"""

from .exceptions import (
    EmptyCandidatePoolError,
    ErrorSeverity,
    FateweaverDomainException,
    InvalidInputError,
    get_error_severity,
    should_alert,
)
from .formulas import (
    calculate_blighted_roll,
    calculate_flee_chance,
    calculate_gear_chance,
    calculate_raid_bonus,
    calculate_rarity_step_bonus,
    flee_damage_weights,
)
from .random_source import get_default_rng, resolve_rng, seed_default_rng
from .validators import (
    clamp,
    coerce_count,
    coerce_final_value,
    coerce_roll,
    coerce_stat,
    coerce_tier,
    validate_probability,
    validate_rarity,
    validate_tier,
)

__all__ = [
    # Exceptions
    "ErrorSeverity",
    "FateweaverDomainException",
    "InvalidInputError",
    "EmptyCandidatePoolError",
    "get_error_severity",
    "should_alert",
    # Formulas
    "calculate_blighted_roll",
    "calculate_flee_chance",
    "calculate_gear_chance",
    "calculate_raid_bonus",
    "calculate_rarity_step_bonus",
    "flee_damage_weights",
    # Random source
    "get_default_rng",
    "resolve_rng",
    "seed_default_rng",
    # Validators
    "clamp",
    "coerce_count",
    "coerce_final_value",
    "coerce_roll",
    "coerce_stat",
    "coerce_tier",
    "validate_probability",
    "validate_rarity",
    "validate_tier",
]
