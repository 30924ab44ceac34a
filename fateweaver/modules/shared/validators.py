"""
Fateweaver Input Coercion and Validators

Purpose
-------
Two kinds of helpers live here:

- Coercers (`coerce_*`, `clamp`) used on the hot path of every resolution.
  They never raise: a missing, non-numeric, NaN or negative stat becomes 0
  and a roll is forced into [1, 100].
- Strict validators (`validate_*`) used at the collaborator boundary, e.g.
  when a catalog is loaded or a caller names a resolution mode. They raise
  InvalidInputError on failure and return the normalized value on success.

Usage
-----
    from fateweaver.modules.shared.validators import coerce_roll, coerce_stat

    coerce_stat(float("nan"))   # 0.0
    coerce_roll("abc")          # 1
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Optional

from .constants import MAX_RARITY, MAX_ROLL, MIN_RARITY, MIN_ROLL
from .exceptions import InvalidInputError


# ============================================================================
# Coercers (never raise)
# ============================================================================


def _as_finite_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def clamp(value: float, low: float, high: float) -> float:
    """
    Clamp value into [low, high].

    Example:
        >>> clamp(140, 1, 100)
        100
    """
    return max(low, min(high, value))


def coerce_stat(value: Any) -> float:
    """
    Coerce a character stat to a non-negative number.

    Missing, non-numeric, NaN, infinite and negative values become 0.

    Example:
        >>> coerce_stat(None)
        0.0
        >>> coerce_stat(-4)
        0.0
        >>> coerce_stat("7")
        7.0
    """
    number = _as_finite_number(value)
    if number is None or number < 0:
        return 0.0
    return number


def coerce_roll(value: Any, min_roll: int = MIN_ROLL, max_roll: int = MAX_ROLL) -> int:
    """
    Coerce a dice roll to an integer in [min_roll, max_roll].

    Non-numeric input counts as 0 and is therefore raised to min_roll.
    Fractional rolls are floored.

    Example:
        >>> coerce_roll(150)
        100
        >>> coerce_roll("abc")
        1
        >>> coerce_roll(42.9)
        42
    """
    number = _as_finite_number(value)
    if number is None:
        number = 0.0
    return int(math.floor(clamp(number, min_roll, max_roll)))


def coerce_final_value(value: Any) -> float:
    """
    Coerce a final value used for rarity weighting.

    Non-numeric or NaN values become 0, which matches no bonus step and
    leaves the base weights unchanged.
    """
    number = _as_finite_number(value)
    return 0.0 if number is None else number


def coerce_tier(value: Any) -> Optional[int]:
    """Coerce a monster tier to a positive int, or None when unusable."""
    number = _as_finite_number(value)
    if number is None or number < 1:
        return None
    return int(number)


def coerce_count(value: Any, minimum: int = 0) -> int:
    """
    Coerce a counter (failed attempts, advantage attempts) to an int >= minimum.

    Example:
        >>> coerce_count(None, minimum=1)
        1
    """
    number = _as_finite_number(value)
    if number is None:
        return minimum
    return max(minimum, int(number))


# ============================================================================
# Strict validators (raise InvalidInputError)
# ============================================================================


def validate_rarity(rarity: Any) -> int:
    """
    Validate that an item rarity is an int in [1, 10].

    Raises:
        InvalidInputError: If rarity is missing or out of range
    """
    number = _as_finite_number(rarity)
    if number is None or not number.is_integer() or not (MIN_RARITY <= number <= MAX_RARITY):
        raise InvalidInputError(
            "rarity", rarity, f"must be an integer between {MIN_RARITY} and {MAX_RARITY}"
        )
    return int(number)


def validate_tier(tier: Any) -> int:
    """
    Validate that a monster tier is a positive integer.

    Raises:
        InvalidInputError: If tier is missing or below 1
    """
    number = _as_finite_number(tier)
    if number is None or not number.is_integer() or number < 1:
        raise InvalidInputError("tier", tier, "must be a positive integer")
    return int(number)


def validate_probability(value: Any, field: str) -> float:
    """
    Validate that a value is a probability in [0, 1].

    Raises:
        InvalidInputError: If value is not a number in [0, 1]
    """
    number = _as_finite_number(value)
    if number is None or not (0.0 <= number <= 1.0):
        raise InvalidInputError(field, value, "must be a number between 0 and 1")
    return number
