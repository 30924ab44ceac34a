"""
Fateweaver Resolution Formulas

Purpose
-------
Pure calculation functions for the resolution engine: gear trigger chances,
blight scaling, raid gear bonuses, rarity step bonuses and flee odds.

Design Notes
------------
All formulas:
- Accept parameters explicitly (no config access)
- Return calculated values
- Have no side effects and draw no random numbers

The resolvers in fateweaver.modules read their constants from settings
objects and call into these functions, so the arithmetic can be tested
without a random source.

Usage
-----
    from fateweaver.modules.shared.formulas import calculate_flee_chance

    calculate_flee_chance(failed_attempts=3, boost_level=0)   # 0.65
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from .constants import (
    BLIGHT_ROLL_MULTIPLIER,
    BLIGHT_STAGE_MULTIPLIED,
    FLEE_BASE_CHANCE,
    FLEE_BOOST_BONUS_PER_LEVEL,
    FLEE_MAX_CHANCE,
    FLEE_PER_FAILURE_BONUS,
)


def calculate_gear_chance(raw_stat: float, chance_per_point: float) -> float:
    """
    Probability that a gear bonus triggers in regular mode.

    Args:
        raw_stat: Unbuffed attack or defense (already coerced, >= 0)
        chance_per_point: Probability contributed per stat point

    Returns:
        Chance in [0.0, 1.0]

    Example:
        >>> calculate_gear_chance(5, 0.10)
        0.5
        >>> calculate_gear_chance(50, 0.02)
        1.0
    """
    return max(0.0, min(1.0, raw_stat * chance_per_point))


def calculate_blighted_roll(
    roll: float,
    is_blighted: bool,
    blight_stage: int,
    affected_stage: int = BLIGHT_STAGE_MULTIPLIED,
    multiplier: float = BLIGHT_ROLL_MULTIPLIER,
) -> Tuple[int, float]:
    """
    Scale a roll for blighted characters.

    Only characters at exactly `affected_stage` are scaled; the result is
    floored. Callers clamp afterwards.

    Returns:
        (roll after scaling, multiplier that was applied)

    Example:
        >>> calculate_blighted_roll(40, True, 2)
        (60, 1.5)
        >>> calculate_blighted_roll(40, True, 3)
        (40, 1.0)
    """
    if is_blighted and blight_stage == affected_stage:
        return int(math.floor(roll * multiplier)), multiplier
    return int(math.floor(roll)), 1.0


def calculate_raid_bonus(raw_stat: float, multiplier: float) -> int:
    """
    Guaranteed raid gear bonus.

    Example:
        >>> calculate_raid_bonus(10, 1.8)
        18
        >>> calculate_raid_bonus(10, 0.7)
        7
    """
    if raw_stat <= 0:
        return 0
    # Rounded before flooring so 10 * 0.7 (6.999...) still yields 7
    return int(math.floor(round(raw_stat * multiplier, 9)))


def calculate_rarity_step_bonus(
    rarity: int,
    final_value: float,
    steps: Sequence[Tuple[int, int, Optional[int], float]],
) -> float:
    """
    Multiplier for a rarity at the given final value.

    Each step is (rarity, min_fv inclusive, max_fv inclusive or None, multiplier).
    A rarity without a matching step keeps its base weight (multiplier 1.0).

    Example:
        >>> steps = [(10, 91, None, 5.0), (1, 1, 100, 1.0)]
        >>> calculate_rarity_step_bonus(10, 95, steps)
        5.0
        >>> calculate_rarity_step_bonus(10, 5, steps)
        1.0
    """
    for step_rarity, min_fv, max_fv, multiplier in steps:
        if step_rarity != rarity:
            continue
        if final_value >= min_fv and (max_fv is None or final_value <= max_fv):
            return float(multiplier)
    return 1.0


def calculate_flee_chance(
    failed_attempts: int,
    boost_level: float,
    base_chance: float = FLEE_BASE_CHANCE,
    per_failure_bonus: float = FLEE_PER_FAILURE_BONUS,
    boost_bonus_per_level: float = FLEE_BOOST_BONUS_PER_LEVEL,
    max_chance: float = FLEE_MAX_CHANCE,
) -> float:
    """
    Probability of a single flee attempt succeeding.

    Example:
        >>> calculate_flee_chance(0, 0)
        0.5
        >>> calculate_flee_chance(20, 0)
        0.95
    """
    chance = (
        base_chance
        + per_failure_bonus * max(0, failed_attempts)
        + boost_bonus_per_level * max(0.0, boost_level)
    )
    return round(min(chance, max_chance), 10)


def flee_damage_weights(tier: int) -> Tuple[List[int], List[int]]:
    """
    Damage values and weights for a failed flee.

    Damage 1..tier is weighted tier..1, so low damage is most likely.

    Example:
        >>> flee_damage_weights(3)
        ([1, 2, 3], [3, 2, 1])
    """
    tier = max(1, int(tier))
    values = list(range(1, tier + 1))
    weights = list(range(tier, 0, -1))
    return values, weights
