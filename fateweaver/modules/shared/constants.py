"""
Fateweaver Domain Constants

Purpose
-------
Code defaults for every balance number the resolution engine uses. The live
values are read from config/*.yaml through ConfigManager; these constants are
what a missing YAML key falls back to, and what tests compare against.

IMPORTANT:
This module contains GAMEPLAY constants only. Logging, environment and
directory settings belong to fateweaver.core.config.

Design Notes
------------
- Values are annotated with typing.Final to signal immutability
- Grouped by resolution component
- Table constants are tuples/dicts that must never be mutated in place;
  loaders copy them before applying overrides
"""

from __future__ import annotations

from typing import Dict, Final, Optional, Tuple

# ============================================================================
# ROLLS
# ============================================================================

MIN_ROLL: Final[int] = 1
MAX_ROLL: Final[int] = 100

# ============================================================================
# FINAL VALUE (regular mode)
# ============================================================================

ATTACK_CHANCE_PER_POINT: Final[float] = 0.10  # 10 attack = guaranteed weapon bonus
DEFENSE_CHANCE_PER_POINT: Final[float] = 0.02  # 50 defense = guaranteed armor bonus
WEAPON_BONUS_FACTOR: Final[float] = 10.0
ARMOR_BONUS_FACTOR: Final[float] = 2.0

BLIGHT_STAGE_MULTIPLIED: Final[int] = 2
BLIGHT_ROLL_MULTIPLIER: Final[float] = 1.5

# ============================================================================
# FINAL VALUE (raid mode)
# ============================================================================

RAID_WEAPON_MULTIPLIER: Final[float] = 1.8
RAID_ARMOR_MULTIPLIER: Final[float] = 0.7

# ============================================================================
# BUFFS
# ============================================================================

DEFENSE_SUCCESS_WEIGHTING: Final[float] = 1.5

# ============================================================================
# LOOT RARITY
# ============================================================================

MIN_RARITY: Final[int] = 1
MAX_RARITY: Final[int] = 10

BASE_RARITY_WEIGHTS: Final[Dict[int, float]] = {
    1: 20,
    2: 18,
    3: 15,
    4: 13,
    5: 11,
    6: 9,
    7: 7,
    8: 5,
    9: 2,
    10: 1,
}

# (rarity, min_fv inclusive, max_fv inclusive or None, multiplier)
RARITY_BONUS_STEPS: Final[Tuple[Tuple[int, int, Optional[int], float], ...]] = (
    (10, 91, None, 5.0),
    (9, 81, 100, 4.0),
    (8, 71, 100, 3.0),
    (7, 61, 100, 4.0),
    (6, 51, 100, 2.0),
    (5, 41, 100, 1.8),
    (4, 31, 100, 1.6),
    (3, 21, 100, 1.4),
    (2, 11, 100, 1.2),
    (1, 1, 100, 1.0),
)

# village level -> (min_rarity, max_rarity, low multiplier, high multiplier)
VILLAGE_RARITY_BONUSES: Final[Dict[int, Tuple[int, int, float, float]]] = {
    2: (3, 5, 1.10, 1.15),
    3: (3, 7, 1.20, 1.30),
}

# (job, marker, multiplier)
DEFAULT_JOB_BOOSTS: Final[Tuple[Tuple[str, str, float], ...]] = (
    ("beekeeper", "honey", 5.0),
)

# ============================================================================
# ENCOUNTERS
# ============================================================================

NO_ENCOUNTER_LABEL: Final[str] = "No Encounter"

STANDARD_ENCOUNTER_TABLE: Final[Tuple[Tuple[Optional[int], float], ...]] = (
    (None, 20),
    (1, 42),
    (2, 23),
    (3, 9),
    (4, 6),
)

BLOODMOON_ENCOUNTER_TABLE: Final[Tuple[Tuple[Optional[int], float], ...]] = (
    (None, 10),
    *((tier, 9) for tier in range(1, 11)),
)

TRAVEL_ENCOUNTER_TABLE: Final[Tuple[Tuple[Optional[int], float], ...]] = (
    (1, 40),
    (2, 35),
    (3, 15),
    (4, 10),
)

EXPLORATION_TIER_WEIGHTS: Final[Dict[int, float]] = {
    1: 1.0,
    2: 1.0,
    3: 0.8,
    4: 0.6,
    5: 0.4,
    6: 0.3,
    7: 0.25,
    8: 0.2,
    9: 0.15,
    10: 0.1,
}
DEFAULT_EXPLORATION_TIER_WEIGHT: Final[float] = 0.1

WAVE_DIFFICULTY_GROUPS: Final[Dict[str, Dict[int, float]]] = {
    "beginner": {1: 0.30, 2: 0.35, 3: 0.25, 4: 0.10},
    "beginner+": {1: 0.28, 2: 0.32, 3: 0.23, 4: 0.09, 5: 0.08},
    "easy": {2: 0.35, 3: 0.40, 4: 0.20, 5: 0.05},
    "easy+": {2: 0.32, 3: 0.36, 4: 0.18, 5: 0.10, 6: 0.04},
    "mixed-low": {2: 0.30, 3: 0.25, 4: 0.20, 5: 0.12, 6: 0.08, 7: 0.05},
    "mixed-medium": {
        2: 0.25, 3: 0.20, 4: 0.18, 5: 0.12, 6: 0.10,
        7: 0.07, 8: 0.04, 9: 0.03, 10: 0.01,
    },
    "intermediate": {3: 0.25, 4: 0.45, 5: 0.20, 6: 0.10},
    "intermediate+": {3: 0.22, 4: 0.40, 5: 0.18, 6: 0.12, 7: 0.06, 8: 0.02},
    "advanced": {4: 0.30, 5: 0.35, 6: 0.25, 7: 0.10},
    "advanced+": {4: 0.27, 5: 0.32, 6: 0.22, 7: 0.12, 8: 0.05, 9: 0.02},
}

# ============================================================================
# FLEE
# ============================================================================

FLEE_BASE_CHANCE: Final[float] = 0.5
FLEE_PER_FAILURE_BONUS: Final[float] = 0.05
FLEE_BOOST_BONUS_PER_LEVEL: Final[float] = 0.15
FLEE_MAX_CHANCE: Final[float] = 0.95
