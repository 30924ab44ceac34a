"""
Rarity Weight Table

Purpose
-------
Turn a final value (the outcome of a gather or loot roll) into a weight per
item rarity. Higher final values unlock bonuses for rarer items; village
upgrades add a small random bump to mid rarities.

Responsibilities
----------------
- Hold base weights, step bonuses and village bonuses (RarityWeightTable)
- Load them from `loot.*` in config/*.yaml, falling back to code defaults
- Compute adjusted weights for one resolution

Non-Responsibilities
--------------------
- Building the candidate pool (handled by fateweaver.modules.loot.sampler)

Design Notes
------------
- Step bonuses use an inclusive lower bound. A rarity with no matching step
  keeps its base weight, so every rarity stays reachable and low final
  values only lose the bonuses.
- The rarity 7 bonus (x4.0) is larger than rarity 8's (x3.0); the table is
  reproduced as tuned.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from fateweaver.core.config.manager import ConfigManager
from fateweaver.core.logging.logger import get_logger
from fateweaver.modules.shared.constants import (
    BASE_RARITY_WEIGHTS,
    RARITY_BONUS_STEPS,
    VILLAGE_RARITY_BONUSES,
)
from fateweaver.modules.shared.formulas import calculate_rarity_step_bonus
from fateweaver.modules.shared.random_source import resolve_rng
from fateweaver.modules.shared.validators import coerce_count, coerce_final_value

logger = get_logger(__name__)

RarityStep = Tuple[int, int, Optional[int], float]


@dataclass(frozen=True)
class VillageRarityBonus:
    """Random multiplier in [low, high] for rarities min_rarity..max_rarity."""

    min_rarity: int
    max_rarity: int
    low: float
    high: float

    def covers(self, rarity: int) -> bool:
        return self.min_rarity <= rarity <= self.max_rarity

    def draw(self, rng: random.Random) -> float:
        return rng.uniform(self.low, self.high)


def _default_village_bonuses() -> Dict[int, VillageRarityBonus]:
    return {
        level: VillageRarityBonus(*values)
        for level, values in VILLAGE_RARITY_BONUSES.items()
    }


@dataclass(frozen=True)
class RarityWeightTable:
    """Base weights plus the bonus rules applied on top of them."""

    base_weights: Dict[int, float] = field(
        default_factory=lambda: dict(BASE_RARITY_WEIGHTS)
    )
    bonus_steps: Tuple[RarityStep, ...] = RARITY_BONUS_STEPS
    village_bonuses: Dict[int, VillageRarityBonus] = field(
        default_factory=_default_village_bonuses
    )

    @classmethod
    def from_config(cls) -> "RarityWeightTable":
        """
        Build the table from `loot.rarity_weights`, `loot.rarity_bonuses` and
        `loot.village_bonuses`. A missing or malformed section falls back to
        its code default.
        """
        return cls(
            base_weights=_load_base_weights(ConfigManager.get("loot.rarity_weights")),
            bonus_steps=_load_bonus_steps(ConfigManager.get("loot.rarity_bonuses")),
            village_bonuses=_load_village_bonuses(ConfigManager.get("loot.village_bonuses")),
        )

    def adjust(
        self,
        final_value: Any,
        village_level: Any = 1,
        rng: Optional[random.Random] = None,
    ) -> Dict[int, float]:
        """
        Adjusted weight per rarity for a final value.

        Args:
            final_value: Resolution outcome; non-numeric values count as 0
            village_level: Village upgrade level (2 and 3 carry bonuses)
            rng: Random source for the village multiplier

        Returns:
            {rarity: weight}; only a zero base weight removes a rarity
        """
        fv = coerce_final_value(final_value)
        level = coerce_count(village_level, minimum=1)
        village_bonus = self.village_bonuses.get(level)
        source = resolve_rng(rng) if village_bonus is not None else None

        adjusted: Dict[int, float] = {}
        for rarity, weight in sorted(self.base_weights.items()):
            multiplier = calculate_rarity_step_bonus(rarity, fv, self.bonus_steps)

            if village_bonus is not None and village_bonus.covers(rarity):
                village_multiplier = village_bonus.draw(source)
                multiplier *= village_multiplier
                logger.debug(
                    "Village rarity bonus applied",
                    extra={
                        "village_level": level,
                        "rarity": rarity,
                        "village_multiplier": round(village_multiplier, 3),
                    },
                )

            adjusted[rarity] = weight * multiplier

        return adjusted


def adjust_rarity_weights(
    final_value: Any,
    village_level: Any = 1,
    rng: Optional[random.Random] = None,
    table: Optional[RarityWeightTable] = None,
) -> Dict[int, float]:
    """
    Adjusted rarity weights using the configured table.

    Example:
        >>> weights = adjust_rarity_weights(95)
        >>> weights[10]
        5.0
        >>> adjust_rarity_weights(5)[10]
        1.0
    """
    table = table or RarityWeightTable.from_config()
    return table.adjust(final_value, village_level, rng)


# ============================================================================
# Config loaders
# ============================================================================


def _load_base_weights(raw: Any) -> Dict[int, float]:
    if not isinstance(raw, dict) or not raw:
        return dict(BASE_RARITY_WEIGHTS)
    try:
        return {int(rarity): float(weight) for rarity, weight in raw.items()}
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid loot.rarity_weights, using defaults: {e}")
        return dict(BASE_RARITY_WEIGHTS)


def _load_bonus_steps(raw: Any) -> Tuple[RarityStep, ...]:
    if not isinstance(raw, list) or not raw:
        return RARITY_BONUS_STEPS
    try:
        return tuple(
            (
                int(step["rarity"]),
                int(step["min_fv"]),
                None if step.get("max_fv") is None else int(step["max_fv"]),
                float(step["multiplier"]),
            )
            for step in raw
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Invalid loot.rarity_bonuses, using defaults: {e}")
        return RARITY_BONUS_STEPS


def _load_village_bonuses(raw: Any) -> Dict[int, VillageRarityBonus]:
    if not isinstance(raw, dict):
        return _default_village_bonuses()
    try:
        return {
            int(level): VillageRarityBonus(
                min_rarity=int(bonus["min_rarity"]),
                max_rarity=int(bonus["max_rarity"]),
                low=float(bonus["low"]),
                high=float(bonus["high"]),
            )
            for level, bonus in raw.items()
        }
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid loot.village_bonuses, using defaults: {e}")
        return _default_village_bonuses()
