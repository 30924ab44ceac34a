"""
Flee Resolver

Purpose
-------
Resolve a character's attempt to escape an encounter.

Responsibilities
----------------
- Flee chance from the failure streak and any flee boost
- Up to `advantage_attempts` draws, stopping at the first success
- Damage on failure, weighted towards low values, and knockout detection
- Report the new streak, hearts and buff state for the caller to persist

Non-Responsibilities
--------------------
- Writing the new state (CharacterRepository, via the engine facade)
- Knockout consequences beyond flagging FAILED_KO

Design Notes
------------
- Chance = min(base + per_failure x failed + per_level x flee_boost, max).
  With defaults: 0.5 + 0.05 per failure + 0.15 per boost level, cap 0.95.
- The flee boost counts only when the buff applies in the flee context
  (travel by default) and is consumed only on a successful escape.
- Damage 1..tier is drawn with weights tier..1 (tier 3: 3/6, 2/6, 1/6).
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from fateweaver.core.config.manager import ConfigManager
from fateweaver.core.logging.logger import get_logger
from fateweaver.domain.models import ActionContext, ActiveBuff, Candidate, CharacterSnapshot
from fateweaver.modules.buff import BuffPipeline, BuffSettings
from fateweaver.modules.shared.constants import (
    FLEE_BASE_CHANCE,
    FLEE_BOOST_BONUS_PER_LEVEL,
    FLEE_MAX_CHANCE,
    FLEE_PER_FAILURE_BONUS,
)
from fateweaver.modules.shared.formulas import calculate_flee_chance, flee_damage_weights
from fateweaver.modules.shared.random_source import resolve_rng
from fateweaver.modules.shared.validators import coerce_count, coerce_stat, coerce_tier

logger = get_logger(__name__)


class FleeState(str, Enum):
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED_DAMAGED = "failed_damaged"
    FAILED_KO = "failed_ko"


@dataclass(frozen=True)
class FleeSettings:
    base_chance: float = FLEE_BASE_CHANCE
    per_failure_bonus: float = FLEE_PER_FAILURE_BONUS
    boost_bonus_per_level: float = FLEE_BOOST_BONUS_PER_LEVEL
    max_chance: float = FLEE_MAX_CHANCE

    @classmethod
    def from_config(cls) -> "FleeSettings":
        return cls(
            base_chance=float(ConfigManager.get("flee.base_chance", FLEE_BASE_CHANCE)),
            per_failure_bonus=float(
                ConfigManager.get("flee.per_failure_bonus", FLEE_PER_FAILURE_BONUS)
            ),
            boost_bonus_per_level=float(
                ConfigManager.get("flee.boost_bonus_per_level", FLEE_BOOST_BONUS_PER_LEVEL)
            ),
            max_chance=float(ConfigManager.get("flee.max_chance", FLEE_MAX_CHANCE)),
        )

    def chance(self, failed_attempts: int, boost_level: float) -> float:
        return calculate_flee_chance(
            failed_attempts,
            boost_level,
            self.base_chance,
            self.per_failure_bonus,
            self.boost_bonus_per_level,
            self.max_chance,
        )


@dataclass(frozen=True)
class FleeOutcome:
    """
    Result of one flee action.

    `failed_flee_attempts` and `remaining_hearts` are the values to persist;
    `buff` is the buff state to persist. `damage_dealt` is None on success.
    """

    success: bool
    attempts_made: int
    damage_dealt: Optional[int]
    state: FleeState
    flee_chance: float
    failed_flee_attempts: int
    remaining_hearts: float
    buff: Optional[ActiveBuff] = None
    buff_consumed: bool = False
    advantage_applied: bool = False

    @property
    def knocked_out(self) -> bool:
        return self.state is FleeState.FAILED_KO

    def apply_to(self, character: CharacterSnapshot) -> CharacterSnapshot:
        """Snapshot carrying the new flee streak, hearts and buff."""
        return character.with_flee_state(
            self.failed_flee_attempts, self.remaining_hearts
        ).with_buff(self.buff)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "attempts_made": self.attempts_made,
            "damage_dealt": self.damage_dealt,
            "state": self.state.value,
            "flee_chance": self.flee_chance,
            "failed_flee_attempts": self.failed_flee_attempts,
            "remaining_hearts": self.remaining_hearts,
            "buff_consumed": self.buff_consumed,
            "advantage_applied": self.advantage_applied,
        }


def roll_flee_damage(tier: int, rng: random.Random) -> int:
    """Damage for a failed flee against a monster of the given tier."""
    values, weights = flee_damage_weights(tier)
    return rng.choices(values, weights=weights, k=1)[0]


class FleeResolver:
    def __init__(
        self,
        settings: Optional[FleeSettings] = None,
        buff_settings: Optional[BuffSettings] = None,
    ) -> None:
        self.settings = settings or FleeSettings.from_config()
        self.buff_settings = buff_settings or BuffSettings.from_config()

    def attempt(
        self,
        character: CharacterSnapshot,
        monster_tier: Any,
        advantage_attempts: Any = 1,
        *,
        context: Any = ActionContext.TRAVEL,
        rng: Optional[random.Random] = None,
        monster: Any = None,
    ) -> FleeOutcome:
        """
        Attempt to flee.

        Args:
            character: Snapshot of the fleeing character
            monster_tier: Tier of the monster (or the monster Candidate)
            advantage_attempts: Number of draws allowed (minimum 1)
            context: Action context for flee boost gating
            rng: Random source
            monster: Opponent, for element-targeted elixirs

        Returns:
            FleeOutcome
        """
        if isinstance(monster_tier, Candidate):
            monster = monster if monster is not None else monster_tier
            monster_tier = monster_tier.tier
        tier = coerce_tier(monster_tier) or 1
        attempts_allowed = coerce_count(advantage_attempts, minimum=1)
        failed_before = coerce_count(character.failed_flee_attempts)
        source = resolve_rng(rng)

        pipeline = BuffPipeline(
            character.active_buff,
            context,
            monster=monster,
            character_name=character.name,
            settings=self.buff_settings,
        )
        boost_level = pipeline.flee_levels()
        chance = self.settings.chance(failed_before, boost_level)

        attempts_made = 0
        success = False
        while attempts_made < attempts_allowed:
            attempts_made += 1
            if source.random() < chance:
                success = True
                break

        hearts = coerce_stat(character.current_hearts)
        log_extra = {
            "character": character.name or "N/A",
            "tier": tier,
            "attempts": attempts_made,
            "flee_chance": chance,
        }

        if success:
            if boost_level > 0:
                pipeline.consume("flee_boost")
            logger.info(f"{character.name or 'Character'} fled", extra=log_extra)
            return FleeOutcome(
                success=True,
                attempts_made=attempts_made,
                damage_dealt=None,
                state=FleeState.SUCCEEDED,
                flee_chance=chance,
                failed_flee_attempts=0,
                remaining_hearts=hearts,
                buff=pipeline.buff,
                buff_consumed=pipeline.consumed,
                advantage_applied=attempts_allowed > 1,
            )

        damage = roll_flee_damage(tier, source)
        remaining = hearts - damage
        state = FleeState.FAILED_KO if remaining <= 0 else FleeState.FAILED_DAMAGED

        logger.info(
            f"Flee failed: {damage} damage"
            + (" (knocked out)" if state is FleeState.FAILED_KO else ""),
            extra={**log_extra, "damage": damage, "remaining_hearts": remaining},
        )
        return FleeOutcome(
            success=False,
            attempts_made=attempts_made,
            damage_dealt=damage,
            state=state,
            flee_chance=chance,
            failed_flee_attempts=failed_before + 1,
            remaining_hearts=remaining,
            buff=pipeline.buff,
            buff_consumed=pipeline.consumed,
            advantage_applied=attempts_allowed > 1,
        )


def attempt_flee(
    character: CharacterSnapshot,
    monster_tier: Any,
    advantage_attempts: Any = 1,
    *,
    context: Any = ActionContext.TRAVEL,
    rng: Optional[random.Random] = None,
    monster: Any = None,
) -> FleeOutcome:
    """Attempt to flee with settings read from configuration."""
    return FleeResolver().attempt(
        character,
        monster_tier,
        advantage_attempts,
        context=context,
        rng=rng,
        monster=monster,
    )
