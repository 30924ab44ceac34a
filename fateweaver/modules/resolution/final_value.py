"""
Final Value Resolver

Purpose
-------
Turn a character's dice roll into the final value an action is judged by,
applying blight, elixir buffs and gear.

Responsibilities
----------------
- Coerce the raw roll into [1, 100]
- Blight scaling (stage 2 only, x1.5)
- Speed/stealth buff bonus and an optional external roll boost
- Gear: probabilistic in regular mode, guaranteed in raids
- Report every step in a FinalValueResult, including the buff state the
  caller must persist

Non-Responsibilities
--------------------
- Persisting the consumed buff (caller stores `result.buff`)
- Choosing loot or monsters from the final value (loot / encounter modules)

Design Notes
------------
- Regular mode: the weapon triggers with chance min(1, raw attack x 0.10) and
  adds effective attack x 10; armor triggers with chance
  min(1, raw defense x 0.02) and adds effective defense x 2. Both draws are
  always made, attack first, so a seeded rng replays identically.
- Raid mode: weapon adds floor(effective attack x 1.8) and armor adds
  floor(effective defense x 0.7) whenever the raw stat is positive.
- "Effective" stats include an applicable attack/defense elixir.
- `damage_value` is the working roll floored to an int, before gear and
  before clamping.
- Never raises for bad numbers; an unknown mode raises InvalidInputError.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from fateweaver.core.config.manager import ConfigManager
from fateweaver.core.logging.logger import get_logger
from fateweaver.domain.models import ActionContext, ActiveBuff, CharacterSnapshot
from fateweaver.modules.boost import BoostModifier, NumberPayload, apply_boost
from fateweaver.modules.buff import BuffPipeline, BuffSettings
from fateweaver.modules.shared.constants import (
    ARMOR_BONUS_FACTOR,
    ATTACK_CHANCE_PER_POINT,
    BLIGHT_ROLL_MULTIPLIER,
    BLIGHT_STAGE_MULTIPLIED,
    DEFENSE_CHANCE_PER_POINT,
    MAX_ROLL,
    MIN_ROLL,
    RAID_ARMOR_MULTIPLIER,
    RAID_WEAPON_MULTIPLIER,
    WEAPON_BONUS_FACTOR,
)
from fateweaver.modules.shared.exceptions import InvalidInputError
from fateweaver.modules.shared.formulas import (
    calculate_blighted_roll,
    calculate_gear_chance,
    calculate_raid_bonus,
)
from fateweaver.modules.shared.random_source import resolve_rng
from fateweaver.modules.shared.validators import coerce_roll, coerce_stat

logger = get_logger(__name__)


class ResolutionMode(str, Enum):
    REGULAR = "regular"
    RAID = "raid"

    @classmethod
    def parse(cls, value: Any) -> "ResolutionMode":
        """
        Raises:
            InvalidInputError: If the mode is not "regular" or "raid"
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidInputError("mode", value, "must be 'regular' or 'raid'")

    @property
    def default_context(self) -> ActionContext:
        return ActionContext.RAID if self is ResolutionMode.RAID else ActionContext.COMBAT


# ============================================================================
# Settings
# ============================================================================


@dataclass(frozen=True)
class FinalValueSettings:
    attack_chance_per_point: float = ATTACK_CHANCE_PER_POINT
    defense_chance_per_point: float = DEFENSE_CHANCE_PER_POINT
    weapon_bonus_factor: float = WEAPON_BONUS_FACTOR
    armor_bonus_factor: float = ARMOR_BONUS_FACTOR
    blight_stage: int = BLIGHT_STAGE_MULTIPLIED
    blight_multiplier: float = BLIGHT_ROLL_MULTIPLIER
    min_roll: int = MIN_ROLL
    max_roll: int = MAX_ROLL
    raid_weapon_multiplier: float = RAID_WEAPON_MULTIPLIER
    raid_armor_multiplier: float = RAID_ARMOR_MULTIPLIER

    @classmethod
    def from_config(cls) -> "FinalValueSettings":
        """Read `resolution.final_value.*` and `resolution.raid.*`."""
        fv = "resolution.final_value"
        raid = "resolution.raid"
        return cls(
            attack_chance_per_point=float(
                ConfigManager.get(f"{fv}.attack_chance_per_point", ATTACK_CHANCE_PER_POINT)
            ),
            defense_chance_per_point=float(
                ConfigManager.get(f"{fv}.defense_chance_per_point", DEFENSE_CHANCE_PER_POINT)
            ),
            weapon_bonus_factor=float(
                ConfigManager.get(f"{fv}.weapon_bonus_factor", WEAPON_BONUS_FACTOR)
            ),
            armor_bonus_factor=float(
                ConfigManager.get(f"{fv}.armor_bonus_factor", ARMOR_BONUS_FACTOR)
            ),
            blight_stage=int(ConfigManager.get(f"{fv}.blight_stage", BLIGHT_STAGE_MULTIPLIED)),
            blight_multiplier=float(
                ConfigManager.get(f"{fv}.blight_multiplier", BLIGHT_ROLL_MULTIPLIER)
            ),
            min_roll=int(ConfigManager.get(f"{fv}.min_roll", MIN_ROLL)),
            max_roll=int(ConfigManager.get(f"{fv}.max_roll", MAX_ROLL)),
            raid_weapon_multiplier=float(
                ConfigManager.get(f"{raid}.weapon_multiplier", RAID_WEAPON_MULTIPLIER)
            ),
            raid_armor_multiplier=float(
                ConfigManager.get(f"{raid}.armor_multiplier", RAID_ARMOR_MULTIPLIER)
            ),
        )


# ============================================================================
# Result
# ============================================================================


@dataclass(frozen=True)
class FinalValueResult:
    """
    Outcome of one final value resolution.

    Attributes
    ----------
    damage_value : int
        Working roll after blight, buffs and roll boost, floored; before gear,
        unclamped
    adjusted_random_value : int
        Final value in [min_roll, max_roll]
    attack_applied, defense_applied : int
        Gear bonus added by weapon and armor (0 when not fired)
    attack_fired, defense_fired : bool
        Whether each gear bonus triggered
    buff : Optional[ActiveBuff]
        Buff state to persist (inactive if consumed here)
    buff_consumed : bool
        True when this call used the buff up
    modifiers : List[str]
        Buff effects that counted, in order of use
    """

    damage_value: int
    adjusted_random_value: int
    attack_applied: int
    defense_applied: int
    mode: ResolutionMode
    context: Optional[ActionContext]
    initial_roll: int
    blight_multiplier: float
    attack_fired: bool
    defense_fired: bool
    buff: Optional[ActiveBuff]
    buff_consumed: bool
    modifiers: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "damage_value": self.damage_value,
            "adjusted_random_value": self.adjusted_random_value,
            "attack_applied": self.attack_applied,
            "defense_applied": self.defense_applied,
            "mode": self.mode.value,
            "context": self.context.value if self.context else None,
            "initial_roll": self.initial_roll,
            "blight_multiplier": self.blight_multiplier,
            "attack_fired": self.attack_fired,
            "defense_fired": self.defense_fired,
            "buff": self.buff.to_dict() if self.buff else None,
            "buff_consumed": self.buff_consumed,
            "modifiers": list(self.modifiers),
        }


# ============================================================================
# Resolver
# ============================================================================


class FinalValueResolver:
    """
    Computes final values for regular and raid actions.

    Example:
        >>> resolver = FinalValueResolver()
        >>> result = resolver.resolve(snapshot, 42, "raid", rng=random.Random(7))
        >>> result.adjusted_random_value
    """

    def __init__(
        self,
        settings: Optional[FinalValueSettings] = None,
        buff_settings: Optional[BuffSettings] = None,
    ) -> None:
        self.settings = settings or FinalValueSettings.from_config()
        self.buff_settings = buff_settings or BuffSettings.from_config()

    def resolve(
        self,
        character: CharacterSnapshot,
        dice_roll: Any,
        mode: Any = ResolutionMode.REGULAR,
        *,
        context: Any = None,
        rng: Optional[random.Random] = None,
        roll_boost: Optional[BoostModifier] = None,
        monster: Any = None,
    ) -> FinalValueResult:
        """
        Resolve one roll.

        Args:
            character: Snapshot of the acting character
            dice_roll: Raw roll; coerced into [min_roll, max_roll]
            mode: "regular" or "raid"
            context: Action context for buff gating (default: combat for
                regular, raid for raid)
            rng: Random source for regular-mode gear draws
            roll_boost: Optional boost over the working roll
            monster: Opponent, for element-targeted elixirs

        Returns:
            FinalValueResult

        Raises:
            InvalidInputError: If mode is unknown
        """
        resolution_mode = ResolutionMode.parse(mode)
        action = self._resolve_context(context, resolution_mode)
        settings = self.settings

        pipeline = BuffPipeline(
            character.active_buff,
            action,
            monster=monster,
            character_name=character.name,
            settings=self.buff_settings,
        )

        initial_roll = coerce_roll(dice_roll, settings.min_roll, settings.max_roll)
        working, blight_multiplier = calculate_blighted_roll(
            initial_roll,
            bool(character.is_blighted),
            character.blight_stage,
            settings.blight_stage,
            settings.blight_multiplier,
        )
        if blight_multiplier != 1.0:
            logger.info(
                f"Blight multiplier applied: {initial_roll} x{blight_multiplier} -> {working}",
                extra={"character": character.name or "N/A", "blight_stage": character.blight_stage},
            )

        working_roll: float = working + pipeline.roll_bonus()
        if roll_boost is not None:
            boosted = apply_boost(roll_boost, NumberPayload(working_roll), label="roll_boost")
            working_roll = coerce_stat(boosted.value)

        raw_attack = coerce_stat(character.attack)
        raw_defense = coerce_stat(character.defense)

        if resolution_mode is ResolutionMode.RAID:
            attack_fired, attack_bonus, defense_fired, defense_bonus = self._raid_gear(
                pipeline, raw_attack, raw_defense
            )
        else:
            attack_fired, attack_bonus, defense_fired, defense_bonus = self._regular_gear(
                pipeline, raw_attack, raw_defense, resolve_rng(rng)
            )

        adjusted = coerce_roll(
            working_roll + attack_bonus + defense_bonus, settings.min_roll, settings.max_roll
        )

        if attack_bonus or defense_bonus:
            gear_total = attack_bonus + defense_bonus
            logger.info(
                f"Gear adjustment: base={working_roll} +weapon={attack_bonus} "
                f"+armor={defense_bonus} -> final={adjusted} "
                f"(gear={round(gear_total / adjusted * 100)}% of final)",
                extra={
                    "character": character.name or "N/A",
                    "mode": resolution_mode.value,
                },
            )

        return FinalValueResult(
            damage_value=int(math.floor(working_roll)),
            adjusted_random_value=adjusted,
            attack_applied=attack_bonus,
            defense_applied=defense_bonus,
            mode=resolution_mode,
            context=action,
            initial_roll=initial_roll,
            blight_multiplier=blight_multiplier,
            attack_fired=attack_fired,
            defense_fired=defense_fired,
            buff=pipeline.buff,
            buff_consumed=pipeline.consumed,
            modifiers=list(pipeline.modifiers),
        )

    def _regular_gear(
        self,
        pipeline: BuffPipeline,
        raw_attack: float,
        raw_defense: float,
        rng: random.Random,
    ) -> Tuple[bool, int, bool, int]:
        settings = self.settings
        attack_chance = calculate_gear_chance(raw_attack, settings.attack_chance_per_point)
        defense_chance = calculate_gear_chance(raw_defense, settings.defense_chance_per_point)

        # Draw order is fixed: attack, then defense
        attack_fired = rng.random() < attack_chance
        defense_fired = rng.random() < defense_chance

        effective_attack = pipeline.attack_with(raw_attack)
        effective_defense = pipeline.defense_with(raw_defense, success_weighting=False)

        attack_bonus = (
            int(effective_attack * settings.weapon_bonus_factor) if attack_fired else 0
        )
        defense_bonus = (
            int(effective_defense * settings.armor_bonus_factor) if defense_fired else 0
        )
        return attack_fired, attack_bonus, defense_fired, defense_bonus

    def _raid_gear(
        self,
        pipeline: BuffPipeline,
        raw_attack: float,
        raw_defense: float,
    ) -> Tuple[bool, int, bool, int]:
        settings = self.settings
        attack_fired = raw_attack > 0
        defense_fired = raw_defense > 0

        effective_attack = pipeline.attack_with(raw_attack)
        effective_defense = pipeline.defense_with(raw_defense, success_weighting=False)

        attack_bonus = (
            calculate_raid_bonus(effective_attack, settings.raid_weapon_multiplier)
            if attack_fired
            else 0
        )
        defense_bonus = (
            calculate_raid_bonus(effective_defense, settings.raid_armor_multiplier)
            if defense_fired
            else 0
        )
        return attack_fired, attack_bonus, defense_fired, defense_bonus

    @staticmethod
    def _resolve_context(context: Any, mode: ResolutionMode) -> ActionContext:
        if context is None:
            return mode.default_context
        action = ActionContext.parse(context)
        if action is None:
            logger.warning(
                f"Unknown action context {context!r}; using {mode.default_context.value}",
                extra={"mode": mode.value},
            )
            return mode.default_context
        return action


def resolve_final_value(
    character: CharacterSnapshot,
    dice_roll: Any,
    mode: Any = ResolutionMode.REGULAR,
    *,
    context: Any = None,
    rng: Optional[random.Random] = None,
    roll_boost: Optional[BoostModifier] = None,
    monster: Any = None,
) -> FinalValueResult:
    """Resolve a roll with settings read from configuration."""
    return FinalValueResolver().resolve(
        character,
        dice_roll,
        mode,
        context=context,
        rng=rng,
        roll_boost=roll_boost,
        monster=monster,
    )
