"""
Buff Pipeline

Purpose
-------
Apply a character's active buff to stats and rolls for exactly one
resolution call, and report whether the buff was used up.

Responsibilities
----------------
- Stat accessors: attack_with, defense_with, speed_with, stealth_with
- Roll bonus from speed/stealth buffs
- Resistances per damage type and per monster element
- Stamina/heart modifiers and flee levels
- One-time, context-gated consumption with "elixir not used" logging

Non-Responsibilities
--------------------
- Persisting the consumed buff (the caller stores `pipeline.buff`)
- Deciding which elixir a character drinks (elixir catalog)

Design Notes
------------
- The buff's effects are captured when the pipeline is built. Consuming the
  buff partway through a call does not change what later accessors in the
  same call see; the next call gets the inactive buff and sees nothing.
- Contributions are context-scoped: a stat boost only counts when the call's
  context is one of the buff's trigger contexts (and, for element-targeted
  elixirs, the monster matches). Resistances are returned whenever the buff
  is active and are used up only in their damage type's trigger context.
- Consumption is idempotent. Never raises for a mismatched context.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Optional

from fateweaver.core.config.manager import ConfigManager
from fateweaver.core.logging.logger import get_logger
from fateweaver.domain.models import ActionContext, ActiveBuff, BuffEffects, DamageType
from fateweaver.modules.elixir.catalog import (
    monster_element,
    resistance_for_element,
    resistance_trigger_context,
    should_consume,
)
from fateweaver.modules.shared.constants import DEFENSE_SUCCESS_WEIGHTING
from fateweaver.modules.shared.validators import coerce_stat

logger = get_logger(__name__)

_NO_EFFECTS = BuffEffects()


@dataclass(frozen=True)
class BuffSettings:
    defense_success_weighting: float = DEFENSE_SUCCESS_WEIGHTING

    @classmethod
    def from_config(cls) -> "BuffSettings":
        return cls(
            defense_success_weighting=float(
                ConfigManager.get(
                    "resolution.buffs.defense_success_weighting",
                    DEFENSE_SUCCESS_WEIGHTING,
                )
            ),
        )


@dataclass(frozen=True)
class StaminaModifiers:
    stamina_boost: float = 0.0
    stamina_recovery: float = 0.0
    extra_hearts: float = 0.0


class BuffPipeline:
    """
    Per-call view of a character's buff.

    Example:
        >>> pipeline = BuffPipeline(buff, ActionContext.LOOT, character_name="Link")
        >>> effective_attack = pipeline.attack_with(character.attack)
        >>> persisted = pipeline.buff     # inactive copy if it was used
    """

    def __init__(
        self,
        buff: Optional[ActiveBuff],
        context: Any = None,
        *,
        monster: Any = None,
        character_name: str = "",
        settings: Optional[BuffSettings] = None,
    ) -> None:
        self._original = buff
        self._buff = buff
        self.context: Optional[ActionContext] = ActionContext.parse(context)
        self.monster = monster
        self.character_name = character_name
        self.settings = settings or BuffSettings.from_config()

        self._is_active = buff is not None and buff.is_active
        self._effects: BuffEffects = buff.effects if self._is_active else _NO_EFFECTS
        self._applies = should_consume(buff, self.context, monster)

        self._consumed = False
        self._not_used_logged = False
        self.modifiers: List[str] = []

    # =========================================================================
    # State
    # =========================================================================

    @property
    def buff(self) -> Optional[ActiveBuff]:
        """Buff state to persist after this call."""
        return self._buff

    @property
    def consumed(self) -> bool:
        return self._consumed

    @property
    def applies(self) -> bool:
        """True when the buff's contributions count in this call."""
        return self._applies

    def consume(self, reason: str) -> bool:
        """
        Mark the buff used. Returns True only for the call that consumed it.
        """
        if self._consumed or self._buff is None or not self._buff.is_active:
            return False

        self._buff = self._buff.consume()
        self._consumed = True
        logger.info(
            "Elixir consumed",
            extra={
                "character": self.character_name or "N/A",
                "buff_kind": self._original.kind.value if self._original else None,
                "reason": reason,
                "context": self.context.value if self.context else None,
            },
        )
        return True

    def _contribution(self, magnitude: float, reason: str) -> float:
        """Magnitude that counts in this call; consumes on first use."""
        if magnitude <= 0:
            return 0.0
        if not self._applies:
            self._log_not_used(reason)
            return 0.0
        self._record(reason)
        self.consume(reason)
        return magnitude

    def _record(self, modifier: str) -> None:
        if modifier not in self.modifiers:
            self.modifiers.append(modifier)

    def _log_not_used(self, reason: str) -> None:
        if self._not_used_logged or not self._is_active:
            return
        self._not_used_logged = True
        logger.info(
            "Elixir not used - conditions not met",
            extra={
                "character": self.character_name or "N/A",
                "buff_kind": self._original.kind.value if self._original else None,
                "requested": reason,
                "context": self.context.value if self.context else None,
                "trigger_contexts": sorted(
                    c.value for c in self._original.trigger_contexts
                ) if self._original else [],
            },
        )

    # =========================================================================
    # Stat accessors
    # =========================================================================

    def attack_with(self, base: Any) -> int:
        """Attack plus any applicable attack boost, floored, minimum 1."""
        total = coerce_stat(base) + self._contribution(self._effects.attack_boost, "attack_boost")
        return max(1, int(math.floor(total)))

    def defense_with(self, base: Any, success_weighting: bool = True) -> int:
        """
        Defense plus any applicable defense boost, minimum 0.

        With success_weighting the total is scaled (x1.5 by default) before
        flooring, so defense gear counts for more when weighing success.
        """
        total = coerce_stat(base) + self._contribution(
            self._effects.defense_boost, "defense_boost"
        )
        if success_weighting:
            total *= self.settings.defense_success_weighting
        return max(0, int(math.floor(total)))

    def speed_with(self, base: Any) -> int:
        total = coerce_stat(base) + self._contribution(self._effects.speed_boost, "speed_boost")
        return max(1, int(math.floor(total)))

    def stealth_with(self, base: Any) -> int:
        total = coerce_stat(base) + self._contribution(
            self._effects.stealth_boost, "stealth_boost"
        )
        return max(1, int(math.floor(total)))

    def roll_bonus(self) -> float:
        """
        Flat amount speed and stealth buffs add to a working roll.

        Zero when the buff does not apply in this context.
        """
        return self._contribution(self._effects.speed_boost, "speed_boost") + self._contribution(
            self._effects.stealth_boost, "stealth_boost"
        )

    # =========================================================================
    # Resistances
    # =========================================================================

    def resistance_for(self, damage_type: Any) -> float:
        """
        Resistance level against a damage type; 0 for unknown types.

        Used up when positive and the call runs in the damage type's trigger
        context (blight/cold/fire: travel, electric/water: combat).
        """
        try:
            dtype = DamageType(damage_type)
        except ValueError:
            return 0.0

        resistance = self._effects.resistance(dtype)
        if resistance <= 0:
            return 0.0

        if self.context == resistance_trigger_context(dtype):
            self._record(f"{dtype.value}_resistance")
            self.consume(f"{dtype.value}_resistance")
        else:
            self._log_not_used(f"{dtype.value}_resistance")
        return resistance

    def resistance_against(self, monster: Any) -> float:
        """Resistance that counters the monster's element, or 0."""
        damage_type = resistance_for_element(monster_element(monster))
        if damage_type is None:
            return 0.0
        return self.resistance_for(damage_type)

    # =========================================================================
    # Other effects
    # =========================================================================

    def stamina_modifiers(self) -> StaminaModifiers:
        """Stamina boost, stamina recovery and extra hearts that apply here."""
        effects = self._effects
        if not (effects.stamina_boost > 0 or effects.stamina_recovery > 0 or effects.extra_hearts > 0):
            return StaminaModifiers()
        if not self._applies:
            self._log_not_used("stamina")
            return StaminaModifiers()

        self._record("stamina")
        self.consume("stamina")
        return StaminaModifiers(
            stamina_boost=effects.stamina_boost,
            stamina_recovery=effects.stamina_recovery,
            extra_hearts=effects.extra_hearts,
        )

    def flee_levels(self) -> float:
        """
        Flee boost levels that count in this context.

        Does not consume; the flee resolver consumes only on a successful
        escape.
        """
        if self._effects.flee_boost <= 0:
            return 0.0
        if not self._applies:
            self._log_not_used("flee_boost")
            return 0.0
        return self._effects.flee_boost
