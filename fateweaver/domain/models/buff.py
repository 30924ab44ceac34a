"""
Buff Domain Model for Fateweaver.

Purpose
-------
Immutable value objects describing an elixir-style buff: what it boosts, in
which action contexts it applies, and whether it is still active.

Responsibilities
----------------
- Name the action contexts a resolution can run under (ActionContext)
- Name the damage types a resistance can cover (DamageType)
- Hold buff magnitudes (BuffEffects) and activation state (ActiveBuff)
- Produce consumed copies; a buff is never mutated in place

Non-Responsibilities
--------------------
- Deciding when a buff is consumed (handled by BuffPipeline)
- The elixir catalog (handled by fateweaver.modules.elixir)
- Persisting the consumed state (handled by CharacterRepository)
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional


# ============================================================================
# Enums
# ============================================================================


class ActionContext(str, Enum):
    """The kind of action a resolution is performed for."""

    GATHER = "gather"
    LOOT = "loot"
    COMBAT = "combat"
    TRAVEL = "travel"
    RAID = "raid"
    HELP_WANTED = "help_wanted"
    CRAFTING = "crafting"
    STEAL = "steal"

    @classmethod
    def parse(cls, value: Any) -> Optional["ActionContext"]:
        """
        Parse a context from an enum member or string; None when unknown.

        Example
        -------
        >>> ActionContext.parse("Help Wanted")
        <ActionContext.HELP_WANTED: 'help_wanted'>
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            return None


class DamageType(str, Enum):
    """Damage types a buff can resist."""

    BLIGHT = "blight"
    COLD = "cold"
    ELECTRIC = "electric"
    FIRE = "fire"
    WATER = "water"


class BuffKind(str, Enum):
    """Elixir families. Each maps to one effect profile in the elixir catalog."""

    CHILLY = "chilly"
    SPICY = "spicy"
    FIREPROOF = "fireproof"
    ELECTRO = "electro"
    ENDURING = "enduring"
    ENERGIZING = "energizing"
    HASTY = "hasty"
    HEARTY = "hearty"
    MIGHTY = "mighty"
    TOUGH = "tough"
    SNEAKY = "sneaky"


# ============================================================================
# Value Objects
# ============================================================================


@dataclass(frozen=True)
class BuffEffects:
    """
    Magnitudes granted by a buff. Zero means "does not boost this".

    Attributes
    ----------
    attack_boost, defense_boost : float
        Flat amounts added to the raw stat
    speed_boost, stealth_boost : float
        Flat amounts added to the stat and to the working roll
    *_resistance : float
        Resistance level per damage type
    stamina_boost, stamina_recovery, extra_hearts : float
        Out-of-combat effects reported back to the caller
    flee_boost : float
        Flee levels; each level adds a fixed bonus to the flee chance
    """

    attack_boost: float = 0.0
    defense_boost: float = 0.0
    speed_boost: float = 0.0
    stealth_boost: float = 0.0
    blight_resistance: float = 0.0
    cold_resistance: float = 0.0
    electric_resistance: float = 0.0
    fire_resistance: float = 0.0
    water_resistance: float = 0.0
    stamina_boost: float = 0.0
    stamina_recovery: float = 0.0
    extra_hearts: float = 0.0
    flee_boost: float = 0.0

    def resistance(self, damage_type: DamageType) -> float:
        """Resistance level against a damage type."""
        return float(getattr(self, f"{DamageType(damage_type).value}_resistance"))

    def to_dict(self) -> Dict[str, float]:
        """Non-zero effects only."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name)
        }


@dataclass(frozen=True)
class ActiveBuff:
    """
    A buff currently attached to a character.

    Attributes
    ----------
    kind : BuffKind
        Elixir family
    effects : BuffEffects
        Magnitudes granted while active
    is_active : bool
        False once consumed
    trigger_contexts : FrozenSet[ActionContext]
        Contexts in which the buff applies and is consumed
    target_elements : FrozenSet[str]
        Monster elements the buff is meant for; empty means any monster
    """

    kind: BuffKind
    effects: BuffEffects = field(default_factory=BuffEffects)
    is_active: bool = True
    trigger_contexts: FrozenSet[ActionContext] = frozenset()
    target_elements: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        """Normalize iterables so callers may pass lists or strings."""
        contexts = frozenset(
            ctx for ctx in (ActionContext.parse(c) for c in self.trigger_contexts) if ctx
        )
        object.__setattr__(self, "trigger_contexts", contexts)
        object.__setattr__(
            self,
            "target_elements",
            frozenset(str(e).lower() for e in self.target_elements),
        )

    def applies_in(self, context: Optional[ActionContext]) -> bool:
        """True when active and the context is one of the trigger contexts."""
        return self.is_active and context is not None and context in self.trigger_contexts

    def consume(self) -> "ActiveBuff":
        """Return an inactive copy. Consuming twice yields an equal value."""
        if not self.is_active:
            return self
        return replace(self, is_active=False)

    def with_contexts(self, contexts: Iterable[Any]) -> "ActiveBuff":
        return replace(self, trigger_contexts=frozenset(contexts))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "is_active": self.is_active,
            "effects": self.effects.to_dict(),
            "trigger_contexts": sorted(c.value for c in self.trigger_contexts),
            "target_elements": sorted(self.target_elements),
        }
