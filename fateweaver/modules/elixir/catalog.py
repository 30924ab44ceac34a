"""
Elixir Catalog

Purpose
-------
Define the elixirs a character can drink, the buff each one produces, and
the rules deciding whether a buff is used up by a given action.

Responsibilities
----------------
- Map elixir names to BuffKind, effects and trigger contexts
- Build ActiveBuff values for a named elixir (strict: unknown names raise)
- Decide whether a buff applies to an action (context + monster element)
- Detect a monster's element from its flags or name
- Map elements and damage types to the resistance that counters them

Non-Responsibilities
--------------------
- Applying buff magnitudes to rolls (handled by BuffPipeline)
- Immediate stamina/heart changes on drinking (owned by the caller's
  character-state collaborator)

Design Notes
------------
- Element-targeted elixirs (Chilly, Spicy, Fireproof, Electro) only apply in
  fights against a monster of the matching element.
- Resistances are consumed by the damage type's own trigger context
  (RESISTANCE_TRIGGER_CONTEXTS) rather than by the elixir's contexts, so a
  Chilly elixir also shields against blight rain while travelling.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Pattern, Tuple

from fateweaver.core.logging.logger import get_logger
from fateweaver.domain.models import (
    ActionContext,
    ActiveBuff,
    BuffEffects,
    BuffKind,
    Candidate,
    DamageType,
)
from fateweaver.modules.shared.exceptions import InvalidInputError

logger = get_logger(__name__)


# ============================================================================
# Contexts
# ============================================================================

_FIGHT_CONTEXTS: FrozenSet[ActionContext] = frozenset(
    {
        ActionContext.COMBAT,
        ActionContext.HELP_WANTED,
        ActionContext.RAID,
        ActionContext.LOOT,
    }
)

RESISTANCE_TRIGGER_CONTEXTS: Dict[DamageType, ActionContext] = {
    DamageType.BLIGHT: ActionContext.TRAVEL,
    DamageType.COLD: ActionContext.TRAVEL,
    DamageType.FIRE: ActionContext.TRAVEL,
    DamageType.ELECTRIC: ActionContext.COMBAT,
    DamageType.WATER: ActionContext.COMBAT,
}


# ============================================================================
# Catalog
# ============================================================================


@dataclass(frozen=True)
class ElixirDefinition:
    """Static description of one elixir."""

    name: str
    kind: BuffKind
    description: str
    effects: BuffEffects
    trigger_contexts: FrozenSet[ActionContext]
    target_elements: FrozenSet[str] = frozenset()


ELIXIRS: Dict[str, ElixirDefinition] = {
    definition.name: definition
    for definition in (
        ElixirDefinition(
            name="Chilly Elixir",
            kind=BuffKind.CHILLY,
            description="Resistance to water attacks; reduces blight rain infection chance",
            effects=BuffEffects(water_resistance=1.5, blight_resistance=1),
            trigger_contexts=_FIGHT_CONTEXTS,
            target_elements=frozenset({"water"}),
        ),
        ElixirDefinition(
            name="Spicy Elixir",
            kind=BuffKind.SPICY,
            description="Resistance to cold attacks from ice enemies",
            effects=BuffEffects(cold_resistance=1.5),
            trigger_contexts=_FIGHT_CONTEXTS,
            target_elements=frozenset({"ice"}),
        ),
        ElixirDefinition(
            name="Fireproof Elixir",
            kind=BuffKind.FIREPROOF,
            description="Fire resistance against fire enemies",
            effects=BuffEffects(fire_resistance=1.5),
            trigger_contexts=_FIGHT_CONTEXTS,
            target_elements=frozenset({"fire"}),
        ),
        ElixirDefinition(
            name="Electro Elixir",
            kind=BuffKind.ELECTRO,
            description="Resistance to electrical attacks from electric enemies",
            effects=BuffEffects(electric_resistance=1.5),
            trigger_contexts=_FIGHT_CONTEXTS,
            target_elements=frozenset({"electric"}),
        ),
        ElixirDefinition(
            name="Enduring Elixir",
            kind=BuffKind.ENDURING,
            description="Temporarily extends the stamina wheel by +1",
            effects=BuffEffects(stamina_boost=1),
            trigger_contexts=frozenset(
                {ActionContext.TRAVEL, ActionContext.GATHER, ActionContext.LOOT}
            ),
        ),
        ElixirDefinition(
            name="Energizing Elixir",
            kind=BuffKind.ENERGIZING,
            description="Restores stamina for physical actions",
            effects=BuffEffects(stamina_recovery=2),
            trigger_contexts=frozenset(
                {ActionContext.GATHER, ActionContext.LOOT, ActionContext.CRAFTING}
            ),
        ),
        ElixirDefinition(
            name="Hasty Elixir",
            kind=BuffKind.HASTY,
            description="Cuts travel time in half",
            effects=BuffEffects(speed_boost=1),
            trigger_contexts=frozenset({ActionContext.TRAVEL}),
        ),
        ElixirDefinition(
            name="Hearty Elixir",
            kind=BuffKind.HEARTY,
            description="Restores health and adds +3 temporary hearts",
            effects=BuffEffects(extra_hearts=3),
            trigger_contexts=frozenset(
                {ActionContext.COMBAT, ActionContext.HELP_WANTED, ActionContext.RAID}
            ),
        ),
        ElixirDefinition(
            name="Mighty Elixir",
            kind=BuffKind.MIGHTY,
            description="Boosts attack power",
            effects=BuffEffects(attack_boost=1.5),
            trigger_contexts=_FIGHT_CONTEXTS,
        ),
        ElixirDefinition(
            name="Tough Elixir",
            kind=BuffKind.TOUGH,
            description="Boosts defense",
            effects=BuffEffects(defense_boost=1.5),
            trigger_contexts=_FIGHT_CONTEXTS,
        ),
        ElixirDefinition(
            name="Sneaky Elixir",
            kind=BuffKind.SNEAKY,
            description="Stealth for gathering, looting and travel; boosts flee chance",
            effects=BuffEffects(stealth_boost=1, flee_boost=1),
            trigger_contexts=frozenset(
                {ActionContext.GATHER, ActionContext.LOOT, ActionContext.TRAVEL}
            ),
        ),
    )
}

_BY_KIND: Dict[BuffKind, ElixirDefinition] = {d.kind: d for d in ELIXIRS.values()}


def _normalize_name(name: str) -> str:
    return " ".join(name.lower().split())


_BY_NORMALIZED_NAME: Dict[str, ElixirDefinition] = {
    _normalize_name(d.name): d for d in ELIXIRS.values()
}


def get_elixir(name_or_kind: Any) -> Optional[ElixirDefinition]:
    """
    Look up an elixir by display name ("Mighty Elixir") or kind ("mighty").

    Returns None when unknown.
    """
    if isinstance(name_or_kind, BuffKind):
        return _BY_KIND.get(name_or_kind)
    if not isinstance(name_or_kind, str):
        return None
    normalized = _normalize_name(name_or_kind)
    definition = _BY_NORMALIZED_NAME.get(normalized)
    if definition is not None:
        return definition
    try:
        return _BY_KIND.get(BuffKind(normalized))
    except ValueError:
        return None


def all_elixir_names() -> List[str]:
    return list(ELIXIRS.keys())


def create_buff(elixir_name: Any) -> ActiveBuff:
    """
    Build the active buff granted by drinking an elixir.

    Raises:
        InvalidInputError: If the elixir is unknown

    Example:
        >>> create_buff("Hasty Elixir").effects.speed_boost
        1
    """
    definition = get_elixir(elixir_name)
    if definition is None:
        raise InvalidInputError("elixir", elixir_name, "unknown elixir")

    buff = ActiveBuff(
        kind=definition.kind,
        effects=definition.effects,
        is_active=True,
        trigger_contexts=definition.trigger_contexts,
        target_elements=definition.target_elements,
    )
    logger.debug(
        "Elixir buff created",
        extra={"elixir": definition.name, "effects": definition.effects.to_dict()},
    )
    return buff


# ============================================================================
# Monster elements
# ============================================================================

ELEMENTS: Tuple[str, ...] = ("fire", "ice", "electric", "water", "earth", "undead", "wind")

# Checked in order; the first match wins
_ELEMENT_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("fire", re.compile(r"fire|igneo|meteo", re.IGNORECASE)),
    ("ice", re.compile(r"ice|frost|blizzard|snow", re.IGNORECASE)),
    ("electric", re.compile(r"electric|thunder", re.IGNORECASE)),
    ("water", re.compile(r"water", re.IGNORECASE)),
    ("earth", re.compile(r"stone|rock|moldug", re.IGNORECASE)),
    ("undead", re.compile(r"cursed|stal(?!k)|gloom|gibdo", re.IGNORECASE)),
    ("wind", re.compile(r"sky|forest", re.IGNORECASE)),
)

_ELEMENT_RESISTANCE: Dict[str, Optional[DamageType]] = {
    "fire": DamageType.FIRE,
    "ice": DamageType.COLD,
    "electric": DamageType.ELECTRIC,
    "water": DamageType.WATER,
    "earth": None,
    "undead": DamageType.BLIGHT,
    "wind": None,
}


def monster_element(monster: Any) -> str:
    """
    Element of a monster: an element flag if present, else detected from the
    name. "none" when nothing matches.

    Accepts a Candidate, a plain name, or None.

    Example:
        >>> monster_element("Fire Chuchu")
        'fire'
        >>> monster_element("Stalkoblin")
        'none'
    """
    if monster is None:
        return "none"

    if isinstance(monster, Candidate):
        for element in ELEMENTS:
            if element in monster.flags:
                return element
        name = monster.name
    else:
        name = str(monster)

    for element, pattern in _ELEMENT_PATTERNS:
        if pattern.search(name):
            return element
    return "none"


def resistance_for_element(element: str) -> Optional[DamageType]:
    """Damage type whose resistance counters the element, or None."""
    return _ELEMENT_RESISTANCE.get((element or "").lower())


def resistance_trigger_context(damage_type: DamageType) -> ActionContext:
    """The action context in which a resistance of this type is used up."""
    return RESISTANCE_TRIGGER_CONTEXTS[DamageType(damage_type)]


# ============================================================================
# Consumption predicate
# ============================================================================


def should_consume(
    buff: Optional[ActiveBuff],
    context: Any,
    monster: Any = None,
) -> bool:
    """
    Whether a buff applies to, and is used up by, an action.

    A buff applies when it is active, the context is one of its trigger
    contexts, and (for element-targeted elixirs) the monster has a matching
    element.

    Example:
        >>> should_consume(create_buff("Hasty Elixir"), "travel")
        True
        >>> should_consume(create_buff("Chilly Elixir"), "combat", "Bokoblin")
        False
    """
    if buff is None or not buff.is_active:
        return False

    action = ActionContext.parse(context)
    if action is None or action not in buff.trigger_contexts:
        return False

    if buff.target_elements:
        return monster_element(monster) in buff.target_elements

    return True
