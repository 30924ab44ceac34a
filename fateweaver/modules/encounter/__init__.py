"""Encounter tier tables and monster selection."""

from .selection import (
    no_encounter,
    select_monster_by_distribution,
    select_monster_for_tier,
    select_monster_weighted_by_tier,
)
from .tiers import (
    EncounterMode,
    EncounterSettings,
    ProbabilityTable,
    parse_tier_label,
    select_tier,
    tier_label,
)

__all__ = [
    "EncounterMode",
    "EncounterSettings",
    "ProbabilityTable",
    "no_encounter",
    "parse_tier_label",
    "select_monster_by_distribution",
    "select_monster_for_tier",
    "select_monster_weighted_by_tier",
    "select_tier",
    "tier_label",
]
