"""
Fateweaver: probabilistic resolution engine for a tabletop-style RPG.

Resolves loot rolls, encounter tiers, monster picks, final values and flee
attempts for a character snapshot, applying elixir buffs and gear.

Usage
-----
    import fateweaver

    result = fateweaver.resolve_final_value(snapshot, 57, "raid")
    tier = fateweaver.select_encounter_tier("bloodmoon")
"""

# Configuration must be loaded before logging and the engine modules
from fateweaver.core.config import Config, ConfigManager
from fateweaver.engine import (
    ResolutionEngine,
    attempt_flee,
    build_weighted_pool,
    resolve_final_value,
    select_encounter_tier,
    select_monster_for_tier,
)

__version__ = Config.ENGINE_VERSION

__all__ = [
    "Config",
    "ConfigManager",
    "ResolutionEngine",
    "attempt_flee",
    "build_weighted_pool",
    "resolve_final_value",
    "select_encounter_tier",
    "select_monster_for_tier",
]
