"""
Fateweaver Engine Facade

Purpose
-------
Public entry points of the resolution engine. Each function reads its
settings from configuration and draws from the default random source unless
an `rng` is passed.

Responsibilities
----------------
- build_weighted_pool: loot pool for a final value
- select_encounter_tier: standard / blood moon / travel tier roll
- select_monster_for_tier: monster pick with tier fallback
- resolve_final_value: regular and raid final values
- attempt_flee: flee attempt with damage and knockout
- ResolutionEngine: the same operations wired to a CatalogProvider and a
  CharacterRepository, persisting buff and flee state

Non-Responsibilities
--------------------
- Rendering results for players
- Knockout handling, inventory and hearts bookkeeping beyond the flee state

Usage
-----
    from fateweaver import engine

    result = engine.resolve_final_value(snapshot, 57, "regular", context="loot")
    pool = engine.build_weighted_pool(items, result.adjusted_random_value)
"""

from __future__ import annotations

import random
from typing import Any, Iterable, List, Optional, Tuple

from fateweaver.core.logging.logger import LogContext, get_logger
from fateweaver.domain.models import ActionContext, Candidate, CharacterSnapshot, EncounterResult
from fateweaver.domain.repositories import CatalogProvider, CharacterRepository
from fateweaver.modules.boost import BoostModifier
from fateweaver.modules.encounter import (
    EncounterMode,
    EncounterSettings,
    select_tier,
)
from fateweaver.modules.encounter import select_monster_for_tier as _select_monster_for_tier
from fateweaver.modules.flee import FleeOutcome, FleeResolver
from fateweaver.modules.loot import build_weighted_pool as _build_weighted_pool
from fateweaver.modules.loot import sample_from_pool
from fateweaver.modules.resolution import FinalValueResolver, FinalValueResult, ResolutionMode
from fateweaver.modules.shared.exceptions import InvalidInputError

logger = get_logger(__name__)


# ============================================================================
# Stateless entry points
# ============================================================================


def build_weighted_pool(
    candidates: Optional[Iterable[Candidate]],
    final_value: Any,
    job_tag: Optional[str] = None,
    village_level: Any = 1,
    *,
    rng: Optional[random.Random] = None,
    pool_boost: Optional[BoostModifier] = None,
) -> List[Candidate]:
    """Weighted loot pool; empty when nothing qualifies."""
    return _build_weighted_pool(
        candidates,
        final_value,
        job_tag,
        village_level,
        rng=rng,
        pool_boost=pool_boost,
    )


def select_encounter_tier(
    mode: Any = EncounterMode.STANDARD,
    *,
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """
    Roll an encounter tier. None means no encounter.

    Raises:
        InvalidInputError: If mode is not standard, bloodmoon or travel
    """
    table = EncounterSettings.from_config().table_for(mode)
    tier = select_tier(table, rng)
    logger.debug("Encounter tier rolled", extra={"table": table.name, "tier": tier})
    return tier


def select_monster_for_tier(
    tier: Any,
    monster_pool: Optional[Iterable[Candidate]],
    *,
    rng: Optional[random.Random] = None,
) -> EncounterResult:
    """
    Monster of the tier or the nearest lower one; "No Encounter" otherwise.

    `tier` may be a number or a label such as "Tier 3".
    """
    return _select_monster_for_tier(tier, monster_pool, rng)


def resolve_final_value(
    character: CharacterSnapshot,
    dice_roll: Any,
    mode: Any = ResolutionMode.REGULAR,
    *,
    context: Any = None,
    rng: Optional[random.Random] = None,
    roll_boost: Optional[BoostModifier] = None,
) -> FinalValueResult:
    """
    Final value for a roll.

    Raises:
        InvalidInputError: If mode is not regular or raid
    """
    return FinalValueResolver().resolve(
        character,
        dice_roll,
        mode,
        context=context,
        rng=rng,
        roll_boost=roll_boost,
    )


def attempt_flee(
    character: CharacterSnapshot,
    monster_tier: Any,
    advantage_attempts: Any = 1,
    *,
    context: Any = ActionContext.TRAVEL,
    rng: Optional[random.Random] = None,
) -> FleeOutcome:
    """Flee attempt; the outcome carries the state to persist."""
    return FleeResolver().attempt(
        character,
        monster_tier,
        advantage_attempts,
        context=context,
        rng=rng,
    )


# ============================================================================
# Collaborator-backed engine
# ============================================================================


class ResolutionEngine:
    """
    Engine operations bound to a catalog and a character store.

    Reads a snapshot, resolves, and writes the consumed buff and flee state
    back through the repository.

    Example:
        >>> engine = ResolutionEngine(catalog, characters, rng=random.Random(1))
        >>> result, item = engine.roll_loot("Link", 64, job_tag="Beekeeper")
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        characters: CharacterRepository,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.catalog = catalog
        self.characters = characters
        self.rng = rng

    def _snapshot(self, name: str) -> CharacterSnapshot:
        snapshot = self.characters.get_snapshot(name)
        if snapshot is None:
            raise InvalidInputError("character", name, "unknown character")
        return snapshot

    def roll_loot(
        self,
        character_name: str,
        dice_roll: Any,
        *,
        job_tag: Optional[str] = None,
        village_level: Any = 1,
        region: Optional[str] = None,
        context: Any = ActionContext.LOOT,
        roll_boost: Optional[BoostModifier] = None,
        pool_boost: Optional[BoostModifier] = None,
    ) -> Tuple[FinalValueResult, Optional[Candidate]]:
        """
        Resolve a gather/loot roll and draw an item.

        Returns:
            (final value result, chosen item or None for an empty pool)

        Raises:
            InvalidInputError: If the character is unknown
        """
        with LogContext(character=character_name, action="loot"):
            snapshot = self._snapshot(character_name)
            job = job_tag if job_tag is not None else snapshot.job

            result = FinalValueResolver().resolve(
                snapshot,
                dice_roll,
                ResolutionMode.REGULAR,
                context=context,
                rng=self.rng,
                roll_boost=roll_boost,
            )
            self._persist_buff(character_name, result.buff, result.buff_consumed)

            candidates = self.catalog.get_item_candidates(job, region)
            pool = _build_weighted_pool(
                candidates,
                result.adjusted_random_value,
                job,
                village_level,
                rng=self.rng,
                pool_boost=pool_boost,
            )
            item = sample_from_pool(pool, self.rng)
            logger.info(
                f"Loot rolled: {item.name if item else 'nothing'}",
                extra={
                    "final_value": result.adjusted_random_value,
                    "pool_size": len(pool),
                },
            )
            return result, item

    def encounter(
        self,
        mode: Any = EncounterMode.STANDARD,
        *,
        region: Optional[str] = None,
    ) -> EncounterResult:
        """Roll a tier and pick a monster from the region's pool."""
        tier = select_encounter_tier(mode, rng=self.rng)
        if tier is None:
            return _select_monster_for_tier(None, (), self.rng)
        pool = self.catalog.get_monster_pool(region)
        return _select_monster_for_tier(tier, pool, self.rng)

    def raid_value(
        self,
        character_name: str,
        dice_roll: Any,
        *,
        monster: Any = None,
    ) -> FinalValueResult:
        with LogContext(character=character_name, action="raid"):
            snapshot = self._snapshot(character_name)
            result = FinalValueResolver().resolve(
                snapshot,
                dice_roll,
                ResolutionMode.RAID,
                rng=self.rng,
                monster=monster,
            )
            self._persist_buff(character_name, result.buff, result.buff_consumed)
            return result

    def flee(
        self,
        character_name: str,
        monster: Any,
        advantage_attempts: Any = 1,
        *,
        context: Any = ActionContext.TRAVEL,
    ) -> FleeOutcome:
        """
        Attempt to flee and persist the new streak, hearts and buff.

        Args:
            monster: Monster Candidate or a bare tier
        """
        with LogContext(character=character_name, action="flee"):
            snapshot = self._snapshot(character_name)
            outcome = FleeResolver().attempt(
                snapshot,
                monster,
                advantage_attempts,
                context=context,
                rng=self.rng,
            )
            self.characters.save_flee_state(
                character_name, outcome.failed_flee_attempts, outcome.remaining_hearts
            )
            self._persist_buff(character_name, outcome.buff, outcome.buff_consumed)
            return outcome

    def _persist_buff(self, name: str, buff: Any, consumed: bool) -> None:
        if consumed:
            self.characters.save_buff(name, buff)
