"""
Monster Selection

Purpose
-------
Pick a monster from a catalog pool once a tier (or a tier distribution) is
known.

Responsibilities
----------------
- select_monster_for_tier: exact tier, falling back one tier at a time down
  to tier 1, then the "No Encounter" sentinel
- select_monster_weighted_by_tier: exploration variant that weighs tier
  buckets by `tier weight x bucket size`
- select_monster_by_distribution: wave variant that rolls a tier from a
  difficulty distribution, falling back to the whole pool

Design Notes
------------
- None of these raise for an empty pool; the sentinel (or None) is returned
  and the fallback is logged.
- Monsters without a usable tier are ignored by the tier filters.
"""

from __future__ import annotations

import random
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from fateweaver.core.logging.logger import get_logger
from fateweaver.domain.models import Candidate, EncounterResult
from fateweaver.modules.shared.constants import NO_ENCOUNTER_LABEL
from fateweaver.modules.shared.random_source import resolve_rng
from fateweaver.modules.shared.validators import coerce_tier

from .tiers import EncounterSettings, parse_tier_label, tier_label

logger = get_logger(__name__)


def _by_tier(pool: Iterable[Candidate]) -> Dict[int, List[Candidate]]:
    buckets: Dict[int, List[Candidate]] = defaultdict(list)
    for monster in pool or ():
        tier = coerce_tier(monster.tier)
        if tier is not None:
            buckets[tier].append(monster)
    return buckets


def no_encounter(requested_tier: Optional[int] = None) -> EncounterResult:
    """The "No Encounter" sentinel."""
    return EncounterResult(
        monster=None,
        tier=None,
        requested_tier=requested_tier,
        label=NO_ENCOUNTER_LABEL,
    )


def select_monster_for_tier(
    tier: Any,
    monster_pool: Optional[Iterable[Candidate]],
    rng: Optional[random.Random] = None,
) -> EncounterResult:
    """
    Pick a monster of the given tier, or of the nearest lower tier that has
    one.

    Args:
        tier: Requested tier as a number or a "Tier N" label; None, "No
            Encounter" or an unusable value means no encounter
        monster_pool: Candidates carrying a tier
        rng: Random source for the uniform pick

    Returns:
        EncounterResult; the "No Encounter" sentinel when nothing qualifies

    Example:
        >>> pool = [Candidate("Bokoblin", tier=1)]
        >>> select_monster_for_tier("Tier 3", pool).encounter
        'Tier 1'
    """
    requested = parse_tier_label(tier)
    if requested is None:
        return no_encounter()

    buckets = _by_tier(monster_pool or ())
    current = requested
    while current >= 1:
        matches = buckets.get(current)
        if matches:
            monster = resolve_rng(rng).choice(matches)
            if current != requested:
                logger.info(
                    f"No tier {requested} monsters, fell back to tier {current}",
                    extra={"requested_tier": requested, "tier": current},
                )
            return EncounterResult(
                monster=monster,
                tier=current,
                requested_tier=requested,
                label=tier_label(current),
                fallback_used=current != requested,
            )
        current -= 1

    logger.info(
        "No monsters at or below requested tier; no encounter",
        extra={"requested_tier": requested, "pool_size": sum(len(b) for b in buckets.values())},
    )
    return no_encounter(requested)


def select_monster_weighted_by_tier(
    monster_pool: Optional[Iterable[Candidate]],
    rng: Optional[random.Random] = None,
    settings: Optional[EncounterSettings] = None,
) -> EncounterResult:
    """
    Exploration pick: choose a tier bucket in proportion to
    `exploration_weight(tier) x bucket size`, then a monster uniformly within
    it.

    High tiers are rarer than low tiers but stay reachable whenever their
    bucket is non-empty.
    """
    settings = settings or EncounterSettings.from_config()
    buckets = _by_tier(monster_pool or ())
    tiers = sorted(buckets)
    weights = [max(0.0, settings.exploration_weight(t)) * len(buckets[t]) for t in tiers]

    if not tiers or sum(weights) <= 0:
        logger.info("Exploration pool empty; no encounter")
        return no_encounter()

    source = resolve_rng(rng)
    tier = source.choices(tiers, weights=weights, k=1)[0]
    monster = source.choice(buckets[tier])
    logger.debug(
        "Exploration monster selected",
        extra={"tier": tier, "monster": monster.name, "buckets": len(tiers)},
    )
    return EncounterResult(
        monster=monster,
        tier=tier,
        requested_tier=tier,
        label=tier_label(tier),
    )


def select_monster_by_distribution(
    monster_pool: Optional[Iterable[Candidate]],
    distribution: Mapping[int, float],
    rng: Optional[random.Random] = None,
) -> Optional[Candidate]:
    """
    Roll a tier from a {tier: probability} distribution and pick a monster of
    that tier. Falls back to a uniform pick over the whole pool when the
    rolled tier has no monsters.

    Returns:
        A monster, or None when the pool is empty
    """
    pool = list(monster_pool or ())
    if not pool:
        return None

    source = resolve_rng(rng)
    weights = {int(t): float(p) for t, p in distribution.items()}
    tiers = sorted(weights)
    selected: Optional[int] = tiers[0] if tiers else None

    roll = source.random()
    cumulative = 0.0
    for tier in tiers:
        cumulative += weights[tier]
        if roll <= cumulative:
            selected = tier
            break

    matches = _by_tier(pool).get(selected, []) if selected is not None else []
    if not matches:
        logger.debug(
            "No monsters for rolled tier; picking from whole pool",
            extra={"tier": selected, "pool_size": len(pool)},
        )
        return source.choice(pool)
    return source.choice(matches)
