"""
Weighted Loot Sampler

Purpose
-------
Build the weighted candidate pool a gather or loot roll draws from, and draw
from it.

Responsibilities
----------------
- Drop candidates without a usable rarity or with a zero rarity weight
- Apply job boost rules (e.g. beekeepers find honey five times as often)
- Expand each survivor into `max(1, int(weight))` pool entries
- Uniform draw from the pool

Non-Responsibilities
--------------------
- Computing rarity weights (handled by RarityWeightTable)
- Fetching candidates (handled by CatalogProvider)

Design Notes
------------
- An empty catalog or an all-zero weighting yields an empty pool, never an
  error. `require_candidate` is available for callers that want one.
- Job boost rules compound: two matching x5 rules give x25.
- The pool is a plain list with repeated entries so a single uniform draw is
  a weighted draw.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from fateweaver.core.config.manager import ConfigManager
from fateweaver.core.logging.logger import get_logger
from fateweaver.domain.models import Candidate
from fateweaver.modules.boost import BoostModifier, ListPayload, apply_boost
from fateweaver.modules.shared.constants import DEFAULT_JOB_BOOSTS
from fateweaver.modules.shared.exceptions import EmptyCandidatePoolError
from fateweaver.modules.shared.random_source import resolve_rng
from fateweaver.modules.shared.validators import coerce_stat, coerce_tier

from .rarity import RarityWeightTable

logger = get_logger(__name__)


def _normalize_job(job: Any) -> str:
    if not isinstance(job, str):
        return ""
    return "".join(job.split()).lower()


@dataclass(frozen=True)
class JobBoostRule:
    """
    Multiply the weight of candidates carrying `marker` when the acting
    character has `job`.

    Example:
        >>> rule = JobBoostRule("beekeeper", "honey", 5.0)
        >>> rule.matches("Bee Keeper", Candidate("Courser Bee Honey", rarity=3))
        True
    """

    job: str
    marker: str
    multiplier: float

    def matches(self, job_tag: Any, candidate: Candidate) -> bool:
        normalized = _normalize_job(job_tag)
        if not normalized or normalized != _normalize_job(self.job):
            return False
        return candidate.has_marker(self.marker)


def load_job_boost_rules() -> Tuple[JobBoostRule, ...]:
    """Job boost rules from `loot.job_boosts`, or the built-in beekeeper rule."""
    raw = ConfigManager.get("loot.job_boosts")
    if not isinstance(raw, list):
        return tuple(JobBoostRule(*rule) for rule in DEFAULT_JOB_BOOSTS)
    try:
        return tuple(
            JobBoostRule(
                job=str(rule["job"]),
                marker=str(rule["marker"]),
                multiplier=float(rule["multiplier"]),
            )
            for rule in raw
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid loot.job_boosts, using defaults: {e}")
        return tuple(JobBoostRule(*rule) for rule in DEFAULT_JOB_BOOSTS)


def _aux_weight(candidate: Candidate) -> float:
    if candidate.aux_weight is None:
        return 1.0
    return coerce_stat(candidate.aux_weight)


def build_weighted_pool(
    candidates: Optional[Iterable[Candidate]],
    final_value: Any,
    job_tag: Optional[str] = None,
    village_level: Any = 1,
    *,
    rng: Optional[random.Random] = None,
    rules: Optional[Sequence[JobBoostRule]] = None,
    table: Optional[RarityWeightTable] = None,
    pool_boost: Optional[BoostModifier] = None,
) -> List[Candidate]:
    """
    Weighted pool of candidates for a final value.

    Args:
        candidates: Item candidates from the catalog
        final_value: Outcome of the gather/loot roll
        job_tag: Acting character's job, for job boost rules
        village_level: Village upgrade level
        rng: Random source for village bonuses
        rules: Job boost rules (default: from config)
        table: Rarity weights (default: from config)
        pool_boost: Optional boost run over the finished pool

    Returns:
        List with each candidate repeated by its weight; empty when nothing
        qualifies
    """
    items = list(candidates or [])
    if not items:
        logger.debug("Weighted pool skipped: no candidates")
        return []

    table = table or RarityWeightTable.from_config()
    rules = load_job_boost_rules() if rules is None else rules
    weights = table.adjust(final_value, village_level, rng)

    pool: List[Candidate] = []
    boosted: Dict[str, float] = {}
    dropped = 0

    for candidate in items:
        rarity = coerce_tier(candidate.rarity)
        weight = weights.get(rarity, 0.0) if rarity is not None else 0.0
        weight *= _aux_weight(candidate)
        if weight <= 0:
            dropped += 1
            continue

        for rule in rules:
            if rule.matches(job_tag, candidate):
                weight *= rule.multiplier
                boosted[candidate.name] = weight

        if weight <= 0:
            dropped += 1
            continue
        pool.extend([candidate] * max(1, int(weight)))

    if boosted:
        logger.info(
            f"Job boost applied to {len(boosted)} candidates",
            extra={"job": job_tag, "boosted": boosted},
        )

    if pool_boost is not None:
        pool = list(apply_boost(pool_boost, ListPayload(pool), label="loot_pool").items)

    logger.debug(
        "Weighted pool built",
        extra={
            "candidates": len(items),
            "dropped": dropped,
            "pool_size": len(pool),
            "final_value": final_value,
            "village_level": village_level,
        },
    )
    return pool


def sample_from_pool(
    pool: Sequence[Candidate],
    rng: Optional[random.Random] = None,
) -> Optional[Candidate]:
    """Uniform draw from a weighted pool; None when the pool is empty."""
    if not pool:
        return None
    return resolve_rng(rng).choice(pool)


def require_candidate(
    pool: Sequence[Candidate],
    rng: Optional[random.Random] = None,
    *,
    pool_name: str = "loot",
) -> Candidate:
    """
    Draw from a pool, raising when it is empty.

    Raises:
        EmptyCandidatePoolError: If the pool is empty
    """
    candidate = sample_from_pool(pool, rng)
    if candidate is None:
        raise EmptyCandidatePoolError(pool_name)
    return candidate
