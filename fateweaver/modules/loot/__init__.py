"""Rarity weighting and weighted loot pools."""

from .rarity import RarityWeightTable, VillageRarityBonus, adjust_rarity_weights
from .sampler import (
    JobBoostRule,
    build_weighted_pool,
    load_job_boost_rules,
    require_candidate,
    sample_from_pool,
)

__all__ = [
    "JobBoostRule",
    "RarityWeightTable",
    "VillageRarityBonus",
    "adjust_rarity_weights",
    "build_weighted_pool",
    "load_job_boost_rules",
    "require_candidate",
    "sample_from_pool",
]
