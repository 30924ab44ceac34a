"""
Default random source for the resolution engine.

Every sampler and resolver takes an optional `rng` argument. When the caller
passes none, they draw from one process-wide `random.Random`, seeded from
FATEWEAVER_RNG_SEED when that is set so local runs can be replayed.

Usage
-----
    from fateweaver.modules.shared.random_source import resolve_rng

    rng = resolve_rng(rng)
    roll = rng.random()
"""

from __future__ import annotations

import random
from typing import Optional

from fateweaver.core.config.config import Config
from fateweaver.core.logging.logger import get_logger

logger = get_logger(__name__)

_default_rng: Optional[random.Random] = None


def get_default_rng() -> random.Random:
    """Process-wide random source, created on first use."""
    global _default_rng
    if _default_rng is None:
        _default_rng = random.Random(Config.RNG_SEED)
        logger.debug(
            "Default random source created",
            extra={"seeded": Config.RNG_SEED is not None},
        )
    return _default_rng


def seed_default_rng(seed: Optional[int]) -> None:
    """Reseed the process-wide random source (None reseeds from the OS)."""
    get_default_rng().seed(seed)


def resolve_rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else get_default_rng()
