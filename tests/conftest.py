"""
Pytest Configuration and Fixtures for Fateweaver Tests
=======================================================

Purpose
-------
Centralized fixtures for the Fateweaver test suite: deterministic random
sources, character snapshot factories, settings built from code defaults and
configuration isolation.

Responsibilities
----------------
- Force the testing environment before fateweaver is imported
- Seeded and scripted random sources
- Snapshot and catalog factories
- Reset ConfigManager between tests

Non-Responsibilities
--------------------
- Test implementation (delegated to test files)

Architecture Notes
------------------
- Every test is a unit test; there is no I/O beyond reading config/*.yaml
- Statistical tests use seeded random.Random instances so they are exact
  replays, not flaky samples
"""

from __future__ import annotations

import os
import random
from typing import Callable, Iterable, List

# Must run before fateweaver.core.config reads the environment
os.environ["FATEWEAVER_ENV"] = "testing"
os.environ["FATEWEAVER_LOG_LEVEL"] = "DEBUG"
os.environ["FATEWEAVER_LOG_TO_FILE"] = "false"

import pytest

from fateweaver.core.config import ConfigManager
from fateweaver.domain.inmemory import InMemoryCatalogProvider, InMemoryCharacterRepository
from fateweaver.domain.models import Candidate, CharacterSnapshot
from fateweaver.modules.buff import BuffSettings
from fateweaver.modules.encounter import EncounterSettings
from fateweaver.modules.flee import FleeSettings
from fateweaver.modules.loot import JobBoostRule, RarityWeightTable
from fateweaver.modules.resolution import FinalValueSettings


# ============================================================================
# RANDOM SOURCES
# ============================================================================


class ScriptedRandom(random.Random):
    """
    random.Random whose random() returns a fixed script.

    Only random() is scripted; it raises IndexError when the script runs out
    so an unexpected extra draw fails the test loudly.
    """

    def __init__(self, values: Iterable[float]) -> None:
        super().__init__(0)
        self._script: List[float] = list(values)

    def random(self) -> float:
        return self._script.pop(0)

    @property
    def remaining(self) -> int:
        return len(self._script)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source; identical sequence in every test."""
    return random.Random(1234)


@pytest.fixture
def scripted_rng() -> Callable[..., ScriptedRandom]:
    """Factory: scripted_rng(0.1, 0.9) returns those values from random()."""

    def _make(*values: float) -> ScriptedRandom:
        return ScriptedRandom(values)

    return _make


# ============================================================================
# DOMAIN FACTORIES
# ============================================================================


@pytest.fixture
def make_snapshot() -> Callable[..., CharacterSnapshot]:
    """Factory for character snapshots with neutral defaults."""

    def _make(**overrides) -> CharacterSnapshot:
        fields = {
            "name": "Link",
            "attack": 0,
            "defense": 0,
            "speed": 0,
            "stealth": 0,
            "current_hearts": 3,
            "max_hearts": 3,
        }
        fields.update(overrides)
        return CharacterSnapshot(**fields)

    return _make


@pytest.fixture
def items_by_rarity() -> List[Candidate]:
    """One item per rarity 1-10."""
    return [Candidate(name=f"Item R{r}", rarity=r) for r in range(1, 11)]


@pytest.fixture
def catalog() -> InMemoryCatalogProvider:
    provider = InMemoryCatalogProvider()
    provider.add_items(
        [
            Candidate(name="Wood", rarity=1),
            Candidate(name="Courser Bee Honey", rarity=1),
            Candidate(name="Amber", rarity=4),
        ]
    )
    provider.add_monsters(
        [
            Candidate(name="Bokoblin", tier=1),
            Candidate(name="Moblin", tier=2),
            Candidate(name="Lizalfos", tier=3),
        ]
    )
    return provider


@pytest.fixture
def characters(make_snapshot) -> InMemoryCharacterRepository:
    return InMemoryCharacterRepository([make_snapshot(name="Link", attack=10, defense=10)])


# ============================================================================
# SETTINGS (code defaults, no config lookup)
# ============================================================================


@pytest.fixture
def final_value_settings() -> FinalValueSettings:
    return FinalValueSettings()


@pytest.fixture
def buff_settings() -> BuffSettings:
    return BuffSettings()


@pytest.fixture
def flee_settings() -> FleeSettings:
    return FleeSettings()


@pytest.fixture
def encounter_settings() -> EncounterSettings:
    return EncounterSettings()


@pytest.fixture
def rarity_table() -> RarityWeightTable:
    return RarityWeightTable()


@pytest.fixture
def beekeeper_rules() -> List[JobBoostRule]:
    return [JobBoostRule("beekeeper", "honey", 5.0)]


# ============================================================================
# CONFIG ISOLATION
# ============================================================================


@pytest.fixture(autouse=True)
def reset_config():
    """Drop overrides and cached YAML after every test."""
    yield
    ConfigManager.clear_cache()
