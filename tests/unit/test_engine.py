"""
Unit Tests for the Engine Facade
================================

Test Coverage
-------------
- Stateless entry points read configuration
- ResolutionEngine wiring to the catalog and character repository
- Buff and flee state persistence
"""

import random

import pytest

import fateweaver
from fateweaver import engine
from fateweaver.domain.inmemory import InMemoryCatalogProvider
from fateweaver.domain.models import Candidate
from fateweaver.engine import ResolutionEngine
from fateweaver.modules.elixir import create_buff
from fateweaver.modules.shared import InvalidInputError


@pytest.fixture
def resolution_engine(catalog, characters):
    return ResolutionEngine(catalog, characters, rng=random.Random(8))


# ============================================================================
# STATELESS ENTRY POINTS
# ============================================================================


@pytest.mark.unit
class TestEntryPoints:
    def test_package_exports(self):
        assert fateweaver.__version__ == "1.0.0"
        assert fateweaver.resolve_final_value is engine.resolve_final_value

    @pytest.mark.parametrize(
        "mode, draw, expected",
        [
            ("travel", 0.1, 1),
            ("bloodmoon", 0.05, None),
            ("standard", 0.5, 1),
            ("Blood Moon", 0.95, 10),
        ],
    )
    def test_select_encounter_tier(self, scripted_rng, mode, draw, expected):
        assert engine.select_encounter_tier(mode, rng=scripted_rng(draw)) == expected

    def test_unknown_encounter_mode(self, scripted_rng):
        with pytest.raises(InvalidInputError):
            engine.select_encounter_tier("eclipse", rng=scripted_rng(0.1))

    def test_raid_final_value(self, make_snapshot):
        # Arrange
        snapshot = make_snapshot(attack=10, defense=10)

        # Act
        result = engine.resolve_final_value(snapshot, 40, "raid")

        # Assert
        assert result.adjusted_random_value == 65
        assert result.attack_applied == 18
        assert result.defense_applied == 7

    def test_unknown_resolution_mode(self, make_snapshot):
        with pytest.raises(InvalidInputError) as exc_info:
            engine.resolve_final_value(make_snapshot(), 40, "hard")

        assert exc_info.value.error_code == "INVALID_MODE"

    def test_build_weighted_pool(self):
        pool = engine.build_weighted_pool([Candidate("Wood", rarity=1)], 50)

        assert len(pool) == 20

    def test_select_monster_for_tier(self, rng):
        result = engine.select_monster_for_tier(2, [Candidate("Bokoblin", tier=1)], rng=rng)

        assert result.tier == 1
        assert result.fallback_used is True

    def test_select_monster_for_tier_label(self, rng):
        # Arrange
        pool = [Candidate("Bokoblin", tier=1), Candidate("Moblin", tier=3)]

        # Act
        result = engine.select_monster_for_tier("Tier 3", pool, rng=rng)

        # Assert
        assert result.encounter == "Tier 3"
        assert [m.name for m in result.monsters] == ["Moblin"]

    def test_attempt_flee(self, make_snapshot, scripted_rng):
        outcome = engine.attempt_flee(make_snapshot(), 2, rng=scripted_rng(0.2))

        assert outcome.success is True


# ============================================================================
# RESOLUTION ENGINE
# ============================================================================


@pytest.mark.unit
class TestResolutionEngine:
    def test_roll_loot_draws_from_catalog(self, resolution_engine, catalog):
        # Act
        result, item = resolution_engine.roll_loot("Link", 50)

        # Assert
        assert result.context == "loot"
        assert result.attack_fired is True  # attack 10 always fires
        assert result.adjusted_random_value == 100
        assert item in catalog.get_item_candidates()

    def test_roll_loot_persists_consumed_buff(self, resolution_engine, characters):
        # Arrange
        characters.save_buff("Link", create_buff("Mighty Elixir"))

        # Act
        result, _ = resolution_engine.roll_loot("Link", 50)

        # Assert
        assert result.buff_consumed is True
        assert characters.get_snapshot("Link").active_buff.is_active is False

    def test_roll_loot_keeps_unused_buff(self, resolution_engine, characters):
        # Arrange
        characters.save_buff("Link", create_buff("Hasty Elixir"))

        # Act
        resolution_engine.roll_loot("Link", 50)

        # Assert
        assert characters.get_snapshot("Link").active_buff.is_active is True

    def test_roll_loot_with_empty_catalog(self, characters):
        # Arrange
        empty_engine = ResolutionEngine(
            InMemoryCatalogProvider(), characters, rng=random.Random(2)
        )

        # Act
        _, item = empty_engine.roll_loot("Link", 50)

        # Assert
        assert item is None

    def test_flee_persists_state(self, catalog, characters, scripted_rng):
        # Arrange
        flee_engine = ResolutionEngine(catalog, characters, rng=scripted_rng(0.9, 0.1))

        # Act
        outcome = flee_engine.flee("Link", Candidate("Bokoblin", tier=1))

        # Assert
        assert outcome.success is False
        snapshot = characters.get_snapshot("Link")
        assert snapshot.failed_flee_attempts == 1
        assert snapshot.current_hearts == 2

    def test_flee_success_resets_streak(self, catalog, characters, scripted_rng):
        # Arrange
        characters.save_flee_state("Link", 4, 3)
        flee_engine = ResolutionEngine(catalog, characters, rng=scripted_rng(0.6))

        # Act
        outcome = flee_engine.flee("Link", 2)

        # Assert
        assert outcome.flee_chance == pytest.approx(0.7)
        assert characters.get_snapshot("Link").failed_flee_attempts == 0

    def test_raid_value(self, resolution_engine):
        result = resolution_engine.raid_value("Link", 40)

        assert result.adjusted_random_value == 65
        assert result.context == "raid"

    def test_encounter_travel(self, resolution_engine):
        result = resolution_engine.encounter("travel")

        assert result.has_encounter is True
        assert result.tier <= result.requested_tier

    def test_encounter_none(self, catalog, characters, scripted_rng):
        quiet_engine = ResolutionEngine(catalog, characters, rng=scripted_rng(0.1))

        assert quiet_engine.encounter("standard").has_encounter is False

    def test_unknown_character(self, resolution_engine):
        with pytest.raises(InvalidInputError) as exc_info:
            resolution_engine.roll_loot("Ganon", 50)

        assert exc_info.value.field == "character"
