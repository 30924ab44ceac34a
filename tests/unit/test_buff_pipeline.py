"""
Unit Tests for BuffPipeline
===========================

Test Coverage
-------------
- Stat accessors with and without an applicable buff
- Context gating and one-time consumption
- Resistances and their damage-type trigger contexts
- Stamina modifiers and flee levels

Testing Strategy
----------------
- Buffs built from the elixir catalog
- Settings built from code defaults (no config lookup)
"""

import pytest

from fateweaver.domain.models import ActionContext, DamageType
from fateweaver.modules.buff import BuffPipeline, StaminaModifiers
from fateweaver.modules.elixir import create_buff


@pytest.fixture
def make_pipeline(buff_settings):
    def _make(elixir=None, context=ActionContext.COMBAT, monster=None):
        buff = create_buff(elixir) if isinstance(elixir, str) else elixir
        return BuffPipeline(
            buff, context, monster=monster, character_name="Link", settings=buff_settings
        )

    return _make


# ============================================================================
# STAT ACCESSORS
# ============================================================================


@pytest.mark.unit
class TestStatAccessors:
    def test_no_buff_attack_has_floor_of_one(self, make_pipeline):
        pipeline = make_pipeline()

        assert pipeline.attack_with(0) == 1
        assert pipeline.attack_with(None) == 1
        assert pipeline.consumed is False

    def test_no_buff_defense_weighting(self, make_pipeline):
        """Test defense is scaled by 1.5 only when success weighting is on."""
        pipeline = make_pipeline()

        assert pipeline.defense_with(10) == 15
        assert pipeline.defense_with(10, success_weighting=False) == 10
        assert pipeline.defense_with(-5) == 0

    def test_mighty_boosts_attack_and_is_consumed(self, make_pipeline):
        # Arrange
        pipeline = make_pipeline("Mighty Elixir", ActionContext.COMBAT)

        # Act
        attack = pipeline.attack_with(10)

        # Assert
        assert attack == 11  # floor(10 + 1.5)
        assert pipeline.consumed is True
        assert pipeline.buff.is_active is False
        assert pipeline.modifiers == ["attack_boost"]

    def test_effects_hold_for_the_rest_of_the_call(self, make_pipeline):
        """Test a consumed buff still counts for later accessors in the same call."""
        # Arrange
        pipeline = make_pipeline("Mighty Elixir")
        pipeline.attack_with(10)

        # Act
        second = pipeline.attack_with(10)

        # Assert
        assert second == 11
        assert pipeline.modifiers == ["attack_boost"]

    def test_next_call_sees_consumed_buff(self, make_pipeline):
        # Arrange
        first = make_pipeline("Mighty Elixir")
        first.attack_with(10)

        # Act
        second = make_pipeline(first.buff)

        # Assert
        assert second.attack_with(10) == 10
        assert second.consumed is False

    def test_tough_boosts_weighted_defense(self, make_pipeline):
        pipeline = make_pipeline("Tough Elixir")

        assert pipeline.defense_with(10) == 17  # floor((10 + 1.5) x 1.5)
        assert pipeline.defense_with(10, success_weighting=False) == 11

    def test_buff_outside_trigger_context_does_nothing(self, make_pipeline):
        # Arrange
        pipeline = make_pipeline("Mighty Elixir", ActionContext.TRAVEL)

        # Act
        attack = pipeline.attack_with(10)

        # Assert
        assert attack == 10
        assert pipeline.consumed is False
        assert pipeline.buff.is_active is True
        assert pipeline.applies is False

    def test_speed_and_stealth(self, make_pipeline):
        hasty = make_pipeline("Hasty Elixir", ActionContext.TRAVEL)
        sneaky = make_pipeline("Sneaky Elixir", ActionContext.GATHER)

        assert hasty.speed_with(3) == 4
        assert sneaky.stealth_with(0) == 1
        assert hasty.consumed and sneaky.consumed

    @pytest.mark.parametrize(
        "elixir, context, expected",
        [
            ("Hasty Elixir", ActionContext.TRAVEL, 1.0),
            ("Hasty Elixir", ActionContext.COMBAT, 0.0),
            ("Sneaky Elixir", ActionContext.LOOT, 1.0),
            ("Mighty Elixir", ActionContext.LOOT, 0.0),
        ],
    )
    def test_roll_bonus(self, make_pipeline, elixir, context, expected):
        assert make_pipeline(elixir, context).roll_bonus() == expected

    def test_unknown_context_never_applies(self, make_pipeline):
        pipeline = make_pipeline("Mighty Elixir", "dancing")

        assert pipeline.context is None
        assert pipeline.attack_with(10) == 10


# ============================================================================
# CONSUMPTION
# ============================================================================


@pytest.mark.unit
class TestConsumption:
    def test_consume_is_idempotent(self, make_pipeline):
        pipeline = make_pipeline("Hearty Elixir")

        assert pipeline.consume("manual") is True
        assert pipeline.consume("manual") is False
        assert pipeline.buff == create_buff("Hearty Elixir").consume()

    def test_consume_without_buff(self, make_pipeline):
        pipeline = make_pipeline()

        assert pipeline.consume("manual") is False
        assert pipeline.buff is None

    def test_element_targeted_elixir_needs_matching_monster(self, make_pipeline):
        """Test Chilly applies against water monsters only."""
        assert make_pipeline("Chilly Elixir", monster="Water Octorok").applies is True
        assert make_pipeline("Chilly Elixir", monster="Bokoblin").applies is False
        assert make_pipeline("Chilly Elixir").applies is False


# ============================================================================
# RESISTANCES
# ============================================================================


@pytest.mark.unit
class TestResistances:
    def test_cold_resistance_consumed_while_travelling(self, make_pipeline):
        # Arrange
        pipeline = make_pipeline("Spicy Elixir", ActionContext.TRAVEL)

        # Act
        resistance = pipeline.resistance_for(DamageType.COLD)

        # Assert
        assert resistance == 1.5
        assert pipeline.consumed is True
        assert pipeline.modifiers == ["cold_resistance"]

    def test_cold_resistance_reported_but_kept_in_combat(self, make_pipeline):
        pipeline = make_pipeline("Spicy Elixir", ActionContext.COMBAT, monster="Ice Keese")

        assert pipeline.resistance_for("cold") == 1.5
        assert pipeline.consumed is False

    def test_water_resistance_consumed_in_combat(self, make_pipeline):
        pipeline = make_pipeline("Chilly Elixir", ActionContext.COMBAT, monster="Water Octorok")

        assert pipeline.resistance_for("water") == 1.5
        assert pipeline.consumed is True

    def test_resistance_against_monster(self, make_pipeline):
        # Arrange
        pipeline = make_pipeline("Spicy Elixir", ActionContext.TRAVEL)

        # Act & Assert
        assert pipeline.resistance_against("Ice Keese") == 1.5
        assert pipeline.resistance_against("Stone Talus") == 0.0

    def test_missing_or_unknown_resistance(self, make_pipeline):
        pipeline = make_pipeline("Spicy Elixir", ActionContext.TRAVEL)

        assert pipeline.resistance_for("fire") == 0.0
        assert pipeline.resistance_for("psychic") == 0.0
        assert pipeline.consumed is False


# ============================================================================
# OTHER EFFECTS
# ============================================================================


@pytest.mark.unit
class TestOtherEffects:
    def test_enduring_while_gathering(self, make_pipeline):
        # Arrange
        pipeline = make_pipeline("Enduring Elixir", ActionContext.GATHER)

        # Act
        modifiers = pipeline.stamina_modifiers()

        # Assert
        assert modifiers == StaminaModifiers(stamina_boost=1)
        assert pipeline.consumed is True

    def test_enduring_in_combat_does_nothing(self, make_pipeline):
        pipeline = make_pipeline("Enduring Elixir", ActionContext.COMBAT)

        assert pipeline.stamina_modifiers() == StaminaModifiers()
        assert pipeline.consumed is False

    def test_hearty_in_raid(self, make_pipeline):
        pipeline = make_pipeline("Hearty Elixir", ActionContext.RAID)

        assert pipeline.stamina_modifiers().extra_hearts == 3

    def test_flee_levels_do_not_consume(self, make_pipeline):
        # Arrange
        pipeline = make_pipeline("Sneaky Elixir", ActionContext.TRAVEL)

        # Act
        levels = pipeline.flee_levels()

        # Assert
        assert levels == 1.0
        assert pipeline.consumed is False

    def test_flee_levels_gated_by_context(self, make_pipeline):
        assert make_pipeline("Sneaky Elixir", ActionContext.COMBAT).flee_levels() == 0.0

    def test_modifiers_are_deduplicated(self, make_pipeline):
        # Arrange
        pipeline = make_pipeline("Sneaky Elixir", ActionContext.LOOT)

        # Act
        pipeline.stealth_with(1)
        pipeline.roll_bonus()
        pipeline.stealth_with(1)

        # Assert
        assert pipeline.modifiers == ["stealth_boost"]
