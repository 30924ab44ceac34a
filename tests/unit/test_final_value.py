"""
Unit Tests for FinalValueResolver
=================================

Test Coverage
-------------
- Roll coercion and clamping
- Blight scaling
- Regular mode: probabilistic gear, fixed draw order
- Raid mode: guaranteed gear bonuses
- Elixir gating by action context
- External roll boosts
- Mode and context parsing

Testing Strategy
----------------
- Settings built from code defaults (no config lookup)
- Scripted random sources where the exact draw matters
- AAA pattern (Arrange, Act, Assert)
"""

import math
import random

import pytest

from fateweaver.core.config import ConfigManager
from fateweaver.domain.models import ActionContext
from fateweaver.modules.boost import ItemPayload
from fateweaver.modules.elixir import create_buff
from fateweaver.modules.resolution import (
    FinalValueResolver,
    ResolutionMode,
    resolve_final_value,
)
from fateweaver.modules.shared.exceptions import InvalidInputError


@pytest.fixture
def resolver(final_value_settings, buff_settings):
    return FinalValueResolver(settings=final_value_settings, buff_settings=buff_settings)


# ============================================================================
# ROLL COERCION
# ============================================================================


@pytest.mark.unit
class TestRollCoercion:
    """Raw rolls are forced into [1, 100] before anything else."""

    @pytest.mark.parametrize(
        "dice_roll, expected",
        [
            (0, 1),
            (-12, 1),
            (250, 100),
            (42.9, 42),
            ("57", 57),
            ("abc", 1),
            (None, 1),
            (float("nan"), 1),
        ],
    )
    def test_initial_roll_is_clamped(self, resolver, make_snapshot, rng, dice_roll, expected):
        """Test bad or out-of-range rolls are coerced, never rejected."""
        # Arrange
        character = make_snapshot()

        # Act
        result = resolver.resolve(character, dice_roll, rng=rng)

        # Assert
        assert result.initial_roll == expected
        assert result.adjusted_random_value == expected

    def test_malformed_stats_count_as_zero(self, resolver, make_snapshot, rng):
        """Test NaN, infinite, negative and missing stats add nothing."""
        # Arrange
        character = make_snapshot(attack=float("inf"), defense=float("nan"))

        # Act
        raid = resolver.resolve(character, 50, "raid")
        regular = resolver.resolve(make_snapshot(attack=-4, defense=None), 50, rng=rng)

        # Assert
        assert raid.adjusted_random_value == 50
        assert raid.attack_fired is False
        assert regular.adjusted_random_value == 50


# ============================================================================
# BLIGHT
# ============================================================================


@pytest.mark.unit
class TestBlight:
    """Stage 2 blight multiplies the roll by 1.5."""

    def test_stage_two_scales_roll(self, resolver, make_snapshot, rng):
        """Test stage 2 blight multiplies and floors the roll."""
        # Arrange
        character = make_snapshot(is_blighted=True, blight_stage=2)

        # Act
        result = resolver.resolve(character, 41, rng=rng)

        # Assert
        assert result.blight_multiplier == 1.5
        assert result.damage_value == 61
        assert result.adjusted_random_value == 61

    def test_other_stages_do_not_scale(self, resolver, make_snapshot, rng):
        """Test only stage 2 is affected."""
        # Arrange
        character = make_snapshot(is_blighted=True, blight_stage=3)

        # Act
        result = resolver.resolve(character, 40, rng=rng)

        # Assert
        assert result.blight_multiplier == 1.0
        assert result.adjusted_random_value == 40

    def test_blighted_damage_value_is_unclamped(self, resolver, make_snapshot, rng):
        """Test damage_value can exceed 100 while the final value is clamped."""
        # Arrange
        character = make_snapshot(is_blighted=True, blight_stage=2)

        # Act
        result = resolver.resolve(character, 80, rng=rng)

        # Assert
        assert result.damage_value == 120
        assert result.adjusted_random_value == 100


# ============================================================================
# RAID MODE
# ============================================================================


@pytest.mark.unit
class TestRaidMode:
    """Raid gear always applies when the raw stat is positive."""

    def test_raid_applies_weapon_and_armor(self, resolver, make_snapshot):
        """Test attack 10 / defense 10 adds +18 and +7."""
        # Arrange
        character = make_snapshot(attack=10, defense=10)

        # Act
        result = resolver.resolve(character, 50, "raid")

        # Assert
        assert result.attack_applied == 18
        assert result.defense_applied == 7
        assert result.attack_fired is True
        assert result.defense_fired is True
        assert result.damage_value == 50
        assert result.adjusted_random_value == 75

    def test_raid_draws_no_random_numbers(self, resolver, make_snapshot, scripted_rng):
        """Test raid resolution is deterministic."""
        # Arrange
        character = make_snapshot(attack=10, defense=10)
        source = scripted_rng()

        # Act
        result = resolver.resolve(character, 50, ResolutionMode.RAID, rng=source)

        # Assert
        assert result.adjusted_random_value == 75

    def test_raid_result_is_clamped(self, resolver, make_snapshot):
        """Test gear cannot push the final value past 100."""
        # Arrange
        character = make_snapshot(attack=10, defense=10)

        # Act
        result = resolver.resolve(character, 95, "raid")

        # Assert
        assert result.adjusted_random_value == 100

    def test_zero_stats_add_nothing(self, resolver, make_snapshot):
        """Test characters without gear get no raid bonus."""
        # Arrange
        character = make_snapshot(attack=0, defense=0)

        # Act
        result = resolver.resolve(character, 30, "raid")

        # Assert
        assert result.attack_fired is False
        assert result.defense_fired is False
        assert result.adjusted_random_value == 30

    def test_raid_defaults_to_raid_context(self, resolver, make_snapshot):
        """Test raid mode uses the raid action context by default."""
        # Act
        result = resolver.resolve(make_snapshot(), 30, "raid")

        # Assert
        assert result.context is ActionContext.RAID

    def test_mighty_elixir_counts_in_raid(self, resolver, make_snapshot):
        """Test a raid-triggered attack elixir raises the weapon bonus."""
        # Arrange
        character = make_snapshot(attack=10, active_buff=create_buff("Mighty Elixir"))

        # Act
        result = resolver.resolve(character, 50, "raid")

        # Assert
        assert result.attack_applied == 19  # floor(11 * 1.8)
        assert result.adjusted_random_value == 69
        assert result.buff_consumed is True
        assert result.buff.is_active is False

    def test_blight_applies_before_raid_gear(self, resolver, make_snapshot):
        """Test blight scales the roll, then gear is added."""
        # Arrange
        character = make_snapshot(attack=10, defense=10, is_blighted=True, blight_stage=2)

        # Act
        result = resolver.resolve(character, 40, "raid")

        # Assert
        assert result.damage_value == 60
        assert result.adjusted_random_value == 85


# ============================================================================
# REGULAR MODE
# ============================================================================


@pytest.mark.unit
class TestRegularMode:
    """Regular gear triggers by chance from the raw stats."""

    def test_weapon_fires_on_low_draw(self, resolver, make_snapshot, scripted_rng):
        """Test the first draw decides the weapon, the second the armor."""
        # Arrange
        character = make_snapshot(attack=2, defense=10)
        source = scripted_rng(0.1, 0.99)  # attack chance 0.2, defense chance 0.2

        # Act
        result = resolver.resolve(character, 30, rng=source)

        # Assert
        assert result.attack_fired is True
        assert result.defense_fired is False
        assert result.attack_applied == 20
        assert result.defense_applied == 0
        assert result.adjusted_random_value == 50
        assert source.remaining == 0

    def test_armor_bonus_is_twice_defense(self, resolver, make_snapshot, scripted_rng):
        """Test a fired armor bonus adds defense x 2."""
        # Arrange
        character = make_snapshot(attack=0, defense=10)
        source = scripted_rng(0.5, 0.05)

        # Act
        result = resolver.resolve(character, 30, rng=source)

        # Assert
        assert result.defense_fired is True
        assert result.defense_applied == 20
        assert result.adjusted_random_value == 50

    def test_ten_attack_always_fires(self, resolver, make_snapshot, rng):
        """Test attack chance saturates at 1.0."""
        # Arrange
        character = make_snapshot(attack=10)

        # Act
        results = [resolver.resolve(character, 1, rng=rng) for _ in range(200)]

        # Assert
        assert all(r.attack_fired for r in results)
        assert all(r.adjusted_random_value == 100 for r in results)

    def test_defense_of_one_fires_about_two_percent(self, resolver, make_snapshot):
        """Test defense 1 triggers the armor bonus ~2% of the time."""
        # Arrange
        character = make_snapshot(defense=1)
        source = random.Random(2024)
        calls = 10_000

        # Act
        fired = sum(
            resolver.resolve(character, 50, rng=source).defense_fired for _ in range(calls)
        )

        # Assert
        assert 0.015 < fired / calls < 0.025

    def test_regular_defaults_to_combat_context(self, resolver, make_snapshot, rng):
        """Test regular mode uses the combat action context by default."""
        # Act
        result = resolver.resolve(make_snapshot(), 30, rng=rng)

        # Assert
        assert result.context is ActionContext.COMBAT
        assert result.mode is ResolutionMode.REGULAR


# ============================================================================
# ELIXIR GATING
# ============================================================================


@pytest.mark.unit
class TestElixirGating:
    """Buffs only count, and are only used up, in their trigger contexts."""

    def test_mighty_elixir_consumed_in_combat(self, resolver, make_snapshot, rng):
        """Test an attack elixir boosts the weapon bonus in combat."""
        # Arrange
        character = make_snapshot(attack=10, active_buff=create_buff("Mighty Elixir"))

        # Act
        result = resolver.resolve(character, 1, context="combat", rng=rng)

        # Assert
        assert result.attack_applied == 110
        assert result.buff_consumed is True
        assert result.buff.is_active is False
        assert result.modifiers == ["attack_boost"]

    def test_mighty_elixir_ignored_while_travelling(self, resolver, make_snapshot, rng):
        """Test a mismatched context leaves the buff active and unused."""
        # Arrange
        buff = create_buff("Mighty Elixir")
        character = make_snapshot(attack=10, active_buff=buff)

        # Act
        result = resolver.resolve(character, 1, context=ActionContext.TRAVEL, rng=rng)

        # Assert
        assert result.attack_applied == 100
        assert result.buff_consumed is False
        assert result.buff == buff
        assert result.modifiers == []

    def test_hasty_elixir_adds_to_roll_when_travelling(self, resolver, make_snapshot, rng):
        """Test a speed buff adds its magnitude to the working roll."""
        # Arrange
        character = make_snapshot(active_buff=create_buff("Hasty Elixir"))

        # Act
        result = resolver.resolve(character, 40, context="travel", rng=rng)

        # Assert
        assert result.damage_value == 41
        assert result.adjusted_random_value == 41
        assert type(result.damage_value) is int
        assert result.buff_consumed is True

    def test_hasty_elixir_ignored_when_looting(self, resolver, make_snapshot, rng):
        """Test a travel-only buff does nothing while looting."""
        # Arrange
        character = make_snapshot(active_buff=create_buff("Hasty Elixir"))

        # Act
        result = resolver.resolve(character, 40, context="loot", rng=rng)

        # Assert
        assert result.adjusted_random_value == 40
        assert result.buff_consumed is False
        assert result.buff.is_active is True

    def test_sneaky_elixir_adds_stealth_when_looting(self, resolver, make_snapshot, rng):
        """Test a stealth buff adds to the roll in a loot context."""
        # Arrange
        character = make_snapshot(active_buff=create_buff("Sneaky Elixir"))

        # Act
        result = resolver.resolve(character, 40, context="loot", rng=rng)

        # Assert
        assert result.adjusted_random_value == 41
        assert result.modifiers == ["stealth_boost"]

    def test_consumed_buff_has_no_effect(self, resolver, make_snapshot, rng):
        """Test an inactive buff never contributes."""
        # Arrange
        spent = create_buff("Hasty Elixir").consume()
        character = make_snapshot(active_buff=spent)

        # Act
        result = resolver.resolve(character, 40, context="travel", rng=rng)

        # Assert
        assert result.adjusted_random_value == 40
        assert result.buff_consumed is False


# ============================================================================
# ROLL BOOSTS
# ============================================================================


@pytest.mark.unit
class TestRollBoost:
    """External boosts transform the working roll before gear."""

    def test_boost_transforms_working_roll(self, resolver, make_snapshot, rng, mocker):
        """Test a number boost is applied once to the working roll."""
        # Arrange
        boost = mocker.Mock(side_effect=lambda payload: payload.with_value(payload.value + 5))

        # Act
        result = resolver.resolve(make_snapshot(), 40, rng=rng, roll_boost=boost)

        # Assert
        boost.assert_called_once()
        assert result.damage_value == 45
        assert result.adjusted_random_value == 45

    def test_fractional_boost_floors_damage_value(self, resolver, make_snapshot, rng, mocker):
        # Arrange
        boost = mocker.Mock(side_effect=lambda payload: payload.with_value(payload.value + 5.7))

        # Act
        result = resolver.resolve(make_snapshot(), 40, rng=rng, roll_boost=boost)

        # Assert
        assert result.damage_value == 45
        assert type(result.damage_value) is int
        assert result.adjusted_random_value == 45

    def test_failing_boost_is_ignored(self, resolver, make_snapshot, rng, mocker):
        """Test a boost that raises does not break the resolution."""
        # Arrange
        boost = mocker.Mock(side_effect=RuntimeError("boost service down"))

        # Act
        result = resolver.resolve(make_snapshot(), 40, rng=rng, roll_boost=boost)

        # Assert
        assert result.adjusted_random_value == 40

    def test_wrong_payload_variant_is_ignored(self, resolver, make_snapshot, rng):
        """Test a boost returning another payload type is discarded."""
        # Act
        result = resolver.resolve(
            make_snapshot(), 40, rng=rng, roll_boost=lambda payload: ItemPayload(None)
        )

        # Assert
        assert result.adjusted_random_value == 40


# ============================================================================
# INPUT VALIDATION
# ============================================================================


@pytest.mark.unit
class TestModeAndContext:
    def test_unknown_mode_raises(self, resolver, make_snapshot):
        """Test an unknown resolution mode is rejected."""
        # Act & Assert
        with pytest.raises(InvalidInputError) as exc_info:
            resolver.resolve(make_snapshot(), 40, "turbo")

        assert exc_info.value.error_code == "INVALID_MODE"

    def test_unknown_context_falls_back_to_default(self, resolver, make_snapshot, rng):
        """Test an unknown context string uses the mode default."""
        # Act
        result = resolver.resolve(make_snapshot(), 40, "regular", context="dance", rng=rng)

        # Assert
        assert result.context is ActionContext.COMBAT

    def test_mode_parsing_is_case_insensitive(self):
        assert ResolutionMode.parse(" RAID ") is ResolutionMode.RAID

    def test_result_serializes(self, resolver, make_snapshot):
        """Test to_dict exposes every step."""
        # Act
        data = resolver.resolve(make_snapshot(attack=10, defense=10), 50, "raid").to_dict()

        # Assert
        assert data["mode"] == "raid"
        assert data["adjusted_random_value"] == 75
        assert data["buff"] is None


@pytest.mark.unit
class TestConfiguredResolution:
    """resolve_final_value reads its settings from config/resolution.yaml."""

    def test_configured_raid_matches_defaults(self, make_snapshot):
        # Act
        result = resolve_final_value(make_snapshot(attack=10, defense=10), 50, "raid")

        # Assert
        assert result.adjusted_random_value == 75

    def test_config_override_changes_raid_multiplier(self, make_snapshot):
        """Test the raid weapon multiplier is read from configuration."""
        # Arrange
        ConfigManager.set("resolution.raid.weapon_multiplier", 2.5)

        # Act
        result = resolve_final_value(make_snapshot(attack=10), 50, "raid")

        # Assert
        assert result.attack_applied == math.floor(10 * 2.5)
