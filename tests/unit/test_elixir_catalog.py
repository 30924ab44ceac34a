"""
Unit Tests for the Elixir Catalog
=================================

Test Coverage
-------------
- Elixir lookup by name and kind
- Buff creation
- Monster element detection
- Resistance mapping and consumption predicate
"""

import pytest

from fateweaver.domain.models import ActionContext, BuffKind, Candidate, DamageType
from fateweaver.modules.elixir import (
    ELIXIRS,
    all_elixir_names,
    create_buff,
    get_elixir,
    monster_element,
    resistance_for_element,
    resistance_trigger_context,
    should_consume,
)
from fateweaver.modules.shared import InvalidInputError


@pytest.mark.unit
class TestElixirLookup:
    @pytest.mark.parametrize(
        "name",
        ["Mighty Elixir", "mighty elixir", "  Mighty   Elixir ", "mighty", BuffKind.MIGHTY],
    )
    def test_lookup_variants(self, name):
        assert get_elixir(name).kind is BuffKind.MIGHTY

    @pytest.mark.parametrize("name", ["Dubious Food", "", None, 42])
    def test_unknown_lookup_is_none(self, name):
        assert get_elixir(name) is None

    def test_catalog_covers_every_kind(self):
        assert {d.kind for d in ELIXIRS.values()} == set(BuffKind)
        assert len(all_elixir_names()) == len(BuffKind)


@pytest.mark.unit
class TestCreateBuff:
    def test_buff_carries_definition(self):
        # Act
        buff = create_buff("Sneaky Elixir")

        # Assert
        assert buff.is_active is True
        assert buff.effects.stealth_boost == 1
        assert buff.effects.flee_boost == 1
        assert buff.trigger_contexts == {
            ActionContext.GATHER,
            ActionContext.LOOT,
            ActionContext.TRAVEL,
        }

    def test_element_targets(self):
        assert create_buff("Fireproof Elixir").target_elements == {"fire"}
        assert create_buff("Mighty Elixir").target_elements == frozenset()

    def test_unknown_elixir_raises(self):
        # Act & Assert
        with pytest.raises(InvalidInputError) as exc_info:
            create_buff("Elixir of Life")

        assert exc_info.value.error_code == "INVALID_ELIXIR"
        assert exc_info.value.details["field"] == "elixir"


@pytest.mark.unit
class TestMonsterElement:
    @pytest.mark.parametrize(
        "monster, expected",
        [
            ("Fire Chuchu", "fire"),
            ("Igneo Talus", "fire"),
            ("Frost Pebblit", "ice"),
            ("Ice Keese", "ice"),
            ("Thunder Wizzrobe", "electric"),
            ("Electric Lizalfos", "electric"),
            ("Water Octorok", "water"),
            ("Stone Talus", "earth"),
            ("Molduga", "earth"),
            ("Stalfos", "undead"),
            ("Gloom Hands", "undead"),
            ("Stalkoblin", "none"),
            ("Sky Octorok", "wind"),
            ("Bokoblin", "none"),
            (None, "none"),
        ],
    )
    def test_element_from_name(self, monster, expected):
        assert monster_element(monster) == expected

    def test_flag_takes_precedence(self):
        monster = Candidate("Octorok", tier=1, flags={"Water"})

        assert monster_element(monster) == "water"

    def test_candidate_name_used_without_flag(self):
        assert monster_element(Candidate("Fire Keese", tier=1)) == "fire"


@pytest.mark.unit
class TestResistanceMapping:
    @pytest.mark.parametrize(
        "element, expected",
        [
            ("fire", DamageType.FIRE),
            ("ice", DamageType.COLD),
            ("Electric", DamageType.ELECTRIC),
            ("water", DamageType.WATER),
            ("undead", DamageType.BLIGHT),
            ("earth", None),
            ("none", None),
            ("", None),
        ],
    )
    def test_resistance_for_element(self, element, expected):
        assert resistance_for_element(element) == expected

    @pytest.mark.parametrize(
        "damage_type, expected",
        [
            (DamageType.BLIGHT, ActionContext.TRAVEL),
            ("cold", ActionContext.TRAVEL),
            (DamageType.FIRE, ActionContext.TRAVEL),
            (DamageType.ELECTRIC, ActionContext.COMBAT),
            ("water", ActionContext.COMBAT),
        ],
    )
    def test_trigger_contexts(self, damage_type, expected):
        assert resistance_trigger_context(damage_type) is expected


@pytest.mark.unit
class TestShouldConsume:
    def test_matching_context(self):
        assert should_consume(create_buff("Hasty Elixir"), "travel") is True
        assert should_consume(create_buff("Hasty Elixir"), ActionContext.COMBAT) is False

    def test_element_targeted(self):
        chilly = create_buff("Chilly Elixir")

        assert should_consume(chilly, "combat", "Water Octorok") is True
        assert should_consume(chilly, "combat", "Bokoblin") is False

    def test_inactive_or_missing_buff(self):
        assert should_consume(None, "combat") is False
        assert should_consume(create_buff("Mighty Elixir").consume(), "combat") is False

    def test_unknown_context(self):
        assert should_consume(create_buff("Mighty Elixir"), "sleeping") is False
