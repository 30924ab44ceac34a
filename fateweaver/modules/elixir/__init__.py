"""Elixir catalog and buff consumption rules."""

from .catalog import (
    ELIXIRS,
    RESISTANCE_TRIGGER_CONTEXTS,
    ElixirDefinition,
    all_elixir_names,
    create_buff,
    get_elixir,
    monster_element,
    resistance_for_element,
    resistance_trigger_context,
    should_consume,
)

__all__ = [
    "ELIXIRS",
    "RESISTANCE_TRIGGER_CONTEXTS",
    "ElixirDefinition",
    "all_elixir_names",
    "create_buff",
    "get_elixir",
    "monster_element",
    "resistance_for_element",
    "resistance_trigger_context",
    "should_consume",
]
