"""Flee attempts: chance, damage and knockout."""

from .resolver import (
    FleeOutcome,
    FleeResolver,
    FleeSettings,
    FleeState,
    attempt_flee,
    roll_flee_damage,
)

__all__ = [
    "FleeOutcome",
    "FleeResolver",
    "FleeSettings",
    "FleeState",
    "attempt_flee",
    "roll_flee_damage",
]
