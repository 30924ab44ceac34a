"""
Domain models package for Fateweaver.

Purpose
-------
Immutable value objects the resolution engine reads. They are separate
from whatever document shape the caller persists; repositories convert
between the two.
"""

from .buff import ActionContext, ActiveBuff, BuffEffects, BuffKind, DamageType
from .candidate import Candidate, EncounterResult
from .character import CharacterSnapshot

__all__ = [
    "ActionContext",
    "ActiveBuff",
    "BuffEffects",
    "BuffKind",
    "DamageType",
    "Candidate",
    "EncounterResult",
    "CharacterSnapshot",
]
