"""
Fateweaver domain layer: value objects and collaborator contracts.
"""

from fateweaver.domain.models import (
    ActionContext,
    ActiveBuff,
    BuffEffects,
    BuffKind,
    Candidate,
    CharacterSnapshot,
    DamageType,
    EncounterResult,
)
from fateweaver.domain.repositories import CatalogProvider, CharacterRepository

__all__ = [
    "ActionContext",
    "ActiveBuff",
    "BuffEffects",
    "BuffKind",
    "Candidate",
    "CharacterSnapshot",
    "DamageType",
    "EncounterResult",
    "CatalogProvider",
    "CharacterRepository",
]
