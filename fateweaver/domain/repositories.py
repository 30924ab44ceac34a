"""
Collaborator contracts for Fateweaver.

Purpose
-------
The engine does not own persistence. Callers plug in two collaborators:

- CatalogProvider: supplies item and monster candidate lists
- CharacterRepository: reads snapshots and writes back the new values the
  engine returns (consumed buffs, flee counters, hearts)

Design Notes
------------
- Synchronous interfaces; the engine performs no I/O itself, and an async
  host wraps these calls however it likes.
- Repositories deal in domain values (CharacterSnapshot, Candidate), never
  in raw documents.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from fateweaver.domain.models import ActiveBuff, Candidate, CharacterSnapshot


class CatalogProvider(ABC):
    """Source of item and monster candidates."""

    @abstractmethod
    def get_item_candidates(
        self, job_tag: Optional[str] = None, region: Optional[str] = None
    ) -> List[Candidate]:
        """Items obtainable for a job in a region. Empty list when none."""

    @abstractmethod
    def get_monster_pool(self, region: Optional[str] = None) -> List[Candidate]:
        """Monsters that may appear in a region. Empty list when none."""


class CharacterRepository(ABC):
    """Read and write character state around a resolution."""

    @abstractmethod
    def get_snapshot(self, name: str) -> Optional[CharacterSnapshot]:
        """Current snapshot, or None when the character does not exist."""

    @abstractmethod
    def save_buff(self, name: str, buff: Optional[ActiveBuff]) -> None:
        """Persist the post-resolution buff state."""

    @abstractmethod
    def save_flee_state(
        self, name: str, failed_flee_attempts: int, current_hearts: float
    ) -> None:
        """Persist the flee counter and heart total after a flee attempt."""


__all__ = ["CatalogProvider", "CharacterRepository"]
