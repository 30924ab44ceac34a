"""
In-memory collaborators for Fateweaver.

Dict-backed implementations of CatalogProvider and CharacterRepository for
tests, local wiring and scripted simulations. Not thread-safe; callers
serialise per character as with any other repository.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from fateweaver.core.logging.logger import get_logger
from fateweaver.domain.models import ActiveBuff, Candidate, CharacterSnapshot
from fateweaver.domain.repositories import CatalogProvider, CharacterRepository
from fateweaver.modules.shared.exceptions import InvalidInputError

logger = get_logger(__name__)

_ANY = "*"


def _key(value: Optional[str]) -> str:
    if not value:
        return _ANY
    return " ".join(value.lower().split())


def _lookup_keys(value: Optional[str]) -> List[str]:
    # Ordered so that candidate lists are stable for seeded sampling
    key = _key(value)
    return [_ANY] if key == _ANY else [_ANY, key]


class InMemoryCatalogProvider(CatalogProvider):
    """
    Catalog held in dictionaries keyed by job and region.

    Items registered without a job are visible to every job; the same holds
    for monsters registered without a region.
    """

    def __init__(self) -> None:
        self._items: Dict[str, Dict[str, List[Candidate]]] = {}
        self._monsters: Dict[str, List[Candidate]] = {}

    def add_items(
        self,
        items: Iterable[Candidate],
        job_tag: Optional[str] = None,
        region: Optional[str] = None,
    ) -> None:
        bucket = self._items.setdefault(_key(region), {}).setdefault(_key(job_tag), [])
        bucket.extend(items)

    def add_monsters(self, monsters: Iterable[Candidate], region: Optional[str] = None) -> None:
        self._monsters.setdefault(_key(region), []).extend(monsters)

    def get_item_candidates(
        self, job_tag: Optional[str] = None, region: Optional[str] = None
    ) -> List[Candidate]:
        result: List[Candidate] = []
        for region_key in _lookup_keys(region):
            by_job = self._items.get(region_key, {})
            for job_key in _lookup_keys(job_tag):
                result.extend(by_job.get(job_key, []))
        return result

    def get_monster_pool(self, region: Optional[str] = None) -> List[Candidate]:
        result: List[Candidate] = []
        for region_key in _lookup_keys(region):
            result.extend(self._monsters.get(region_key, []))
        return result


class InMemoryCharacterRepository(CharacterRepository):
    """Snapshots stored by character name (case-insensitive)."""

    def __init__(self, snapshots: Optional[Iterable[CharacterSnapshot]] = None) -> None:
        self._snapshots: Dict[str, CharacterSnapshot] = {}
        for snapshot in snapshots or ():
            self.add(snapshot)

    def add(self, snapshot: CharacterSnapshot) -> None:
        if not snapshot.name:
            raise InvalidInputError("name", snapshot.name, "character name is required")
        self._snapshots[_key(snapshot.name)] = snapshot

    def get_snapshot(self, name: str) -> Optional[CharacterSnapshot]:
        return self._snapshots.get(_key(name))

    def save_buff(self, name: str, buff: Optional[ActiveBuff]) -> None:
        current = self._require(name)
        self._snapshots[_key(name)] = current.with_buff(buff)
        logger.debug(
            "Character buff saved",
            extra={"character": name, "buff_active": bool(buff and buff.is_active)},
        )

    def save_flee_state(
        self, name: str, failed_flee_attempts: int, current_hearts: float
    ) -> None:
        current = self._require(name)
        self._snapshots[_key(name)] = replace(
            current,
            failed_flee_attempts=failed_flee_attempts,
            current_hearts=current_hearts,
        )
        logger.debug(
            "Character flee state saved",
            extra={
                "character": name,
                "failed_flee_attempts": failed_flee_attempts,
                "current_hearts": current_hearts,
            },
        )

    def _require(self, name: str) -> CharacterSnapshot:
        snapshot = self.get_snapshot(name)
        if snapshot is None:
            raise InvalidInputError("character", name, "no such character")
        return snapshot
