"""
Candidate Domain Model for Fateweaver.

Purpose
-------
Catalog entries the samplers pick from. An item candidate carries a rarity,
a monster candidate carries a tier; both are plain immutable values shared by
every resolution, so the samplers never modify them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional


@dataclass(frozen=True)
class Candidate:
    """
    Immutable catalog entry.

    Attributes
    ----------
    name : str
        Display name; job markers may match on it
    rarity : Optional[int]
        Item rarity 1-10 (items only)
    tier : Optional[int]
        Monster tier 1-10 (monsters only)
    aux_weight : float
        Extra per-candidate weight factor
    flags : FrozenSet[str]
        Catalog markers (e.g. "honey", "bloodmoon_only")
    """

    name: str
    rarity: Optional[int] = None
    tier: Optional[int] = None
    aux_weight: float = 1.0
    flags: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if isinstance(self.flags, str):
            flags = frozenset({self.flags.lower()})
        else:
            flags = frozenset(str(f).lower() for f in self.flags)
        object.__setattr__(self, "flags", flags)

    def has_marker(self, marker: str) -> bool:
        """True when the marker is a flag or a case-insensitive name substring."""
        needle = marker.strip().lower()
        if not needle:
            return False
        return needle in self.flags or needle in self.name.lower()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        """
        Build a candidate from a catalog document.

        Accepts both snake_case and the camelCase keys older catalog
        exports use ("itemName", "itemRarity").

        Example
        -------
        >>> Candidate.from_dict({"itemName": "Amber", "itemRarity": 4})
        Candidate(name='Amber', rarity=4, tier=None, aux_weight=1.0, flags=frozenset())
        """
        name = data.get("name") or data.get("itemName") or data.get("nameMonster") or ""
        rarity = data.get("rarity", data.get("itemRarity"))
        return cls(
            name=str(name),
            rarity=rarity,
            tier=data.get("tier"),
            aux_weight=data.get("aux_weight", data.get("weight", 1.0)),
            flags=frozenset(data.get("flags", ())),
        )


@dataclass(frozen=True)
class EncounterResult:
    """
    Outcome of a monster selection.

    `monster` is None for the "No Encounter" sentinel. `requested_tier` is the
    tier that was asked for; `tier` is the tier actually used after fallback.
    `encounter` and `monsters` give the label and monster list form that
    callers display.
    """

    monster: Optional[Candidate]
    tier: Optional[int]
    requested_tier: Optional[int]
    label: str
    fallback_used: bool = False

    @property
    def has_encounter(self) -> bool:
        return self.monster is not None

    @property
    def encounter(self) -> str:
        return self.label

    @property
    def monsters(self) -> List[Candidate]:
        return [self.monster] if self.monster is not None else []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "monster": self.monster.name if self.monster else None,
            "tier": self.tier,
            "requested_tier": self.requested_tier,
            "label": self.label,
            "encounter": self.encounter,
            "monsters": [m.name for m in self.monsters],
            "fallback_used": self.fallback_used,
        }
