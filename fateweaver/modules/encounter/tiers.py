"""
Encounter Tier Tables

Purpose
-------
Map a uniform random draw to an encounter tier using a percentage table.

Responsibilities
----------------
- ProbabilityTable: ordered (tier, percent) entries; tier None is the
  "no encounter" outcome
- select_tier: cumulative walk over a table
- EncounterSettings: the standard, blood moon and travel tables plus the
  exploration tier weights and wave difficulty groups, loaded from
  `encounters.*` with code defaults

Design Notes
------------
- Tables are expected to sum to 100. This is checked (with a warning) when a
  table is loaded, never on the hot path.
- A draw that falls past the last cumulative bound (only possible when a
  table sums to less than 100) returns the last entry.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from fateweaver.core.config.manager import ConfigManager
from fateweaver.core.logging.logger import get_logger
from fateweaver.modules.shared.constants import (
    BLOODMOON_ENCOUNTER_TABLE,
    DEFAULT_EXPLORATION_TIER_WEIGHT,
    EXPLORATION_TIER_WEIGHTS,
    NO_ENCOUNTER_LABEL,
    STANDARD_ENCOUNTER_TABLE,
    TRAVEL_ENCOUNTER_TABLE,
    WAVE_DIFFICULTY_GROUPS,
)
from fateweaver.modules.shared.exceptions import InvalidInputError
from fateweaver.modules.shared.random_source import resolve_rng
from fateweaver.modules.shared.validators import coerce_tier

logger = get_logger(__name__)

TableEntry = Tuple[Optional[int], float]

_TIER_LABEL_PATTERN = re.compile(r"^\s*tier\s*(\d+)\s*$", re.IGNORECASE)

_SUM_TOLERANCE = 1e-6


class EncounterMode(str, Enum):
    STANDARD = "standard"
    BLOODMOON = "bloodmoon"
    TRAVEL = "travel"

    @classmethod
    def parse(cls, value: Any) -> "EncounterMode":
        """
        Parse a mode name ("blood moon" and "blood_moon" are accepted).

        Raises:
            InvalidInputError: If the mode is unknown
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = "".join(value.lower().replace("_", " ").replace("-", " ").split())
            for mode in cls:
                if mode.value == normalized:
                    return mode
        raise InvalidInputError(
            "mode", value, f"must be one of {', '.join(m.value for m in cls)}"
        )


def tier_label(tier: Optional[int]) -> str:
    """
    Display label for a tier.

    Example:
        >>> tier_label(3)
        'Tier 3'
        >>> tier_label(None)
        'No Encounter'
    """
    return NO_ENCOUNTER_LABEL if tier is None else f"Tier {tier}"


def parse_tier_label(value: Any) -> Optional[int]:
    """
    Tier number from a label such as "Tier 3" or from a plain number.

    "No Encounter" and anything else unusable give None.

    Example:
        >>> parse_tier_label("Tier 3")
        3
        >>> parse_tier_label(tier_label(None)) is None
        True
    """
    if isinstance(value, str):
        match = _TIER_LABEL_PATTERN.match(value)
        if match:
            return coerce_tier(match.group(1))
    return coerce_tier(value)


@dataclass(frozen=True)
class ProbabilityTable:
    """Ordered (tier, percent) entries; tier None means no encounter."""

    name: str
    entries: Tuple[TableEntry, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))

    @property
    def total(self) -> float:
        return sum(weight for _, weight in self.entries)

    @property
    def tiers(self) -> Tuple[Optional[int], ...]:
        return tuple(tier for tier, _ in self.entries)

    def is_valid(self) -> bool:
        """True when the table is non-empty and sums to 100."""
        return bool(self.entries) and abs(self.total - 100.0) <= _SUM_TOLERANCE

    def validate(self) -> bool:
        """Check the table, logging a warning when it does not sum to 100."""
        if self.is_valid():
            return True
        logger.warning(
            f"Encounter table '{self.name}' sums to {self.total}, expected 100",
            extra={"table": self.name, "total": self.total},
        )
        return False

    def percent_of(self, tier: Optional[int]) -> float:
        return sum(weight for t, weight in self.entries if t == tier)

    @classmethod
    def from_entries(cls, name: str, raw: Iterable[Any]) -> "ProbabilityTable":
        """
        Build a table from config entries ({tier, weight} mappings or pairs).

        Raises:
            InvalidInputError: If an entry is malformed
        """
        entries = []
        for entry in raw:
            try:
                if isinstance(entry, dict):
                    tier, weight = entry.get("tier"), entry["weight"]
                else:
                    tier, weight = entry
                entries.append((None if tier is None else int(tier), float(weight)))
            except (KeyError, TypeError, ValueError) as e:
                raise InvalidInputError(
                    f"encounters.tables.{name}", entry, f"malformed entry: {e}"
                ) from e
        return cls(name=name, entries=tuple(entries))


def select_tier(table: ProbabilityTable, rng: Optional[random.Random] = None) -> Optional[int]:
    """
    Draw r in [0, 100) and return the first tier whose cumulative bound
    exceeds r.

    Returns:
        Tier number, or None for "no encounter"
    """
    if not table.entries:
        return None

    r = resolve_rng(rng).random() * 100
    cumulative = 0.0
    for tier, weight in table.entries:
        cumulative += weight
        if r < cumulative:
            return tier
    return table.entries[-1][0]


# ============================================================================
# Settings
# ============================================================================

_DEFAULT_TABLES: Dict[EncounterMode, Tuple[TableEntry, ...]] = {
    EncounterMode.STANDARD: STANDARD_ENCOUNTER_TABLE,
    EncounterMode.BLOODMOON: BLOODMOON_ENCOUNTER_TABLE,
    EncounterMode.TRAVEL: TRAVEL_ENCOUNTER_TABLE,
}


def _default_tables() -> Dict[EncounterMode, ProbabilityTable]:
    return {
        mode: ProbabilityTable(name=mode.value, entries=entries)
        for mode, entries in _DEFAULT_TABLES.items()
    }


@dataclass(frozen=True)
class EncounterSettings:
    tables: Dict[EncounterMode, ProbabilityTable] = field(default_factory=_default_tables)
    exploration_tier_weights: Dict[int, float] = field(
        default_factory=lambda: dict(EXPLORATION_TIER_WEIGHTS)
    )
    default_exploration_weight: float = DEFAULT_EXPLORATION_TIER_WEIGHT
    wave_difficulty_groups: Dict[str, Dict[int, float]] = field(
        default_factory=lambda: {k: dict(v) for k, v in WAVE_DIFFICULTY_GROUPS.items()}
    )

    def table_for(self, mode: Any) -> ProbabilityTable:
        return self.tables[EncounterMode.parse(mode)]

    def exploration_weight(self, tier: int) -> float:
        return self.exploration_tier_weights.get(tier, self.default_exploration_weight)

    def wave_distribution(self, group: str) -> Dict[int, float]:
        """
        Tier distribution of a wave difficulty group.

        Raises:
            InvalidInputError: If the group is unknown
        """
        try:
            return self.wave_difficulty_groups[group]
        except KeyError:
            raise InvalidInputError(
                "difficulty_group", group, "unknown wave difficulty group"
            ) from None

    @classmethod
    def from_config(cls) -> "EncounterSettings":
        return cls(
            tables=_load_tables(ConfigManager.get("encounters.tables")),
            exploration_tier_weights=_load_tier_weights(
                ConfigManager.get("encounters.exploration_tier_weights"),
                EXPLORATION_TIER_WEIGHTS,
            ),
            wave_difficulty_groups=_load_wave_groups(
                ConfigManager.get("encounters.wave_difficulty_groups")
            ),
        )


def _load_tables(raw: Any) -> Dict[EncounterMode, ProbabilityTable]:
    tables = _default_tables()
    if not isinstance(raw, dict):
        return tables

    for mode in EncounterMode:
        entries = raw.get(mode.value)
        if not isinstance(entries, list):
            continue
        try:
            table = ProbabilityTable.from_entries(mode.value, entries)
        except InvalidInputError as e:
            logger.warning(f"{e}; using default '{mode.value}' table")
            continue
        if table.validate():
            tables[mode] = table
        else:
            logger.warning(f"Using default '{mode.value}' encounter table")
    return tables


def _load_tier_weights(raw: Any, default: Dict[int, float]) -> Dict[int, float]:
    if not isinstance(raw, dict) or not raw:
        return dict(default)
    try:
        return {int(tier): float(weight) for tier, weight in raw.items()}
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid tier weights, using defaults: {e}")
        return dict(default)


def _load_wave_groups(raw: Any) -> Dict[str, Dict[int, float]]:
    groups = {name: dict(dist) for name, dist in WAVE_DIFFICULTY_GROUPS.items()}
    if not isinstance(raw, dict):
        return groups
    for name, distribution in raw.items():
        groups[str(name)] = _load_tier_weights(distribution, groups.get(str(name), {}))
    return groups
