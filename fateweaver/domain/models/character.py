"""
Character Snapshot Domain Model for Fateweaver.

Purpose
-------
Immutable, read-only view of a character at the moment an action is
resolved. The engine never writes to it; every state change (a consumed
buff, a new flee counter, lost hearts) is returned as a new snapshot for the
caller to persist.

Responsibilities
----------------
- Carry the stats the resolution formulas read
- Carry the active buff and the flee failure counter
- Produce updated copies via `dataclasses.replace`

Non-Responsibilities
--------------------
- Coercing bad stats (handled by fateweaver.modules.shared.validators at
  resolution time, so a snapshot built from a corrupt document still loads)
- Persistence (handled by CharacterRepository)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .buff import ActiveBuff


@dataclass(frozen=True)
class CharacterSnapshot:
    """
    Immutable value object representing a character for one resolution.

    Attributes
    ----------
    name : str
        Character name, used for log context only
    attack, defense, speed, stealth : float
        Raw stats (unbuffed); may be missing or malformed in stored data
    is_blighted : bool
        Whether the character carries the blight
    blight_stage : int
        Blight progression stage
    active_buff : Optional[ActiveBuff]
        The single buff currently attached, if any
    failed_flee_attempts : int
        Consecutive failed flee attempts
    current_hearts, max_hearts : float
        Hit points used to decide a knockout on flee failure
    job : Optional[str]
        Job tag, when the caller wants job boosts derived from the snapshot
    """

    name: str = ""
    attack: Any = 0
    defense: Any = 0
    speed: Any = 0
    stealth: Any = 0
    is_blighted: bool = False
    blight_stage: int = 0
    active_buff: Optional[ActiveBuff] = None
    failed_flee_attempts: int = 0
    current_hearts: float = 0
    max_hearts: float = 0
    job: Optional[str] = None

    @property
    def has_active_buff(self) -> bool:
        return self.active_buff is not None and self.active_buff.is_active

    def with_buff(self, buff: Optional[ActiveBuff]) -> "CharacterSnapshot":
        """Return a copy carrying the given buff state."""
        return replace(self, active_buff=buff)

    def with_flee_state(
        self, failed_flee_attempts: int, current_hearts: float
    ) -> "CharacterSnapshot":
        """Return a copy with a new flee counter and heart total."""
        return replace(
            self,
            failed_flee_attempts=failed_flee_attempts,
            current_hearts=current_hearts,
        )

    def to_log_dict(self) -> Dict[str, Any]:
        """Compact representation for structured log records."""
        return {
            "character": self.name or "N/A",
            "attack": self.attack,
            "defense": self.defense,
            "blighted": self.is_blighted,
            "blight_stage": self.blight_stage,
            "buff": self.active_buff.kind.value if self.has_active_buff else None,
        }
