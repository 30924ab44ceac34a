"""
Boost Plug-in Contract

Purpose
-------
Let external boost systems (job perks, boosting services, events) adjust an
intermediate value of a resolution without the engine knowing what they are.

A boost is any callable taking a payload and returning a payload of the same
variant:

- NumberPayload : a working roll or final value
- ItemPayload   : a single chosen candidate
- ListPayload   : a weighted candidate pool

Design Notes
------------
- `apply_boost` never lets a boost break a resolution. If the modifier raises
  or returns a different variant, the original payload is kept and the
  failure is logged with its traceback.
- Payloads are frozen; a modifier builds a new one with `with_value` /
  `with_item` / `with_items`.

Usage
-----
    def double_roll(payload):
        return payload.with_value(payload.value * 2)

    boosted = apply_boost(double_roll, NumberPayload(40.0)).value   # 80.0
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Optional, Tuple, Union

from fateweaver.core.logging.logger import get_logger
from fateweaver.domain.models import Candidate

logger = get_logger(__name__)


# ============================================================================
# Payload variants
# ============================================================================


@dataclass(frozen=True)
class NumberPayload:
    value: float

    def with_value(self, value: float) -> "NumberPayload":
        return replace(self, value=value)


@dataclass(frozen=True)
class ItemPayload:
    item: Optional[Candidate]

    def with_item(self, item: Optional[Candidate]) -> "ItemPayload":
        return replace(self, item=item)


@dataclass(frozen=True)
class ListPayload:
    items: Tuple[Candidate, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def with_items(self, items: Iterable[Candidate]) -> "ListPayload":
        return ListPayload(items=tuple(items))


BoostPayload = Union[NumberPayload, ItemPayload, ListPayload]
BoostModifier = Callable[[BoostPayload], BoostPayload]


# ============================================================================
# Application
# ============================================================================


def apply_boost(
    modifier: Optional[BoostModifier],
    payload: BoostPayload,
    *,
    label: str = "boost",
) -> BoostPayload:
    """
    Run a boost modifier over a payload.

    Args:
        modifier: Boost callable, or None for "no boost"
        payload: Value to transform
        label: Name used in log records

    Returns:
        The modifier's result, or the original payload when the modifier is
        missing, raises, or returns a different payload variant
    """
    if modifier is None:
        return payload

    try:
        result: Any = modifier(payload)
    except Exception as e:
        logger.error(
            f"Boost '{label}' failed; keeping original value: {e}",
            extra={"boost": label, "payload_type": type(payload).__name__},
            exc_info=True,
        )
        return payload

    if type(result) is not type(payload):
        logger.warning(
            f"Boost '{label}' returned {type(result).__name__}, "
            f"expected {type(payload).__name__}; keeping original value",
            extra={"boost": label, "payload_type": type(payload).__name__},
        )
        return payload

    logger.debug(
        f"Boost '{label}' applied",
        extra={"boost": label, "payload_type": type(payload).__name__},
    )
    return result
