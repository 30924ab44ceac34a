"""Boost plug-in payloads and their safe application."""

from .payload import (
    BoostModifier,
    BoostPayload,
    ItemPayload,
    ListPayload,
    NumberPayload,
    apply_boost,
)

__all__ = [
    "BoostModifier",
    "BoostPayload",
    "ItemPayload",
    "ListPayload",
    "NumberPayload",
    "apply_boost",
]
