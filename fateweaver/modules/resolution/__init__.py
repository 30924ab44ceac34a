"""Final value resolution for regular and raid actions."""

from .final_value import (
    FinalValueResolver,
    FinalValueResult,
    FinalValueSettings,
    ResolutionMode,
    resolve_final_value,
)

__all__ = [
    "FinalValueResolver",
    "FinalValueResult",
    "FinalValueSettings",
    "ResolutionMode",
    "resolve_final_value",
]
