"""Per-call buff application and consumption."""

from .pipeline import BuffPipeline, BuffSettings, StaminaModifiers

__all__ = ["BuffPipeline", "BuffSettings", "StaminaModifiers"]
