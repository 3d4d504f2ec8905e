"""Consumers of the published weather state."""

from .effects import GameplayEffects, UnitDef
from .visuals import VisualEffects

__all__ = [
    "GameplayEffects",
    "UnitDef",
    "VisualEffects",
]
