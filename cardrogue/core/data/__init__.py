"""Core data definitions.

This package contains the shared enums and the species behavior table:
- game_enums.py: Intent types, species, kill causes and directions
- species.py: Per-species behavior rules consumed by the timeline engine
"""

from .game_enums import (
    IntentType,
    Species,
    KillCause,
    Direction,
    INTENT_TYPE_NAMES,
    SPECIES_NAMES,
    KILL_CAUSE_NAMES,
)
from .species import SpeciesBehavior, SPECIES_BEHAVIORS, get_behavior

__all__ = [
    "IntentType",
    "Species",
    "KillCause",
    "Direction",
    "INTENT_TYPE_NAMES",
    "SPECIES_NAMES",
    "KILL_CAUSE_NAMES",
    "SpeciesBehavior",
    "SPECIES_BEHAVIORS",
    "get_behavior",
]
