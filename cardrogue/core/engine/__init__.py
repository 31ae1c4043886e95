"""Core game engine components.

This package contains the timeline simulation:
- timeline.py: Slot track, player effects, turn advance and rage
"""

from .timeline import Timeline, SLOT_DTYPE

__all__ = [
    "Timeline",
    "SLOT_DTYPE",
]
