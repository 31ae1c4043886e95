"""Intent entity.

An intent is one hostile threat sitting on the timeline: what it will do when
it reaches the front slot, how hard, and which species rules govern it.
Intents only exist inside a Timeline slot; the Timeline owns every mutation
except toggling the stun flag.
"""

import uuid
from dataclasses import dataclass, field

from ..data.game_enums import IntentType, Species, INTENT_TYPE_NAMES, SPECIES_NAMES
from ..data.species import SpeciesBehavior, get_behavior


@dataclass
class Intent:
    """A hostile action waiting on the timeline."""

    intent_type: IntentType
    magnitude: int
    species: Species = Species.NORMAL
    stunned: bool = False

    # Stable identity for presentation layers tracking an intent across slots
    intent_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    def __post_init__(self):
        if self.magnitude < 0:
            self.magnitude = 0

    @property
    def behavior(self) -> SpeciesBehavior:
        return get_behavior(self.species)

    def set_stun(self, enabled: bool) -> None:
        """Toggle the stun flag."""
        self.stunned = enabled

    def describe(self) -> str:
        """Short label used by logs and text renderers, e.g. ``ATK 10 (Bomb)``."""
        label = f"{INTENT_TYPE_NAMES[self.intent_type]} {self.magnitude}"
        if self.species != Species.NORMAL:
            label += f" ({SPECIES_NAMES[self.species]})"
        if self.stunned:
            label += " [stunned]"
        return label
