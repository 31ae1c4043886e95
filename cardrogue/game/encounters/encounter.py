"""Encounter configuration structures.

An encounter describes one fight on the timeline: how long the track is,
which intents are already waiting when it starts, what arrives later, and how
fast the enemy's rage builds.
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from ...core.data.game_enums import IntentType, Species
from ...core.engine.timeline import Timeline

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager


@dataclass
class IntentPlacement:
    """An intent to put on a given slot."""
    slot: int
    intent_type: IntentType
    magnitude: int
    species: Species = Species.NORMAL


@dataclass
class WaveSpawn:
    """An intent that arrives at the start of a given turn."""
    turn: int
    placement: IntentPlacement


@dataclass
class RageSettings:
    """Escalation settings.

    ``initial`` is the rage level before the first turn; every completed turn
    raises it by ``growth`` and then applies it to everything on the track.
    """
    initial: int = 0
    growth: int = 1


@dataclass
class Encounter:
    """A complete encounter definition."""
    name: str
    description: str = ""
    slot_count: int = Timeline.DEFAULT_SLOT_COUNT
    rage: RageSettings = field(default_factory=RageSettings)
    intents: list[IntentPlacement] = field(default_factory=list)
    waves: list[WaveSpawn] = field(default_factory=list)
    source_path: Optional[str] = None

    def build_timeline(self, event_manager: Optional["EventManager"] = None) -> Timeline:
        """Create a timeline sized for this encounter with its opening intents."""
        timeline = Timeline(slot_count=self.slot_count, event_manager=event_manager)
        for placement in self.intents:
            timeline.spawn(
                placement.slot,
                placement.intent_type,
                placement.magnitude,
                placement.species,
            )
        return timeline

    def waves_for_turn(self, turn: int) -> list[WaveSpawn]:
        return [wave for wave in self.waves if wave.turn == turn]

    @property
    def last_wave_turn(self) -> int:
        return max((wave.turn for wave in self.waves), default=0)
