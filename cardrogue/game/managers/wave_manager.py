"""Scheduled reinforcements for an encounter.

Waves are intents that join the timeline at the start of a given turn. They
are spawned right after the previous turn's advance, so they get a full turn
on the track before moving. Waves due on the opening turn spawn as soon as
the manager is created.
"""

from typing import TYPE_CHECKING

from ...core.data.game_enums import SPECIES_NAMES
from ...core.events.events import EventType, LogMessage, TimelineAdvanced
from .log_manager import LogLevel

if TYPE_CHECKING:
    from ...core.engine.timeline import Timeline
    from ...core.events.event_manager import EventManager
    from ...core.events.events import GameEvent
    from ..encounters.encounter import Encounter, WaveSpawn


class WaveManager:
    """Spawns an encounter's waves on the turn they are due."""

    def __init__(self, timeline: "Timeline", event_manager: "EventManager",
                 encounter: "Encounter"):
        self.timeline = timeline
        self.event_manager = event_manager
        self.encounter = encounter
        self.spawned: list["WaveSpawn"] = []

        self.event_manager.subscribe(
            EventType.TIMELINE_ADVANCED,
            self._on_timeline_advanced,
            subscriber_name="WaveManager.timeline_advanced"
        )

        # Nothing advances into the opening turn
        self.spawn_due_waves()

    def _on_timeline_advanced(self, event: "GameEvent") -> None:
        assert isinstance(event, TimelineAdvanced), f"Expected TimelineAdvanced event, got {type(event).__name__}"
        self.spawn_due_waves()

    def spawn_due_waves(self) -> int:
        """Spawn every wave scheduled for the timeline's current turn.

        Returns:
            Number of intents spawned
        """
        turn = self.timeline.current_turn
        count = 0
        for wave in self.encounter.waves_for_turn(turn):
            if any(done is wave for done in self.spawned):
                continue
            placement = wave.placement
            self.timeline.spawn(
                placement.slot, placement.intent_type, placement.magnitude, placement.species
            )
            self.spawned.append(wave)
            count += 1
            self.event_manager.publish(
                LogMessage(
                    turn=turn,
                    message=f"{SPECIES_NAMES[placement.species]} arrives at T{placement.slot}",
                    category="ESCALATION",
                    level=LogLevel.INFO,
                    source="WaveManager"
                ),
                source="WaveManager"
            )
        return count

    @property
    def remaining_waves(self) -> int:
        return len(self.encounter.waves) - len(self.spawned)
