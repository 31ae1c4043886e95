"""Rage escalation for creating battle time pressure.

Every completed turn makes the enemy angrier: the rage level grows and is
added to the magnitude of every intent still on the track. Rage is owned
here rather than by the timeline, so the timeline only ever sees the amount
to apply.
"""

from typing import Any, Optional, TYPE_CHECKING

from ...core.events.events import EventType, LogMessage, TimelineAdvanced
from .log_manager import LogLevel

if TYPE_CHECKING:
    from ...core.engine.timeline import Timeline
    from ...core.events.event_manager import EventManager
    from ...core.events.events import GameEvent
    from ..encounters.encounter import RageSettings


class EscalationManager:
    """Owns the rage level and applies it once per completed turn."""

    def __init__(self, timeline: "Timeline", event_manager: "EventManager",
                 initial_rage: int = 0, rage_growth: int = 1,
                 auto_escalate: bool = True):
        """Initialize escalation manager.

        Args:
            timeline: Timeline whose intents get angrier
            event_manager: Event manager for publishing and subscribing to events
            initial_rage: Rage level before the first turn
            rage_growth: Rage gained per completed turn
            auto_escalate: Escalate automatically whenever the timeline advances
        """
        if initial_rage < 0 or rage_growth < 0:
            raise ValueError(
                f"Rage must not decrease (initial={initial_rage}, growth={rage_growth})"
            )

        self.timeline = timeline
        self.event_manager = event_manager
        self.rage_growth = rage_growth
        self._rage_level = initial_rage
        self.escalations = 0
        self.total_rage_applied = 0

        if auto_escalate:
            self.event_manager.subscribe(
                EventType.TIMELINE_ADVANCED,
                self._on_timeline_advanced,
                subscriber_name="EscalationManager.timeline_advanced"
            )

    @classmethod
    def from_settings(cls, timeline: "Timeline", event_manager: "EventManager",
                      settings: "RageSettings", auto_escalate: bool = True) -> "EscalationManager":
        return cls(timeline, event_manager,
                   initial_rage=settings.initial,
                   rage_growth=settings.growth,
                   auto_escalate=auto_escalate)

    @property
    def rage_level(self) -> int:
        """Current rage offset; never decreases."""
        return self._rage_level

    def _emit_log(self, message: str, level: LogLevel = LogLevel.INFO,
                  turn: Optional[int] = None) -> None:
        self.event_manager.publish(
            LogMessage(
                turn=self.timeline.current_turn if turn is None else turn,
                message=message,
                category="ESCALATION",
                level=level,
                source="EscalationManager"
            ),
            source="EscalationManager"
        )

    def _on_timeline_advanced(self, event: "GameEvent") -> None:
        assert isinstance(event, TimelineAdvanced), f"Expected TimelineAdvanced event, got {type(event).__name__}"
        self.escalate(turn=event.turn)

    def escalate(self, turn: Optional[int] = None) -> int:
        """Raise the rage level and apply it to every intent on the track.

        Args:
            turn: Turn the escalation closes, used to stamp the log line
                (defaults to the timeline's current turn)

        Returns:
            Number of intents that got angrier
        """
        self._rage_level += self.rage_growth
        self.escalations += 1

        affected = self.timeline.apply_rage(self._rage_level)
        if affected:
            self.total_rage_applied += self._rage_level * affected
            self._emit_log(f"Rage rises to {self._rage_level}", turn=turn)
        return affected

    def get_current_escalation_info(self) -> dict[str, Any]:
        return {
            "rage_level": self._rage_level,
            "rage_growth": self.rage_growth,
            "escalations": self.escalations,
            "total_rage_applied": self.total_rage_applied,
        }
