"""Timeline events and their payloads.

This module defines every event the timeline engine and the game managers
publish. The engine never calls into presentation code; renderers, the log
and the orchestrator learn about state changes only through these events.

Event Design Principles:
- Events are immutable dataclasses carrying the turn they happened on
- Domain events (EnemyAction, EnemyDefeated, ArmorHit, BombExploded) drive
  game state such as player HP and kill counts
- Presentation hooks (jitter, camera shake, moves) are purely cosmetic and
  never needed for simulation correctness
- Events use proper enums instead of magic strings
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING
from abc import ABC
from enum import Enum, auto

from ..data.game_enums import IntentType, Species, KillCause

if TYPE_CHECKING:
    from ..entities.intent import Intent
    from ...game.managers.log_manager import LogLevel


class EventType(Enum):
    """Types of events that subscribers can listen for."""
    # Domain Events
    ENEMY_ACTION = auto()
    ENEMY_DEFEATED = auto()
    ARMOR_HIT = auto()
    BOMB_EXPLODED = auto()

    # Timeline Events
    INTENT_SPAWNED = auto()
    INTENT_MOVED = auto()
    INTENT_STUNNED = auto()
    TIMELINE_ADVANCED = auto()
    RAGE_APPLIED = auto()

    # Presentation Hooks
    INTENT_JITTERED = auto()
    CAMERA_SHAKE = auto()

    # Logging Events
    LOG_MESSAGE = auto()


@dataclass(frozen=True)
class GameEvent(ABC):
    """Base class for all events."""
    turn: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class EnemyAction(GameEvent):
    """Event emitted when the front intent resolves against the player."""
    intent_type: IntentType
    magnitude: int
    species: Species = Species.NORMAL

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.ENEMY_ACTION)


@dataclass(frozen=True)
class EnemyDefeated(GameEvent):
    """Event emitted when an intent is purged from the timeline."""
    slot: int
    species: Species
    cause: KillCause

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ENEMY_DEFEATED)


@dataclass(frozen=True)
class ArmorHit(GameEvent):
    """Event emitted when an attack, stun or thunder is rejected by immunity."""
    slot: int
    species: Species

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ARMOR_HIT)


@dataclass(frozen=True)
class BombExploded(GameEvent):
    """Event emitted when a bomb dies.

    ``chained`` is True when the bomb was itself caught in another bomb's
    blast; chained bombs do not take their own neighbors with them.
    """
    slot: int
    chained: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.BOMB_EXPLODED)


@dataclass(frozen=True)
class IntentSpawned(GameEvent):
    """Event emitted when an intent is placed on the timeline."""
    slot: int
    intent: "Intent"
    replaced: Optional["Intent"] = None  # Previous occupant, discarded silently

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.INTENT_SPAWNED)


@dataclass(frozen=True)
class IntentMoved(GameEvent):
    """Event emitted when an intent changes slot (forced move or advance)."""
    from_slot: int
    to_slot: int
    intent: "Intent"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.INTENT_MOVED)


@dataclass(frozen=True)
class IntentStunned(GameEvent):
    """Event emitted when an intent becomes stunned."""
    slot: int
    species: Species

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.INTENT_STUNNED)


@dataclass(frozen=True)
class TimelineAdvanced(GameEvent):
    """Event emitted once the end-of-turn advance has finished."""
    resolved: bool  # Whether the front intent acted this turn
    moved: int      # Number of intents that changed slot

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.TIMELINE_ADVANCED)


@dataclass(frozen=True)
class RageApplied(GameEvent):
    """Event emitted when rage raises the magnitude of every intent."""
    amount: int
    affected: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.RAGE_APPLIED)


@dataclass(frozen=True)
class IntentJittered(GameEvent):
    """Presentation hook: an intent shrugged off an effect and shakes in place."""
    slot: int
    species: Species

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.INTENT_JITTERED)


@dataclass(frozen=True)
class CameraShake(GameEvent):
    """Presentation hook: two intents smashed into each other."""
    slot: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.CAMERA_SHAKE)


# Logging Events
@dataclass(frozen=True)
class LogMessage(GameEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: "LogLevel"
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)
