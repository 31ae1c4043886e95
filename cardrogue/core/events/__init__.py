"""Event system for publisher-subscriber communication.

This package contains the complete event-driven architecture:
- event_manager.py: Publisher-subscriber event routing
- events.py: Event definitions published by the timeline and managers
"""

from .event_manager import EventManager, EventPriority, QueuedEvent
from .events import (
    GameEvent,
    EventType,
    EnemyAction,
    EnemyDefeated,
    ArmorHit,
    BombExploded,
    IntentSpawned,
    IntentMoved,
    IntentStunned,
    TimelineAdvanced,
    RageApplied,
    IntentJittered,
    CameraShake,
    LogMessage,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "GameEvent",
    "EventType",
    "EnemyAction",
    "EnemyDefeated",
    "ArmorHit",
    "BombExploded",
    "IntentSpawned",
    "IntentMoved",
    "IntentStunned",
    "TimelineAdvanced",
    "RageApplied",
    "IntentJittered",
    "CameraShake",
    "LogMessage",
]
