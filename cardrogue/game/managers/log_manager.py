"""
Log management for battle toasts and debugging.

This module provides centralized logging with categorization, filtering and
bounded storage. Besides explicit LogMessage events it listens to the
timeline's domain events and turns them into short player-facing lines.
"""
import os
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from ...core.data.game_enums import INTENT_TYPE_NAMES, KILL_CAUSE_NAMES, SPECIES_NAMES
from ...core.events.events import (
    ArmorHit,
    BombExploded,
    EnemyAction,
    EnemyDefeated,
    EventType,
    LogMessage as LogEvent,
    RageApplied,
)

if TYPE_CHECKING:
    from ...core.events.event_manager import EventManager
    from ...core.events.events import GameEvent


class LogCategory(Enum):
    """Categories for log messages."""
    SYSTEM = auto()      # Initialization, loading, saving
    BATTLE = auto()      # Attacks, kills, explosions
    TIMELINE = auto()    # Advance and movement details
    ESCALATION = auto()  # Rage and waves
    ENCOUNTER = auto()   # Encounter loading
    DEBUG = auto()
    WARNING = auto()
    ERROR = auto()


CATEGORY_TAGS = {
    LogCategory.SYSTEM: "SYS",
    LogCategory.BATTLE: "BTL",
    LogCategory.TIMELINE: "TML",
    LogCategory.ESCALATION: "ESC",
    LogCategory.ENCOUNTER: "ENC",
    LogCategory.DEBUG: "DBG",
    LogCategory.WARNING: "WRN",
    LogCategory.ERROR: "ERR",
}


class LogLevel(Enum):
    """Log levels for filtering."""
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class LogEntry:
    """A single log message with metadata."""
    text: str
    category: LogCategory
    turn: Optional[int] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def format(self, include_timestamp: bool = False, include_category: bool = True) -> str:
        """Format the message for display."""
        parts = []

        if include_timestamp:
            parts.append(f"[{self.timestamp.strftime('%H:%M:%S')}]")

        if include_category:
            parts.append(f"[{CATEGORY_TAGS.get(self.category, '???')}]")

        if self.turn is not None:
            parts.append(f"T{self.turn}")

        parts.append(self.text)
        return " ".join(parts)


class LogManager:
    """Collects log lines from events and direct calls."""

    def __init__(
        self,
        event_manager: "EventManager",
        max_messages: int = 1000,
        default_level: LogLevel = LogLevel.INFO
    ):
        """Initialize the log manager.

        Args:
            event_manager: Event manager to listen on
            max_messages: Maximum number of messages kept in the buffer
            default_level: Default log level for filtering
        """
        self.messages: deque[LogEntry] = deque(maxlen=max_messages)
        self.log_level = default_level
        self.enabled_categories = set(LogCategory)
        self.event_manager = event_manager

        # Categories hidden below their level
        self.category_levels = {
            LogCategory.DEBUG: LogLevel.DEBUG,
            LogCategory.TIMELINE: LogLevel.DEBUG,
            LogCategory.WARNING: LogLevel.WARNING,
            LogCategory.ERROR: LogLevel.ERROR,
        }

        self._setup_event_subscriptions()

    def _setup_event_subscriptions(self) -> None:
        subscriptions = [
            (EventType.LOG_MESSAGE, self._handle_log_message_event),
            (EventType.ENEMY_ACTION, self._handle_enemy_action),
            (EventType.ENEMY_DEFEATED, self._handle_enemy_defeated),
            (EventType.ARMOR_HIT, self._handle_armor_hit),
            (EventType.BOMB_EXPLODED, self._handle_bomb_exploded),
            (EventType.RAGE_APPLIED, self._handle_rage_applied),
        ]
        for event_type, handler in subscriptions:
            self.event_manager.subscribe(
                event_type, handler, subscriber_name=f"LogManager.{event_type.name.lower()}"
            )

    def _handle_log_message_event(self, event: "GameEvent") -> None:
        if not isinstance(event, LogEvent):
            return
        try:
            category = LogCategory[event.category.upper()]
        except (KeyError, AttributeError):
            category = LogCategory.SYSTEM
        self.log(f"[{event.source}] {event.message}", category, turn=event.turn)

    def _handle_enemy_action(self, event: "GameEvent") -> None:
        if isinstance(event, EnemyAction):
            label = INTENT_TYPE_NAMES[event.intent_type]
            self.battle(f"Incoming {label} {event.magnitude}", turn=event.turn)

    def _handle_enemy_defeated(self, event: "GameEvent") -> None:
        if isinstance(event, EnemyDefeated):
            self.battle(
                f"{SPECIES_NAMES[event.species]} destroyed at T{event.slot} "
                f"({KILL_CAUSE_NAMES[event.cause]})",
                turn=event.turn,
            )

    def _handle_armor_hit(self, event: "GameEvent") -> None:
        if isinstance(event, ArmorHit):
            self.battle(f"{SPECIES_NAMES[event.species]} shrugged it off", turn=event.turn)

    def _handle_bomb_exploded(self, event: "GameEvent") -> None:
        if isinstance(event, BombExploded):
            suffix = " (caught in the blast)" if event.chained else ""
            self.battle(f"Bomb exploded at T{event.slot}!{suffix}", turn=event.turn)

    def _handle_rage_applied(self, event: "GameEvent") -> None:
        if isinstance(event, RageApplied):
            self.log(
                f"Enemy rage +{event.amount} on {event.affected} intent(s)",
                LogCategory.ESCALATION,
                turn=event.turn,
            )

    def log(self, text: str, category: LogCategory = LogCategory.SYSTEM,
            turn: Optional[int] = None) -> None:
        """Add a message to the log."""
        self.messages.append(LogEntry(text=text, category=category, turn=turn))

    def system(self, text: str) -> None:
        self.log(text, LogCategory.SYSTEM)

    def battle(self, text: str, turn: Optional[int] = None) -> None:
        self.log(text, LogCategory.BATTLE, turn=turn)

    def timeline(self, text: str, turn: Optional[int] = None) -> None:
        self.log(text, LogCategory.TIMELINE, turn=turn)

    def debug(self, text: str) -> None:
        self.log(text, LogCategory.DEBUG)

    def warning(self, text: str) -> None:
        self.log(text, LogCategory.WARNING)

    def error(self, text: str) -> None:
        self.log(text, LogCategory.ERROR)

    def get_messages(self, count: Optional[int] = None,
                     categories: Optional[set[LogCategory]] = None) -> list[LogEntry]:
        """Get recent messages, optionally filtered by category.

        Args:
            count: Maximum number of messages to return (None for all)
            categories: Set of categories to include (None for all enabled)

        Returns:
            List of recent messages, oldest first
        """
        if categories:
            filtered = [msg for msg in self.messages
                        if msg.category in categories and msg.category in self.enabled_categories]
        else:
            filtered = []
            for msg in self.messages:
                if msg.category not in self.enabled_categories:
                    continue

                message_level = self.category_levels.get(msg.category, LogLevel.INFO)
                if message_level.value < self.log_level.value:
                    continue

                filtered.append(msg)

        if count is not None and count < len(filtered):
            return filtered[-count:]
        return filtered

    def get_toasts(self, count: int = 3) -> list[str]:
        """Latest battle lines formatted for on-screen notifications."""
        return [
            msg.format(include_category=False)
            for msg in self.get_messages(count, categories={LogCategory.BATTLE, LogCategory.ESCALATION})
        ]

    def clear(self) -> None:
        self.messages.clear()

    def enable_category(self, category: LogCategory) -> None:
        self.enabled_categories.add(category)

    def disable_category(self, category: LogCategory) -> None:
        self.enabled_categories.discard(category)

    def set_log_level(self, level: LogLevel) -> None:
        self.log_level = level

    def is_debug_enabled(self) -> bool:
        return (LogCategory.DEBUG in self.enabled_categories and
                self.log_level == LogLevel.DEBUG)

    def toggle_debug(self) -> None:
        """Toggle debug message visibility."""
        if self.is_debug_enabled():
            self.disable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.INFO)
        else:
            self.enable_category(LogCategory.DEBUG)
            self.set_log_level(LogLevel.DEBUG)

    def save_log_to_file(self, log_dir: str = "logs") -> Optional[str]:
        """Save all messages to a timestamped log file.

        Returns:
            Path of the written file, or None if saving failed
        """
        try:
            os.makedirs(log_dir, exist_ok=True)

            filename = f"log_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
            filepath = os.path.join(log_dir, filename)

            # Every buffered message is written, current filters are ignored
            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Card Rogue - Battle Log\n")
                f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
                f.write("=" * 60 + "\n\n")

                if not self.messages:
                    f.write("No messages to save.\n")
                for msg in self.messages:
                    f.write(msg.format(include_timestamp=True) + "\n")

            self.system(f"Battle log saved to {filepath}")
            return filepath

        except OSError as e:
            self.error(f"Failed to save log file: {e}")
            return None
