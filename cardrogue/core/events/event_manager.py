"""
Event bus connecting the timeline engine to its consumers.

The timeline publishes what happened (an intent resolved, a bomb went off,
armor deflected a hit) and never looks at who is listening. The orchestrator,
the log and any renderer subscribe here instead of being called directly.
"""

import itertools
import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


class EventPriority(Enum):
    """Event processing priorities (lower value is delivered first)."""
    CRITICAL = 1
    HIGH = 2
    NORMAL = 3
    LOW = 4


_sequence = itertools.count()


@dataclass
class QueuedEvent:
    """An event in the processing queue with metadata."""
    event: "GameEvent"
    priority: EventPriority = EventPriority.NORMAL
    timestamp: datetime = field(default_factory=datetime.now)
    source: Optional[str] = None  # For debugging
    sequence: int = field(default_factory=lambda: next(_sequence))

    def __lt__(self, other: "QueuedEvent") -> bool:
        """Compare events for priority queue ordering."""
        if self.priority.value != other.priority.value:
            return self.priority.value < other.priority.value
        # Same priority keeps publish order
        return self.sequence < other.sequence


EventSubscriber = Callable[["GameEvent"], None]


class EventManager:
    """Central event bus for timeline and manager communication."""

    def __init__(self, enable_debug_logging: bool = False, history_size: int = 1000):
        """Initialize the event manager.

        Args:
            enable_debug_logging: Whether to enable detailed event logging
            history_size: Number of processed events kept for inspection
        """
        self.enable_debug_logging = enable_debug_logging

        self._subscribers: dict["EventType", list[EventSubscriber]] = defaultdict(list)
        self._universal_subscribers: list[EventSubscriber] = []

        self._event_queue: deque[QueuedEvent] = deque()

        # Statistics and debugging
        self._events_published = 0
        self._events_processed = 0
        self._subscriber_errors = 0
        self._event_history: deque[QueuedEvent] = deque(maxlen=history_size)

        self._lock = threading.RLock()

        self._debug_callback: Optional[Callable[[str], None]] = None

    def set_debug_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        """Set a callback function for debug logging."""
        self._debug_callback = callback

    def _debug_log(self, message: str) -> None:
        if self.enable_debug_logging and self._debug_callback:
            self._debug_callback(f"[EVENT] {message}")

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of events to subscribe to
            subscriber: Callback function to handle events
            subscriber_name: Optional name for debugging
        """
        with self._lock:
            self._subscribers[event_type].append(subscriber)

            subscriber_display = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
            self._debug_log(f"Subscribed {subscriber_display} to {event_type.name} events")

    def subscribe_all(
        self,
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to every event type."""
        with self._lock:
            self._universal_subscribers.append(subscriber)

            subscriber_display = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
            self._debug_log(f"Subscribed {subscriber_display} to ALL events")

    def unsubscribe(self, event_type: "EventType", subscriber: EventSubscriber) -> bool:
        """Unsubscribe from events of a specific type.

        Returns:
            True if subscriber was found and removed
        """
        with self._lock:
            try:
                self._subscribers[event_type].remove(subscriber)
                self._debug_log(f"Unsubscribed from {event_type.name} events")
                return True
            except ValueError:
                return False

    def unsubscribe_all(self, subscriber: EventSubscriber) -> bool:
        """Remove a universal subscriber."""
        with self._lock:
            try:
                self._universal_subscribers.remove(subscriber)
                self._debug_log("Unsubscribed from ALL events")
                return True
            except ValueError:
                return False

    def publish(
        self,
        event: "GameEvent",
        priority: EventPriority = EventPriority.NORMAL,
        source: Optional[str] = None
    ) -> None:
        """Queue an event; subscribers see it on the next process_events call.

        Args:
            event: The event to publish
            priority: Processing priority for the event
            source: Optional source identifier for debugging
        """
        with self._lock:
            queued_event = QueuedEvent(
                event=event,
                priority=priority,
                source=source or "unknown"
            )

            self._event_queue.append(queued_event)
            self._events_published += 1

            self._debug_log(
                f"Published {event.__class__.__name__} "
                f"(priority: {priority.name}, source: {queued_event.source})"
            )

    def publish_immediate(self, event: "GameEvent", source: Optional[str] = None) -> None:
        """Publish and immediately deliver an event."""
        queued_event = QueuedEvent(
            event=event,
            priority=EventPriority.CRITICAL,
            source=source or "immediate"
        )
        with self._lock:
            self._events_published += 1

        self._process_event(queued_event)

    def process_events(self, max_events: Optional[int] = None) -> int:
        """Deliver queued events in priority order.

        Events published by subscribers while this runs are queued for the
        next call.

        Args:
            max_events: Maximum number of events to process (None for all)

        Returns:
            Number of events processed
        """
        processed_count = 0

        with self._lock:
            sorted_events = sorted(self._event_queue)
            self._event_queue.clear()

        for queued_event in sorted_events:
            if max_events is not None and processed_count >= max_events:
                # Put remaining events back in queue
                with self._lock:
                    self._event_queue.extendleft(reversed(sorted_events[processed_count:]))
                break

            self._process_event(queued_event)
            processed_count += 1

        return processed_count

    def drain(self, max_rounds: int = 100) -> int:
        """Process events until the queue stays empty.

        Subscribers that publish in response to events (managers reacting to
        an advance, for example) get their follow-up events delivered too.

        Returns:
            Total number of events processed
        """
        total = 0
        for _ in range(max_rounds):
            processed = self.process_events()
            if processed == 0:
                break
            total += processed
        return total

    def _process_event(self, queued_event: QueuedEvent) -> None:
        event = queued_event.event

        with self._lock:
            self._event_history.append(queued_event)
            self._events_processed += 1

        self._debug_log(
            f"Processing {event.__class__.__name__} from {queued_event.source} "
            f"(turn: {event.turn})"
        )

        subscribers = self._subscribers.get(event.event_type, [])

        # Slices guard against subscribers unsubscribing mid-delivery
        for subscriber in subscribers[:]:
            self._deliver(subscriber, event)

        for subscriber in self._universal_subscribers[:]:
            self._deliver(subscriber, event)

    def _deliver(self, subscriber: EventSubscriber, event: "GameEvent") -> None:
        try:
            subscriber(event)
        except Exception as e:
            with self._lock:
                self._subscriber_errors += 1
            self._debug_log(
                f"Error in subscriber {getattr(subscriber, '__name__', 'anonymous')}: {e}"
            )

    def clear_queue(self) -> int:
        """Clear all queued events.

        Returns:
            Number of events that were cleared
        """
        with self._lock:
            count = len(self._event_queue)
            self._event_queue.clear()
            self._debug_log(f"Cleared {count} queued events")
            return count

    def get_statistics(self) -> dict[str, Any]:
        with self._lock:
            return {
                'events_published': self._events_published,
                'events_processed': self._events_processed,
                'events_queued': len(self._event_queue),
                'subscriber_errors': self._subscriber_errors,
                'subscribers_count': sum(len(subs) for subs in self._subscribers.values()),
                'universal_subscribers_count': len(self._universal_subscribers),
                'event_history_size': len(self._event_history)
            }

    def get_recent_events(self, count: int = 10) -> list[dict[str, Any]]:
        """Get recent events for debugging.

        Args:
            count: Number of recent events to return

        Returns:
            List of event information dictionaries
        """
        with self._lock:
            recent = list(self._event_history)[-count:]

            return [
                {
                    'event_type': queued.event.__class__.__name__,
                    'turn': queued.event.turn,
                    'priority': queued.priority.name,
                    'source': queued.source,
                    'timestamp': queued.timestamp.isoformat()
                }
                for queued in recent
            ]

    def has_queued_events(self) -> bool:
        with self._lock:
            return len(self._event_queue) > 0

    def shutdown(self) -> None:
        """Drop all subscribers, queued events and history."""
        with self._lock:
            self._subscribers.clear()
            self._universal_subscribers.clear()
            self._event_queue.clear()
            self._event_history.clear()
            self._debug_log("Event manager shutdown complete")
