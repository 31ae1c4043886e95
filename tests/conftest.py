"""
Basic test fixtures for the cardrogue test suite.

Provides timelines, an event bus and an event recorder that drains the bus
and keeps everything that was published.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from cardrogue.core.events.event_manager import EventManager
from cardrogue.core.engine.timeline import Timeline


class EventRecorder:
    """Collects every event delivered by an EventManager."""

    def __init__(self, event_manager: EventManager):
        self.event_manager = event_manager
        self.received = []
        event_manager.subscribe_all(self.received.append, subscriber_name="EventRecorder")

    def events(self):
        """Deliver pending events and return everything seen so far."""
        self.event_manager.drain()
        return list(self.received)

    def of_type(self, event_type):
        return [event for event in self.events() if event.event_type == event_type]

    def types(self):
        return [event.event_type for event in self.events()]

    def reset(self):
        self.event_manager.drain()
        self.received.clear()


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager(enable_debug_logging=False)


@pytest.fixture
def timeline(event_manager):
    """Create a fresh five-slot timeline for testing."""
    return Timeline(slot_count=5, event_manager=event_manager)


@pytest.fixture
def short_timeline(event_manager):
    """Create a fresh four-slot timeline for testing."""
    return Timeline(slot_count=4, event_manager=event_manager)


@pytest.fixture
def recorder(event_manager):
    """Record every event published on the shared event manager."""
    return EventRecorder(event_manager)


@pytest.fixture
def encounters_dir():
    """Directory holding the bundled encounter files."""
    return os.path.join(project_root, "assets", "encounters")
