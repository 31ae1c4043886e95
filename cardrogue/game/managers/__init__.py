"""Managers reacting to timeline events.

- escalation_manager.py: Rage level and its per-turn application
- wave_manager.py: Scheduled reinforcements from an encounter
- log_manager.py: Categorized battle log and toast lines
"""

from .escalation_manager import EscalationManager
from .log_manager import LogCategory, LogEntry, LogLevel, LogManager
from .wave_manager import WaveManager

__all__ = [
    "EscalationManager",
    "LogCategory",
    "LogEntry",
    "LogLevel",
    "LogManager",
    "WaveManager",
]
