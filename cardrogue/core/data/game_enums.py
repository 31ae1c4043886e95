"""Centralized game enums and constants.

This module contains the core enums shared by the engine, the event system
and the encounter loaders, providing a single source of truth.
"""

from enum import Enum, auto


class IntentType(Enum):
    """What an intent does when it resolves at the front slot."""
    ATTACK = auto()
    DEFEND = auto()


class Species(Enum):
    """Behavior tags for intents."""
    NORMAL = auto()
    ARMOR = auto()    # Immune to direct attacks
    BOMB = auto()     # Takes its neighbors with it
    SPEED = auto()    # Advances two slots per turn
    HACKER = auto()   # Corrupts the player's hand while on the track
    KING = auto()     # Boss tier, immune to nearly everything


class KillCause(Enum):
    """How an intent was purged from the timeline."""
    ATTACK = auto()     # Direct removal
    THUNDER = auto()    # Area effect
    CHAIN = auto()      # Neighbor of an exploding bomb
    PUSH_OFF = auto()   # Pushed past the back of the track
    COLLISION = auto()  # Forced move into an occupied slot


class Direction(Enum):
    """Forced movement directions along the track."""
    TOWARD_FRONT = -1
    TOWARD_BACK = 1


INTENT_TYPE_NAMES = {
    IntentType.ATTACK: "ATK",
    IntentType.DEFEND: "DEF",
}

SPECIES_NAMES = {
    Species.NORMAL: "Normal",
    Species.ARMOR: "Armor",
    Species.BOMB: "Bomb",
    Species.SPEED: "Speed",
    Species.HACKER: "Hacker",
    Species.KING: "King",
}

KILL_CAUSE_NAMES = {
    KillCause.ATTACK: "Attack",
    KillCause.THUNDER: "Thunder",
    KillCause.CHAIN: "Chain reaction",
    KillCause.PUSH_OFF: "Fell off the track",
    KillCause.COLLISION: "Collision",
}
