"""Encounter definitions and their YAML loader."""

from .encounter import Encounter, IntentPlacement, RageSettings, WaveSpawn
from .encounter_loader import EncounterLoader

__all__ = [
    "Encounter",
    "IntentPlacement",
    "RageSettings",
    "WaveSpawn",
    "EncounterLoader",
]
