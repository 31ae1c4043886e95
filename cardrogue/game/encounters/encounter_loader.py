import os
from pathlib import Path
from typing import Any

import yaml

from ...core.data.game_enums import IntentType, Species
from ...core.engine.timeline import Timeline
from .encounter import Encounter, IntentPlacement, RageSettings, WaveSpawn


class EncounterLoader:
    """Handles loading encounters from YAML files."""

    @staticmethod
    def load_from_file(file_path: str) -> Encounter:
        """Load an encounter from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the YAML is malformed or describes an invalid encounter
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Encounter file not found: {file_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML encounter {file_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Encounter file {file_path} must contain a mapping")

        encounter = EncounterLoader.load_from_dict(data)
        encounter.source_path = str(Path(file_path))
        return encounter

    @staticmethod
    def load_from_dict(data: dict[str, Any]) -> Encounter:
        """Build an encounter from already-parsed data."""
        slot_count = int(data.get("slot_count", Timeline.DEFAULT_SLOT_COUNT))
        if slot_count < 1:
            raise ValueError(f"slot_count must be at least 1, got {slot_count}")

        rage_data = data.get("rage") or {}
        rage = RageSettings(
            initial=int(rage_data.get("initial", 0)),
            growth=int(rage_data.get("growth", 1)),
        )
        if rage.initial < 0 or rage.growth < 0:
            raise ValueError("Rage settings must not be negative")

        intents = [
            EncounterLoader._parse_placement(entry, slot_count)
            for entry in data.get("intents") or []
        ]
        taken = [placement.slot for placement in intents]
        duplicates = sorted({slot for slot in taken if taken.count(slot) > 1})
        if duplicates:
            raise ValueError(f"Several intents placed on slot(s) {duplicates}")

        waves = []
        for entry in data.get("waves") or []:
            if "turn" not in entry:
                raise ValueError(f"Wave entry is missing 'turn': {entry}")
            turn = int(entry["turn"])
            if turn < 1:
                raise ValueError(f"Wave turn must be at least 1, got {turn}")
            waves.append(WaveSpawn(turn=turn, placement=EncounterLoader._parse_placement(entry, slot_count)))

        return Encounter(
            name=data.get("name", "Unnamed Encounter"),
            description=data.get("description", ""),
            slot_count=slot_count,
            rage=rage,
            intents=intents,
            waves=waves,
        )

    @staticmethod
    def _parse_placement(entry: dict[str, Any], slot_count: int) -> IntentPlacement:
        try:
            slot = int(entry["slot"])
            intent_type = IntentType[str(entry.get("action", "ATTACK")).upper()]
            species = Species[str(entry.get("species", "NORMAL")).upper()]
            magnitude = int(entry.get("magnitude", 0))
        except KeyError as e:
            raise ValueError(f"Invalid intent entry {entry}: unknown or missing {e}")

        if not 0 <= slot < slot_count:
            raise ValueError(f"Slot {slot} is outside a {slot_count}-slot timeline")
        if magnitude < 0:
            raise ValueError(f"Magnitude must not be negative, got {magnitude}")

        return IntentPlacement(slot=slot, intent_type=intent_type, magnitude=magnitude, species=species)

    @staticmethod
    def list_encounters(directory: str) -> list[str]:
        """List encounter YAML files in a directory, sorted by name."""
        if not os.path.isdir(directory):
            return []
        return sorted(
            os.path.join(directory, filename)
            for filename in os.listdir(directory)
            if filename.endswith((".yaml", ".yml"))
        )
