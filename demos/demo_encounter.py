#!/usr/bin/env python3

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cardrogue.core.data.game_enums import Direction, INTENT_TYPE_NAMES, IntentType
from cardrogue.core.events.event_manager import EventManager
from cardrogue.core.events.events import EnemyAction, EnemyDefeated, EventType
from cardrogue.game.encounters.encounter_loader import EncounterLoader
from cardrogue.game.managers.escalation_manager import EscalationManager
from cardrogue.game.managers.log_manager import LogManager
from cardrogue.game.managers.wave_manager import WaveManager


ENCOUNTER_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
                             "assets", "encounters")


def render(timeline) -> str:
    """One line per turn: ``T0[ATK 10] T1[    ] ...``."""
    cells = []
    for i, intent in enumerate(timeline.slots):
        cells.append(f"T{i}[{intent.describe() if intent else '':^16}]")
    return " ".join(cells)


def main():
    encounter_path = sys.argv[1] if len(sys.argv) > 1 else os.path.join(ENCOUNTER_DIR, "kings_court.yaml")
    encounter = EncounterLoader.load_from_file(encounter_path)

    event_manager = EventManager()
    timeline = encounter.build_timeline(event_manager)
    log = LogManager(event_manager)
    EscalationManager.from_settings(timeline, event_manager, encounter.rage)
    waves = WaveManager(timeline, event_manager, encounter)

    player = {"hp": 50, "block": 0, "kills": 0}

    def on_enemy_action(event):
        assert isinstance(event, EnemyAction)
        if event.intent_type == IntentType.ATTACK:
            absorbed = min(player["block"], event.magnitude)
            player["block"] -= absorbed
            player["hp"] -= event.magnitude - absorbed

    def on_enemy_defeated(event):
        assert isinstance(event, EnemyDefeated)
        player["kills"] += 1

    event_manager.subscribe(EventType.ENEMY_ACTION, on_enemy_action)
    event_manager.subscribe(EventType.ENEMY_DEFEATED, on_enemy_defeated)

    print(f"{encounter.name}: {encounter.description}")
    print("")

    # Scripted player turns: (label, operation)
    script = [
        ("Attack T1", lambda: timeline.remove_intent(1)),
        ("Thunder T1", lambda: timeline.thunder_intent(1)),
        ("Stun T2", lambda: timeline.stun_intent(2)),
        ("Push T3", lambda: timeline.try_move_intent(3, Direction.TOWARD_BACK)),
        ("Pull T2", lambda: timeline.try_move_intent(2, Direction.TOWARD_FRONT)),
        ("Attack T0", lambda: timeline.remove_intent(0)),
    ]

    for label, play in script:
        turn = timeline.current_turn
        print(render(timeline))
        hacked = " (hand corrupted)" if timeline.has_hacker() else ""
        print(f"Turn {turn}: player plays {label}{hacked}")
        play()
        event_manager.drain()

        timeline.advance_timeline()
        event_manager.drain()

        for line in log.get_toasts(count=5):
            print(f"  {line}")
        log.clear()
        print(f"  HP {player['hp']}  kills {player['kills']}")
        print("")

        if player["hp"] <= 0:
            print("Defeat.")
            break
        if timeline.is_empty and waves.remaining_waves == 0:
            print("Victory!")
            break

    print(render(timeline))
    snapshot = timeline.to_array()
    print(f"Remaining magnitude on the track: {int(snapshot['magnitude'].sum())}")
    labels = [INTENT_TYPE_NAMES[i.intent_type] for i in timeline.slots if i is not None]
    print(f"Still waiting: {', '.join(labels) or 'nothing'}")


if __name__ == "__main__":
    main()
