"""
Unit tests for the Timeline system.

Tests slot management, player effects (attack, thunder, stun, push/pull),
bomb chains and the boss immunities.
"""

import pytest

from cardrogue.core.data.game_enums import Direction, IntentType, KillCause, Species
from cardrogue.core.engine.timeline import Timeline
from cardrogue.core.events.event_manager import EventManager
from cardrogue.core.events.events import EventType


ATTACK = IntentType.ATTACK
DEFEND = IntentType.DEFEND


class TestTimelineBasics:
    """Test construction and read-only queries."""

    def test_timeline_creation(self, timeline):
        """Test timeline initialization."""
        assert timeline.slot_count == 5
        assert timeline.current_turn == 1
        assert timeline.is_empty
        assert timeline.intent_count == 0
        assert timeline.slots == (None,) * 5

    def test_default_slot_count(self):
        """Test the default track length and private event manager."""
        timeline = Timeline()
        assert timeline.slot_count == Timeline.DEFAULT_SLOT_COUNT
        assert isinstance(timeline.event_manager, EventManager)

    def test_invalid_slot_count(self):
        """Test that a track needs at least one slot."""
        with pytest.raises(ValueError):
            Timeline(slot_count=0)

    def test_queries_on_invalid_index(self, timeline):
        """Test that out-of-range lookups return nothing."""
        assert timeline.get_intent(-1) is None
        assert timeline.get_intent(5) is None
        assert not timeline.is_occupied(99)

    def test_occupied_slots(self, timeline):
        """Test occupied slot listing, front first."""
        timeline.spawn(3, ATTACK, 1)
        timeline.spawn(0, DEFEND, 2)

        assert timeline.occupied_slots() == [0, 3]
        assert timeline.intent_count == 2
        assert not timeline.is_empty


class TestSpawn:
    """Test placing intents."""

    def test_spawn(self, timeline, recorder):
        """Test spawning a fresh intent."""
        intent = timeline.spawn(2, ATTACK, 10, Species.BOMB)

        assert intent is not None
        assert timeline.get_intent(2) is intent
        assert intent.intent_type == ATTACK
        assert intent.magnitude == 10
        assert intent.species == Species.BOMB
        assert not intent.stunned

        spawned = recorder.of_type(EventType.INTENT_SPAWNED)
        assert len(spawned) == 1
        assert spawned[0].slot == 2
        assert spawned[0].replaced is None

    def test_spawn_defaults_to_normal(self, timeline):
        """Test the default species."""
        assert timeline.spawn(0, DEFEND, 3).species == Species.NORMAL

    @pytest.mark.parametrize("index", [-1, 5, 100])
    def test_spawn_out_of_range_is_noop(self, timeline, recorder, index):
        """Test that invalid spawns are ignored silently."""
        assert timeline.spawn(index, ATTACK, 10) is None
        assert timeline.is_empty
        assert recorder.events() == []

    def test_spawn_overwrites_without_defeat(self, timeline, recorder):
        """Test that overwriting bypasses immunity and counts no kill."""
        king = timeline.spawn(1, ATTACK, 50, Species.KING)
        recorder.reset()

        newcomer = timeline.spawn(1, DEFEND, 4)

        assert timeline.get_intent(1) is newcomer
        assert recorder.of_type(EventType.ENEMY_DEFEATED) == []
        assert recorder.of_type(EventType.ARMOR_HIT) == []
        assert recorder.of_type(EventType.INTENT_SPAWNED)[0].replaced is king

    def test_spawn_overwriting_bomb_does_not_explode(self, timeline, recorder):
        """Test that a replaced bomb takes nobody with it."""
        timeline.spawn(1, ATTACK, 1)
        timeline.spawn(2, ATTACK, 1, Species.BOMB)
        timeline.spawn(3, ATTACK, 1)

        timeline.spawn(2, ATTACK, 7)

        assert timeline.occupied_slots() == [1, 2, 3]
        assert recorder.of_type(EventType.BOMB_EXPLODED) == []


class TestRemoveIntent:
    """Test direct attacks."""

    def test_remove_normal(self, timeline, recorder):
        """Test destroying an ordinary intent."""
        timeline.spawn(2, ATTACK, 10)

        assert timeline.remove_intent(2)
        assert timeline.get_intent(2) is None

        defeated = recorder.of_type(EventType.ENEMY_DEFEATED)
        assert len(defeated) == 1
        assert defeated[0].slot == 2
        assert defeated[0].cause == KillCause.ATTACK

    def test_remove_empty_and_invalid(self, timeline, recorder):
        """Test that empty or invalid slots are silent no-ops."""
        assert not timeline.remove_intent(0)
        assert not timeline.remove_intent(-1)
        assert not timeline.remove_intent(5)
        assert recorder.events() == []

    @pytest.mark.parametrize("species", [Species.ARMOR, Species.KING])
    def test_remove_rejected_by_immunity(self, timeline, recorder, species):
        """Test that armor and boss ignore direct attacks."""
        intent = timeline.spawn(2, ATTACK, 10, species)
        recorder.reset()

        assert not timeline.remove_intent(2)
        assert timeline.get_intent(2) is intent

        hits = recorder.of_type(EventType.ARMOR_HIT)
        assert len(hits) == 1
        assert hits[0].species == species
        assert recorder.of_type(EventType.ENEMY_DEFEATED) == []
        assert len(recorder.of_type(EventType.INTENT_JITTERED)) == 1

    @pytest.mark.parametrize("species", [Species.SPEED, Species.HACKER])
    def test_remove_other_species(self, timeline, species):
        """Test that only armor and boss are protected."""
        timeline.spawn(1, ATTACK, 3, species)
        assert timeline.remove_intent(1)
        assert timeline.is_empty


class TestBombChain:
    """Test bomb chain reactions."""

    def test_bomb_takes_both_neighbors(self, timeline, recorder):
        """Test the basic chain reaction and its event order."""
        timeline.spawn(1, ATTACK, 1)
        timeline.spawn(2, ATTACK, 1, Species.BOMB)
        timeline.spawn(3, ATTACK, 1)
        recorder.reset()

        timeline.remove_intent(2)

        events = [
            (e.event_type, getattr(e, "slot", None))
            for e in recorder.events()
        ]
        assert events == [
            (EventType.ENEMY_DEFEATED, 2),
            (EventType.BOMB_EXPLODED, 2),
            (EventType.ENEMY_DEFEATED, 1),
            (EventType.ENEMY_DEFEATED, 3),
        ]
        assert timeline.is_empty

        causes = [e.cause for e in recorder.of_type(EventType.ENEMY_DEFEATED)]
        assert causes == [KillCause.ATTACK, KillCause.CHAIN, KillCause.CHAIN]

    def test_bomb_kills_armored_neighbor(self, timeline, recorder):
        """Test that armor does not protect against a blast."""
        timeline.spawn(1, ATTACK, 1, Species.ARMOR)
        timeline.spawn(2, ATTACK, 1, Species.BOMB)

        timeline.remove_intent(2)

        assert timeline.is_empty
        assert recorder.of_type(EventType.ARMOR_HIT) == []

    def test_bomb_spares_king_neighbor(self, timeline, recorder):
        """Test that the boss survives a blast and only jitters."""
        king = timeline.spawn(3, ATTACK, 30, Species.KING)
        timeline.spawn(2, ATTACK, 1, Species.BOMB)
        recorder.reset()

        timeline.remove_intent(2)

        assert timeline.get_intent(3) is king
        assert len(recorder.of_type(EventType.ENEMY_DEFEATED)) == 1
        assert recorder.of_type(EventType.ARMOR_HIT) == []
        jitters = recorder.of_type(EventType.INTENT_JITTERED)
        assert [j.slot for j in jitters] == [3]

    def test_bomb_at_track_edges(self, timeline, recorder):
        """Test that edge bombs only have one neighbor."""
        timeline.spawn(0, ATTACK, 1, Species.BOMB)
        timeline.spawn(1, ATTACK, 1)
        timeline.spawn(4, ATTACK, 1, Species.BOMB)
        timeline.spawn(3, ATTACK, 1)

        timeline.remove_intent(0)
        timeline.remove_intent(4)

        assert timeline.is_empty
        assert len(recorder.of_type(EventType.ENEMY_DEFEATED)) == 4
        assert len(recorder.of_type(EventType.BOMB_EXPLODED)) == 2

    def test_chain_stops_after_one_hop(self, timeline, recorder):
        """Test that a bomb caught in a blast does not explode further."""
        timeline.spawn(0, ATTACK, 1)
        timeline.spawn(1, ATTACK, 1, Species.BOMB)
        timeline.spawn(2, ATTACK, 1, Species.BOMB)
        timeline.spawn(3, ATTACK, 1)

        timeline.remove_intent(2)

        # Slot 0 survives: the bomb at 1 died in the blast and did not chain
        assert timeline.occupied_slots() == [0]

        explosions = recorder.of_type(EventType.BOMB_EXPLODED)
        assert [(e.slot, e.chained) for e in explosions] == [(2, False), (1, True)]
        assert len(recorder.of_type(EventType.ENEMY_DEFEATED)) == 3

    def test_lone_bomb(self, timeline, recorder):
        """Test a bomb with no neighbors."""
        timeline.spawn(2, ATTACK, 1, Species.BOMB)

        timeline.remove_intent(2)

        assert len(recorder.of_type(EventType.ENEMY_DEFEATED)) == 1
        assert len(recorder.of_type(EventType.BOMB_EXPLODED)) == 1


class TestThunder:
    """Test the three-slot area effect."""

    def test_thunder_hits_three_slots(self, timeline, recorder):
        """Test that thunder clears the slot and its neighbors."""
        for slot in range(5):
            timeline.spawn(slot, ATTACK, slot + 1)

        assert timeline.thunder_intent(2) == 3

        assert timeline.occupied_slots() == [0, 4]
        causes = {e.cause for e in recorder.of_type(EventType.ENEMY_DEFEATED)}
        assert causes == {KillCause.THUNDER}

    def test_thunder_clamps_at_edges(self, timeline):
        """Test thunder at the front and back slots."""
        for slot in range(5):
            timeline.spawn(slot, ATTACK, 1)

        assert timeline.thunder_intent(0) == 2
        assert timeline.occupied_slots() == [2, 3, 4]

        assert timeline.thunder_intent(4) == 2
        assert timeline.occupied_slots() == [2]

    def test_thunder_out_of_range_is_noop(self, timeline, recorder):
        """Test that an invalid center does nothing."""
        timeline.spawn(4, ATTACK, 1)
        recorder.reset()

        assert timeline.thunder_intent(5) == 0
        assert timeline.thunder_intent(-1) == 0
        assert timeline.occupied_slots() == [4]
        assert recorder.events() == []

    def test_thunder_breaks_armor(self, timeline, recorder):
        """Test that thunder destroys armored intents."""
        timeline.spawn(2, DEFEND, 8, Species.ARMOR)

        assert timeline.thunder_intent(2) == 1
        assert timeline.is_empty
        assert recorder.of_type(EventType.ARMOR_HIT) == []

    def test_thunder_spares_king(self, timeline, recorder):
        """Test that the boss is unaffected by thunder."""
        king = timeline.spawn(2, ATTACK, 40, Species.KING)
        timeline.spawn(3, ATTACK, 1)

        assert timeline.thunder_intent(2) == 1

        assert timeline.get_intent(2) is king
        assert timeline.get_intent(3) is None
        hits = recorder.of_type(EventType.ARMOR_HIT)
        assert [(h.slot, h.species) for h in hits] == [(2, Species.KING)]

    def test_thunder_on_bomb_counts_direct_hits_only(self, timeline, recorder):
        """Test a bomb in the strike zone clearing slots before thunder reaches them."""
        timeline.spawn(1, ATTACK, 1, Species.BOMB)
        timeline.spawn(2, ATTACK, 1)
        timeline.spawn(3, ATTACK, 1)

        # The bomb at 1 dies first and its blast takes slot 2
        assert timeline.thunder_intent(2) == 2

        assert timeline.is_empty
        assert len(recorder.of_type(EventType.ENEMY_DEFEATED)) == 3


class TestStun:
    """Test stunning intents."""

    def test_stun(self, timeline, recorder):
        """Test stunning an ordinary intent."""
        intent = timeline.spawn(3, ATTACK, 5)

        assert timeline.stun_intent(3)
        assert intent.stunned
        assert len(recorder.of_type(EventType.INTENT_STUNNED)) == 1

    def test_stun_empty_is_noop(self, timeline, recorder):
        """Test stunning nothing."""
        assert not timeline.stun_intent(3)
        assert not timeline.stun_intent(10)
        assert recorder.events() == []

    def test_stun_king_is_rejected(self, timeline, recorder):
        """Test that the boss cannot be stunned."""
        king = timeline.spawn(1, ATTACK, 20, Species.KING)

        assert not timeline.stun_intent(1)
        assert not king.stunned

        hits = recorder.of_type(EventType.ARMOR_HIT)
        assert [h.species for h in hits] == [Species.KING]

    def test_stun_armor_works(self, timeline):
        """Test that armor does not protect against stun."""
        armor = timeline.spawn(1, ATTACK, 20, Species.ARMOR)
        assert timeline.stun_intent(1)
        assert armor.stunned


class TestForcedMovement:
    """Test push and pull."""

    def test_push_into_empty_slot(self, timeline, recorder):
        """Test that the same intent relocates unchanged."""
        intent = timeline.spawn(1, ATTACK, 10, Species.SPEED)
        intent.set_stun(True)

        assert timeline.try_move_intent(1, 1)

        assert timeline.get_intent(1) is None
        moved = timeline.get_intent(2)
        assert moved is intent
        assert moved.magnitude == 10
        assert moved.species == Species.SPEED
        assert moved.stunned

        events = recorder.of_type(EventType.INTENT_MOVED)
        assert [(e.from_slot, e.to_slot) for e in events] == [(1, 2)]

    def test_pull_with_direction_enum(self, timeline):
        """Test pulling toward the front using the Direction enum."""
        intent = timeline.spawn(3, DEFEND, 2)

        assert timeline.try_move_intent(3, Direction.TOWARD_FRONT)
        assert timeline.get_intent(2) is intent

    def test_push_off_the_back(self, timeline, recorder):
        """Test that pushing past the last slot destroys the intent."""
        timeline.spawn(4, ATTACK, 10)

        assert timeline.try_move_intent(4, 1)

        assert timeline.is_empty
        defeated = recorder.of_type(EventType.ENEMY_DEFEATED)
        assert len(defeated) == 1
        assert defeated[0].cause == KillCause.PUSH_OFF

    def test_push_king_off_the_back(self, timeline):
        """Test that even the boss falls off the track."""
        timeline.spawn(4, ATTACK, 10, Species.KING)

        assert timeline.try_move_intent(4, Direction.TOWARD_BACK)
        assert timeline.is_empty

    def test_push_bomb_off_the_back_explodes(self, timeline, recorder):
        """Test that a bomb falling off still takes its neighbor."""
        timeline.spawn(3, ATTACK, 1)
        timeline.spawn(4, ATTACK, 1, Species.BOMB)

        timeline.try_move_intent(4, 1)

        assert timeline.is_empty
        assert len(recorder.of_type(EventType.BOMB_EXPLODED)) == 1

    def test_pull_past_front_is_noop(self, timeline, recorder):
        """Test that the front intent cannot be pulled further."""
        intent = timeline.spawn(0, ATTACK, 10)
        recorder.reset()

        assert not timeline.try_move_intent(0, -1)
        assert timeline.get_intent(0) is intent
        assert recorder.events() == []

    @pytest.mark.parametrize("index,direction", [(2, 1), (9, 1), (-1, 1), (2, 0), (2, 2), (2, -3)])
    def test_invalid_moves_are_noops(self, timeline, recorder, index, direction):
        """Test empty sources, invalid indices and invalid directions."""
        timeline.spawn(1, ATTACK, 1)
        timeline.spawn(3, ATTACK, 1)
        recorder.reset()

        assert not timeline.try_move_intent(index, direction)
        assert timeline.occupied_slots() == [1, 3]
        assert recorder.events() == []

    def test_collision_destroys_both(self, timeline, recorder):
        """Test mutual destruction with a camera shake."""
        timeline.spawn(1, ATTACK, 1)
        timeline.spawn(2, DEFEND, 1, Species.ARMOR)

        assert timeline.try_move_intent(1, 1)

        assert timeline.is_empty
        defeated = recorder.of_type(EventType.ENEMY_DEFEATED)
        assert [(e.slot, e.cause) for e in defeated] == [
            (1, KillCause.COLLISION),
            (2, KillCause.COLLISION),
        ]
        assert len(recorder.of_type(EventType.CAMERA_SHAKE)) == 1

    def test_king_crushes_through(self, timeline, recorder):
        """Test that a moving boss destroys what is in its way and stays put."""
        king = timeline.spawn(2, ATTACK, 30, Species.KING)
        timeline.spawn(1, ATTACK, 5, Species.ARMOR)

        assert timeline.try_move_intent(2, -1)

        assert timeline.get_intent(2) is king
        assert timeline.get_intent(1) is None
        defeated = recorder.of_type(EventType.ENEMY_DEFEATED)
        assert [(e.slot, e.species) for e in defeated] == [(1, Species.ARMOR)]
        assert recorder.of_type(EventType.CAMERA_SHAKE) == []

    def test_king_is_a_wall(self, timeline, recorder):
        """Test that pushing into the boss destroys the mover."""
        timeline.spawn(1, ATTACK, 5)
        king = timeline.spawn(2, ATTACK, 30, Species.KING)

        assert timeline.try_move_intent(1, 1)

        assert timeline.get_intent(1) is None
        assert timeline.get_intent(2) is king
        jitters = recorder.of_type(EventType.INTENT_JITTERED)
        assert [j.slot for j in jitters] == [2]

    def test_king_against_king_mover_wins(self, timeline, recorder):
        """Test that a moving boss destroys a boss in its way."""
        mover = timeline.spawn(3, ATTACK, 30, Species.KING)
        timeline.spawn(2, ATTACK, 30, Species.KING)

        assert timeline.try_move_intent(3, -1)

        assert timeline.get_intent(3) is mover
        assert timeline.get_intent(2) is None
        defeated = recorder.of_type(EventType.ENEMY_DEFEATED)
        assert [(e.slot, e.species) for e in defeated] == [(2, Species.KING)]

    def test_bomb_collision_chains(self, timeline, recorder):
        """Test a mover bomb colliding and blowing up its other neighbor too."""
        timeline.spawn(0, ATTACK, 1)
        timeline.spawn(1, ATTACK, 1, Species.BOMB)
        timeline.spawn(2, ATTACK, 1)

        timeline.try_move_intent(1, 1)

        assert timeline.is_empty
        assert len(recorder.of_type(EventType.ENEMY_DEFEATED)) == 3
        assert len(recorder.of_type(EventType.BOMB_EXPLODED)) == 1


class TestRage:
    """Test magnitude escalation."""

    def test_apply_rage(self, timeline, recorder):
        """Test that every intent gets exactly the rage amount."""
        a = timeline.spawn(0, ATTACK, 10)
        b = timeline.spawn(3, DEFEND, 0, Species.KING)

        assert timeline.apply_rage(3) == 2

        assert a.magnitude == 13
        assert b.magnitude == 3
        assert a.intent_type == ATTACK and b.species == Species.KING
        rage = recorder.of_type(EventType.RAGE_APPLIED)
        assert [(r.amount, r.affected) for r in rage] == [(3, 2)]

    def test_rage_compounds(self, timeline):
        """Test repeated rage keeps adding to current magnitudes."""
        intent = timeline.spawn(2, ATTACK, 1)

        timeline.apply_rage(1)
        timeline.apply_rage(2)

        assert intent.magnitude == 4

    def test_rage_on_empty_track(self, timeline, recorder):
        """Test that rage with nothing on the track is a no-op."""
        assert timeline.apply_rage(5) == 0
        assert recorder.events() == []

    @pytest.mark.parametrize("amount", [0, -3])
    def test_non_positive_rage_is_noop(self, timeline, recorder, amount):
        """Test that magnitudes never go down."""
        intent = timeline.spawn(1, ATTACK, 7)
        recorder.reset()

        assert timeline.apply_rage(amount) == 0
        assert intent.magnitude == 7
        assert recorder.events() == []


class TestHackerQuery:
    """Test hand corruption detection."""

    def test_has_hacker(self, timeline, recorder):
        """Test the hacker flag follows the track contents."""
        assert not timeline.has_hacker()

        timeline.spawn(2, ATTACK, 1, Species.HACKER)
        assert timeline.has_hacker()

        timeline.remove_intent(2)
        assert not timeline.has_hacker()

    def test_has_hacker_has_no_side_effects(self, timeline, recorder):
        """Test the query publishes nothing."""
        timeline.spawn(2, ATTACK, 1, Species.HACKER)
        recorder.reset()

        timeline.has_hacker()
        assert recorder.events() == []


class TestSnapshots:
    """Test render snapshots, stats and clearing."""

    def test_to_array(self, timeline):
        """Test the numpy snapshot layout."""
        timeline.spawn(1, DEFEND, 6, Species.ARMOR)
        timeline.spawn(3, ATTACK, 9)
        timeline.stun_intent(3)

        snapshot = timeline.to_array()

        assert snapshot.shape == (5,)
        assert snapshot["occupied"].tolist() == [False, True, False, True, False]
        assert snapshot["magnitude"].tolist() == [0, 6, 0, 9, 0]
        assert snapshot["species"][1] == Species.ARMOR.value
        assert snapshot["intent_type"][3] == IntentType.ATTACK.value
        assert snapshot["stunned"].tolist() == [False, False, False, True, False]

    def test_get_stats(self, timeline):
        """Test debugging statistics."""
        timeline.spawn(0, ATTACK, 4, Species.HACKER)
        timeline.spawn(2, ATTACK, 6)

        stats = timeline.get_stats()
        assert stats["occupied"] == 2
        assert stats["total_magnitude"] == 10
        assert stats["species"] == {"HACKER": 1, "NORMAL": 1}
        assert stats["has_hacker"]

    def test_clear(self, timeline):
        """Test clearing the track."""
        timeline.spawn(0, ATTACK, 4)
        timeline.advance_timeline()

        timeline.clear()

        assert timeline.is_empty
        assert timeline.current_turn == 1
