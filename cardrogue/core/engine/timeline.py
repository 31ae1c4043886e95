"""Slot-based timeline simulation.

This module implements the track hostile intents walk down each turn. The
timeline is a fixed row of slots; slot 0 is the front, where an intent
resolves its action against the player, and the highest index is where new
intents usually appear.

Core Concepts:
- Each slot holds zero or one Intent; an intent only exists inside a slot
- Player effects (attack, thunder, stun, push/pull) mutate the slots directly
- advance_timeline() resolves the front slot and walks everyone else forward
- Species rules (step size, immunities, explosions) come from the behavior
  table in ``core.data.species``
- Every observable outcome is published as an event; the timeline never
  knows who renders or scores it

All operations are synchronous and finish before returning. Invalid indices
and empty slots are silent no-ops.
"""

from __future__ import annotations

from typing import Any, Optional, Union

import numpy as np
from numpy.typing import NDArray

from ..data.game_enums import Direction, IntentType, KillCause, Species
from ..entities.intent import Intent
from ..events.event_manager import EventManager
from ..events.events import (
    ArmorHit,
    BombExploded,
    CameraShake,
    EnemyAction,
    EnemyDefeated,
    GameEvent,
    IntentJittered,
    IntentMoved,
    IntentSpawned,
    IntentStunned,
    RageApplied,
    TimelineAdvanced,
)


# Render snapshot layout: one record per slot, 0 species/type codes for empty
SLOT_DTYPE = np.dtype([
    ("occupied", np.bool_),
    ("species", np.uint8),
    ("intent_type", np.uint8),
    ("magnitude", np.int32),
    ("stunned", np.bool_),
])


class Timeline:
    """Fixed-capacity track of intent slots.

    The Timeline owns every intent on the track and is the only thing that
    creates, moves or destroys them. It publishes domain events
    (EnemyAction, EnemyDefeated, ArmorHit, BombExploded) for the orchestrator
    and presentation hooks (jitter, camera shake, moves) for renderers.

    Key Features:
    - Direct attacks bounce off armored and boss intents
    - Thunder hits three adjacent slots and only the boss shrugs it off
    - Bombs take both neighbors with them, exactly one hop deep
    - Forced moves off the back of the track destroy the intent, and
      forced moves into an occupied slot destroy both parties unless a
      boss is involved
    - Turn advance queues intents instead of letting them overlap
    """

    DEFAULT_SLOT_COUNT = 5

    def __init__(self, slot_count: int = DEFAULT_SLOT_COUNT,
                 event_manager: Optional[EventManager] = None):
        if slot_count < 1:
            raise ValueError(f"Timeline needs at least one slot, got {slot_count}")

        self._slot_count = slot_count
        self._slots: list[Optional[Intent]] = [None] * slot_count
        self._current_turn: int = 1
        self.event_manager = event_manager or EventManager()

    @property
    def slot_count(self) -> int:
        return self._slot_count

    @property
    def current_turn(self) -> int:
        """The turn in progress; advance_timeline() closes it."""
        return self._current_turn

    @property
    def slots(self) -> tuple[Optional[Intent], ...]:
        """Read-only view of the slot contents, front first."""
        return tuple(self._slots)

    @property
    def intent_count(self) -> int:
        return sum(1 for intent in self._slots if intent is not None)

    @property
    def is_empty(self) -> bool:
        return all(intent is None for intent in self._slots)

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < self._slot_count

    def get_intent(self, index: int) -> Optional[Intent]:
        """Get the intent in a slot, or None for empty or invalid slots."""
        if not self.is_valid_index(index):
            return None
        return self._slots[index]

    def is_occupied(self, index: int) -> bool:
        return self.get_intent(index) is not None

    def occupied_slots(self) -> list[int]:
        """Indices of occupied slots, front first."""
        return [i for i, intent in enumerate(self._slots) if intent is not None]

    def has_hacker(self) -> bool:
        """Check whether any intent on the track corrupts the player's hand."""
        return any(
            intent is not None and intent.behavior.corrupts_hand
            for intent in self._slots
        )

    # Player-facing operations

    def spawn(self,
              index: int,
              intent_type: IntentType,
              magnitude: int,
              species: Species = Species.NORMAL) -> Optional[Intent]:
        """Place a new intent in a slot.

        An existing occupant is discarded outright: no immunity checks, no
        chain reaction and no defeat is counted.

        Args:
            index: Target slot
            intent_type: What the intent does at the front
            magnitude: Damage or defend value
            species: Behavior tag

        Returns:
            The new intent, or None if the index is out of range
        """
        if not self.is_valid_index(index):
            return None

        replaced = self._slots[index]
        intent = Intent(intent_type=intent_type, magnitude=magnitude, species=species)
        self._slots[index] = intent

        self._publish(IntentSpawned(
            turn=self._current_turn, slot=index, intent=intent, replaced=replaced
        ))
        return intent

    def remove_intent(self, index: int) -> bool:
        """Attack a single slot.

        Returns:
            True if an intent was destroyed
        """
        intent = self.get_intent(index)
        if intent is None:
            return False

        if not intent.behavior.removable:
            self._reject(index, intent)
            return False

        return self._kill(index, KillCause.ATTACK)

    def thunder_intent(self, index: int) -> int:
        """Strike a slot and both of its neighbors.

        Thunder ignores armor; only the boss tier is immune. Slots are hit
        front to back, so an exploding bomb may already have cleared a slot
        before thunder reaches it.

        Returns:
            Number of intents destroyed directly by the strike
        """
        if not self.is_valid_index(index):
            return 0

        destroyed = 0
        for slot in (index - 1, index, index + 1):
            intent = self.get_intent(slot)
            if intent is None:
                continue

            if intent.behavior.thunder_immune:
                self._reject(slot, intent)
                continue

            if self._kill(slot, KillCause.THUNDER):
                destroyed += 1

        return destroyed

    def stun_intent(self, index: int) -> bool:
        """Stun an intent so it skips its next movement.

        Returns:
            True if the intent is now stunned
        """
        intent = self.get_intent(index)
        if intent is None:
            return False

        if intent.behavior.stun_immune:
            self._reject(index, intent)
            return False

        intent.set_stun(True)
        self._publish(IntentStunned(
            turn=self._current_turn, slot=index, species=intent.species
        ))
        return True

    def try_move_intent(self, index: int, direction: Union[int, Direction]) -> bool:
        """Push (+1, toward the back) or pull (-1, toward the front) an intent.

        - Past the back of the track: the intent falls off and is destroyed
        - Past the front: nothing happens
        - Into an occupied slot: a crushing species (the boss) destroys
          whatever is in the way, or is the wall that destroys the mover;
          otherwise both intents are destroyed
        - Into an empty slot: the same intent relocates

        Returns:
            True if anything changed on the track
        """
        step = direction.value if isinstance(direction, Direction) else direction
        if step not in (-1, 1):
            return False

        mover = self.get_intent(index)
        if mover is None:
            return False

        target_index = index + step

        if target_index >= self._slot_count:
            return self._kill(index, KillCause.PUSH_OFF)

        if target_index < 0:
            return False

        occupant = self._slots[target_index]
        if occupant is not None:
            self._collide(index, mover, target_index, occupant)
            return True

        self._slots[target_index] = mover
        self._slots[index] = None
        self._publish(IntentMoved(
            turn=self._current_turn, from_slot=index, to_slot=target_index, intent=mover
        ))
        return True

    # Turn cycle

    def advance_timeline(self) -> Optional[EnemyAction]:
        """Close the current turn.

        1. The front intent resolves (or, if stunned, loses its stun and
           stays put without acting).
        2. Every other intent walks toward the front by its species step;
           stunned intents stand still and lose their stun.
        3. Intents are placed front to back; one whose destination is
           already taken queues in the nearest free slot behind it, never
           further back than where it started.

        Only destinations claimed earlier in the same pass force a queue, so a
        fast intent may land in front of a stunned one whose slot it never
        needed. This is intended.

        Returns:
            The EnemyAction published for the resolved intent, if any
        """
        turn = self._current_turn
        action: Optional[EnemyAction] = None

        front = self._slots[0]
        if front is not None:
            if front.stunned:
                front.set_stun(False)
            else:
                action = EnemyAction(
                    turn=turn,
                    intent_type=front.intent_type,
                    magnitude=front.magnitude,
                    species=front.species,
                )
                self._publish(action)
                # Resolved intents leave the track without counting as defeated
                self._slots[0] = None

        previous = self._slots
        advanced: list[Optional[Intent]] = [None] * self._slot_count
        advanced[0] = previous[0]
        moved = 0

        for i in range(1, self._slot_count):
            intent = previous[i]
            if intent is None:
                continue

            if intent.stunned:
                step = 0
                intent.set_stun(False)
            else:
                step = intent.behavior.step

            target_index = max(0, i - step)
            while advanced[target_index] is not None and target_index < i:
                target_index += 1

            advanced[target_index] = intent
            if target_index != i:
                moved += 1
                self._publish(IntentMoved(
                    turn=turn, from_slot=i, to_slot=target_index, intent=intent
                ))

        self._slots = advanced
        self._publish(TimelineAdvanced(turn=turn, resolved=action is not None, moved=moved))
        self._current_turn += 1

        return action

    def apply_rage(self, amount: int) -> int:
        """Raise the magnitude of every intent on the track by ``amount``.

        Non-positive amounts do nothing; magnitudes only ever go up.

        Returns:
            Number of intents affected
        """
        if amount <= 0:
            return 0

        affected = 0
        for intent in self._slots:
            if intent is None:
                continue
            intent.magnitude += amount
            affected += 1

        if affected:
            self._publish(RageApplied(turn=self._current_turn, amount=amount, affected=affected))
        return affected

    # Internal helpers

    def _kill(self, index: int, cause: KillCause, chained: bool = False) -> bool:
        """Purge an intent and count it as defeated.

        A dying bomb blows up both neighbors. Neighbors are killed through
        _kill_neighbor, which never explodes further, so chains stop after
        one hop.
        """
        intent = self.get_intent(index)
        if intent is None:
            return False

        self._slots[index] = None
        self._publish(EnemyDefeated(
            turn=self._current_turn, slot=index, species=intent.species, cause=cause
        ))

        if intent.behavior.explodes:
            self._publish(BombExploded(turn=self._current_turn, slot=index, chained=chained))
            if not chained:
                self._kill_neighbor(index - 1)
                self._kill_neighbor(index + 1)

        return True

    def _kill_neighbor(self, index: int) -> None:
        intent = self.get_intent(index)
        if intent is None:
            return

        if intent.behavior.chain_immune:
            self._jitter(index, intent)
            return

        self._kill(index, KillCause.CHAIN, chained=True)

    def _collide(self, index: int, mover: Intent, target_index: int, occupant: Intent) -> None:
        # Mover is checked first, so a crushing mover beats a crushing occupant
        if mover.behavior.crushes:
            self._jitter(index, mover)
            self._kill(target_index, KillCause.COLLISION)
        elif occupant.behavior.crushes:
            self._kill(index, KillCause.COLLISION)
            self._jitter(target_index, occupant)
        else:
            self._kill(index, KillCause.COLLISION)
            self._kill(target_index, KillCause.COLLISION)
            self._publish(CameraShake(turn=self._current_turn, slot=target_index))

    def _reject(self, index: int, intent: Intent) -> None:
        self._jitter(index, intent)
        self._publish(ArmorHit(turn=self._current_turn, slot=index, species=intent.species))

    def _jitter(self, index: int, intent: Intent) -> None:
        self._publish(IntentJittered(turn=self._current_turn, slot=index, species=intent.species))

    def _publish(self, event: GameEvent) -> None:
        self.event_manager.publish(event, source="Timeline")

    # Snapshots

    def to_array(self) -> NDArray[Any]:
        """Build a structured numpy snapshot of the track for renderers.

        Species and intent type are stored as their enum values; empty slots
        keep zeros.
        """
        snapshot = np.zeros(self._slot_count, dtype=SLOT_DTYPE)
        for i, intent in enumerate(self._slots):
            if intent is None:
                continue
            snapshot[i] = (
                True,
                intent.species.value,
                intent.intent_type.value,
                intent.magnitude,
                intent.stunned,
            )
        return snapshot

    def clear(self) -> None:
        """Empty every slot and restart the turn counter."""
        self._slots = [None] * self._slot_count
        self._current_turn = 1

    def get_stats(self) -> dict[str, Any]:
        """Get timeline statistics for debugging/monitoring."""
        species_counts: dict[str, int] = {}
        for intent in self._slots:
            if intent is not None:
                species_counts[intent.species.name] = species_counts.get(intent.species.name, 0) + 1

        return {
            "current_turn": self._current_turn,
            "slot_count": self._slot_count,
            "occupied": self.intent_count,
            "species": species_counts,
            "total_magnitude": sum(i.magnitude for i in self._slots if i is not None),
            "has_hacker": self.has_hacker(),
        }
