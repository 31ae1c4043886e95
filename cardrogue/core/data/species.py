"""Species behavior table.

Every species-dependent rule of the timeline engine is read from this table
instead of being spelled out as conditionals inside each operation. Adding a
species means adding an enum member and a row here.
"""

from dataclasses import dataclass

from .game_enums import Species


@dataclass(frozen=True)
class SpeciesBehavior:
    """Static rules for one species."""

    # Slots advanced per turn
    step: int = 1

    # Direct removal (attack) destroys it
    removable: bool = True

    # Area effect (thunder) leaves it untouched
    thunder_immune: bool = False

    # Stun has no effect on it
    stun_immune: bool = False

    # Survives being the neighbor of an exploding bomb
    chain_immune: bool = False

    # Death triggers a chain reaction on both neighbors
    explodes: bool = False

    # Wins forced-move collisions instead of dying
    crushes: bool = False

    # Presence corrupts the player's hand generation
    corrupts_hand: bool = False


SPECIES_BEHAVIORS: dict[Species, SpeciesBehavior] = {
    Species.NORMAL: SpeciesBehavior(),
    Species.ARMOR: SpeciesBehavior(removable=False),
    Species.BOMB: SpeciesBehavior(explodes=True),
    Species.SPEED: SpeciesBehavior(step=2),
    Species.HACKER: SpeciesBehavior(corrupts_hand=True),
    Species.KING: SpeciesBehavior(
        removable=False,
        thunder_immune=True,
        stun_immune=True,
        chain_immune=True,
        crushes=True,
    ),
}


def get_behavior(species: Species) -> SpeciesBehavior:
    """Look up the behavior row for a species."""
    return SPECIES_BEHAVIORS[species]
