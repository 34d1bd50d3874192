from .goblins import (
    Goblin,
    advance,
    ambushing_goblins,
    backstab_target,
    is_adjacent,
    is_approaching,
    is_walking_away,
)
from .placement import place_goblins, place_traps

__all__ = [
    "Goblin",
    "advance",
    "ambushing_goblins",
    "backstab_target",
    "is_adjacent",
    "is_approaching",
    "is_walking_away",
    "place_goblins",
    "place_traps",
]
