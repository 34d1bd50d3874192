from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import Iterable, List, Tuple

from ..maze.tiles import Direction, Grid, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Goblin:
    """A roaming enemy. Motion produces a new instance rather than mutating this one."""

    id: int
    position: Position
    direction: Direction

    @property
    def next_position(self) -> Position:
        """Cell the goblin would enter by continuing in its current direction (walls ignored)."""
        return self.position.step(self.direction)


def advance(goblin: Goblin, grid: Grid, player: Position, rng: random.Random) -> Goblin:
    """Move a goblin one tick.

    Keeps going straight while the next cell is path (the player's cell included; goblins do
    not stop on the player). When blocked, turns to a uniformly random open direction and takes
    one step that way. Boxed in on all sides, it stays put.
    """
    ahead = goblin.next_position
    if grid.is_path(ahead):
        return replace(goblin, position=ahead)

    open_dirs = [d for d in Direction if grid.is_path(goblin.position.step(d))]
    if not open_dirs:
        logger.debug("Goblin %d boxed in at %s", goblin.id, goblin.position)
        return goblin
    direction = rng.choice(open_dirs)
    moved = Goblin(goblin.id, goblin.position.step(direction), direction)
    logger.debug(
        "Goblin %d blocked heading %s; turned %s to %s (player at %s)",
        goblin.id,
        goblin.direction.name,
        direction.name,
        moved.position,
        player,
    )
    return moved


def advance_all(goblins: Iterable[Goblin], grid: Grid, player: Position, rng: random.Random) -> Tuple[Goblin, ...]:
    return tuple(advance(g, grid, player, rng) for g in goblins)


# Relational queries. Always evaluate against the goblin state current at the player action.


def distance(a: Position, b: Position) -> int:
    return a.distance(b)


def is_adjacent(goblin: Goblin, player: Position) -> bool:
    return goblin.position.distance(player) == 1


def is_approaching(goblin: Goblin, player: Position) -> bool:
    return goblin.next_position == player


def is_walking_away(goblin: Goblin, player: Position) -> bool:
    current = goblin.position.distance(player)
    return current == 1 and goblin.next_position.distance(player) > current


def ambushing_goblins(goblins: Iterable[Goblin], player: Position) -> List[Goblin]:
    """Goblins within 0-1 cells whose next step lands on the player."""
    return [
        g for g in goblins
        if g.position.distance(player) in (0, 1) and is_approaching(g, player)
    ]


def backstab_target(goblins: Iterable[Goblin], player: Position) -> Goblin | None:
    """Lowest-id adjacent goblin that is walking away from the player, if any."""
    candidates = [g for g in goblins if is_adjacent(g, player) and is_walking_away(g, player)]
    if not candidates:
        return None
    return min(candidates, key=lambda g: g.id)
