from __future__ import annotations

import logging
import random
from typing import FrozenSet, Iterable, List, Tuple

from ..maze.tiles import Direction, Grid, Position
from .goblins import Goblin

logger = logging.getLogger(__name__)


def _free_cells(grid: Grid, excluded: Iterable[Position]) -> List[Position]:
    blocked = set(excluded)
    return [p for p in grid.path_cells() if p not in blocked]


def place_traps(
    grid: Grid,
    start: Position,
    end: Position,
    count: int,
    rng: random.Random,
) -> FrozenSet[Position]:
    """Scatter up to ``count`` traps on path cells other than start and end."""
    if count < 0:
        raise ValueError("trap count must be non-negative")
    cells = _free_cells(grid, (start, end))
    rng.shuffle(cells)
    traps = frozenset(cells[:count])
    if len(traps) < count:
        logger.warning("Only %d path cells available for %d traps", len(traps), count)
    logger.debug("Placed traps at %s", sorted((p.x, p.y) for p in traps))
    return traps


def place_goblins(
    grid: Grid,
    start: Position,
    end: Position,
    player: Position,
    rng: random.Random,
    max_goblins: int = 2,
) -> Tuple[Goblin, ...]:
    """Place 0..max_goblins goblins (uniform count) on path cells away from start, end and player.

    Ids are assigned ascending from 1; each goblin gets a uniformly random heading.
    """
    if max_goblins < 0:
        raise ValueError("max_goblins must be non-negative")
    cells = _free_cells(grid, (start, end, player))
    rng.shuffle(cells)
    count = min(rng.randint(0, max_goblins), len(cells))
    directions = list(Direction)
    goblins = tuple(
        Goblin(id=i + 1, position=cells[i], direction=rng.choice(directions))
        for i in range(count)
    )
    logger.debug("Placed %d goblins: %s", len(goblins), goblins)
    return goblins
