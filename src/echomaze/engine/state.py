from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from ..maze.tiles import Grid, Position
from ..world.goblins import Goblin


class Status(Enum):
    PLAYING = "playing"
    DEAD = "dead"
    WON = "won"


class DeathCause(Enum):
    FELL = "fell off the edge"
    WALL = "walked into a wall"
    AMBUSH = "ambushed by a goblin"
    TRAP = "trap went off"


class HearResult(Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    WALL = "wall"
    PATH = "path"


@dataclass(frozen=True)
class GameState:
    """Snapshot of one level in play.

    Values are never mutated: each transition builds a new state (``dataclasses.replace``) and
    the runtime swaps it in, so any decision is made against one consistent snapshot.
    """

    grid: Grid
    player: Position
    start: Position
    end: Position
    traps: FrozenSet[Position]
    goblins: Tuple[Goblin, ...]
    status: Status = Status.PLAYING
    level: int = 1

    @property
    def playing(self) -> bool:
        return self.status is Status.PLAYING

    @property
    def on_trap(self) -> bool:
        return self.player in self.traps

    def goblin(self, goblin_id: int) -> Optional[Goblin]:
        for g in self.goblins:
            if g.id == goblin_id:
                return g
        return None

    def classify(self, pos: Position) -> HearResult:
        if not self.grid.in_bounds(pos):
            return HearResult.OUT_OF_BOUNDS
        if not self.grid.is_path(pos):
            return HearResult.WALL
        return HearResult.PATH

    def with_status(self, status: Status) -> "GameState":
        return replace(self, status=status)

    def without_goblin(self, goblin_id: int) -> "GameState":
        return replace(self, goblins=tuple(g for g in self.goblins if g.id != goblin_id))

    def render(self, show_entities: bool = True) -> str:
        marks = {self.start: "S", self.end: "E"}
        if show_entities:
            for trap in self.traps:
                marks[trap] = "^"
            for g in self.goblins:
                marks[g.position] = "g"
        marks[self.player] = "@"
        return self.grid.render(marks)
