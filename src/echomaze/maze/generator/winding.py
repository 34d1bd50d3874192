from __future__ import annotations
import logging
import random
from typing import List, Optional, Sequence, Tuple

from ..tiles import Cell, Direction, Grid, Position
from .base import GeneratedLevel, LevelGenerator

logger = logging.getLogger(__name__)


class WindingPathGenerator(LevelGenerator):
    """Single winding corridor generator.

    Algorithm:
    - Sample start and end cells at least ``min_endpoint_distance`` apart (reject and retry).
    - Carve from start one cell at a time. A neighbour is a candidate only if it is in bounds,
      still wall, and touches exactly one path cell, which keeps the corridor one cell wide
      and loop free.
    - After two moves in the same direction prefer a turn (best turn toward the end with
      probability ``turn_bias``, otherwise a random turn). Otherwise step greedily toward the
      end with probability ``greedy_bias``, else pick any candidate at random.
    - Now and then open a 2x2 room around the current cell.
    - On a dead end, walk straight to the end (x first, then y) so the level is always connected.
    """

    def __init__(
        self,
        size: int = 10,
        min_endpoint_distance: int = 5,
        turn_bias: float = 0.6,
        greedy_bias: float = 0.4,
        room_chance: float = 0.12,
        max_rooms: int = 3,
        room_min_distance_from_start: int = 5,
        room_min_distance_to_end: int = 5,
        room_clearance: int = 2,
    ) -> None:
        if size < 2:
            raise ValueError("size must be at least 2")
        if not 0 < min_endpoint_distance <= 2 * (size - 1):
            raise ValueError(
                f"min_endpoint_distance {min_endpoint_distance} cannot be satisfied on a {size}x{size} grid"
            )
        self.size = int(size)
        self.min_endpoint_distance = int(min_endpoint_distance)
        self.turn_bias = float(turn_bias)
        self.greedy_bias = float(greedy_bias)
        self.room_chance = float(room_chance)
        self.max_rooms = int(max_rooms)
        self.room_min_distance_from_start = int(room_min_distance_from_start)
        self.room_min_distance_to_end = int(room_min_distance_to_end)
        self.room_clearance = int(room_clearance)

    def generate(self, rng: random.Random) -> GeneratedLevel:
        start, end = self._pick_endpoints(rng)
        tiles = [[Cell.WALL for _ in range(self.size)] for _ in range(self.size)]
        tiles[start.y][start.x] = Cell.PATH

        current = start
        history: List[Direction] = []
        rooms = 0
        while current != end:
            moves = self._candidate_moves(tiles, current)
            if not moves:
                logger.debug("Dead end at %s; walking directly to %s", current, end)
                self._walk_direct(tiles, current, end)
                break
            direction = self._choose_move(moves, history, current, end, rng)
            current = current.step(direction)
            tiles[current.y][current.x] = Cell.PATH
            history.append(direction)
            if rooms < self.max_rooms and self._try_room(tiles, current, start, end, rng):
                rooms += 1

        grid = Grid(self.size, tuple(tuple(row) for row in tiles))
        logger.info(
            "Generated %dx%d level: start=%s end=%s carved=%d rooms=%d",
            self.size,
            self.size,
            start,
            end,
            len(history),
            rooms,
        )
        return GeneratedLevel(grid=grid, start=start, end=end)

    def _pick_endpoints(self, rng: random.Random) -> Tuple[Position, Position]:
        while True:
            start = Position(rng.randrange(self.size), rng.randrange(self.size))
            end = Position(rng.randrange(self.size), rng.randrange(self.size))
            if start != end and start.distance(end) >= self.min_endpoint_distance:
                return start, end

    def _in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    def _path_neighbours(self, tiles: Sequence[Sequence[Cell]], pos: Position) -> int:
        count = 0
        for direction in Direction:
            n = pos.step(direction)
            if self._in_bounds(n) and tiles[n.y][n.x] == Cell.PATH:
                count += 1
        return count

    def _candidate_moves(self, tiles: Sequence[Sequence[Cell]], current: Position) -> List[Direction]:
        moves = []
        for direction in Direction:
            nxt = current.step(direction)
            if not self._in_bounds(nxt) or tiles[nxt.y][nxt.x] == Cell.PATH:
                continue
            if self._path_neighbours(tiles, nxt) == 1:
                moves.append(direction)
        return moves

    def _choose_move(
        self,
        moves: List[Direction],
        history: List[Direction],
        current: Position,
        end: Position,
        rng: random.Random,
    ) -> Direction:
        def remaining(d: Direction) -> int:
            return current.step(d).distance(end)

        if len(history) >= 2 and history[-1] == history[-2]:
            turns = [d for d in moves if d != history[-1]]
            if turns:
                if rng.random() < self.turn_bias:
                    return min(turns, key=remaining)
                return rng.choice(turns)
        if rng.random() < self.greedy_bias:
            return min(moves, key=remaining)
        return rng.choice(moves)

    def _walk_direct(self, tiles: List[List[Cell]], current: Position, end: Position) -> None:
        x, y = current.x, current.y
        while x != end.x:
            x += 1 if end.x > x else -1
            tiles[y][x] = Cell.PATH
        while y != end.y:
            y += 1 if end.y > y else -1
            tiles[y][x] = Cell.PATH

    def _try_room(
        self,
        tiles: List[List[Cell]],
        current: Position,
        start: Position,
        end: Position,
        rng: random.Random,
    ) -> bool:
        if current.distance(start) < self.room_min_distance_from_start:
            return False
        if current.distance(end) <= self.room_min_distance_to_end:
            return False
        c = self.room_clearance
        if not (c <= current.x < self.size - c and c <= current.y < self.size - c):
            return False
        if rng.random() >= self.room_chance:
            return False

        sx = rng.choice((-1, 1))
        sy = rng.choice((-1, 1))
        block = (
            Position(current.x + sx, current.y),
            Position(current.x, current.y + sy),
            Position(current.x + sx, current.y + sy),
        )
        if any(tiles[p.y][p.x] != Cell.WALL for p in block):
            return False
        for p in block:
            tiles[p.y][p.x] = Cell.PATH
        logger.debug("Opened room at %s (orientation %+d,%+d)", current, sx, sy)
        return True


def generate_level(rng: Optional[random.Random] = None, size: int = 10) -> GeneratedLevel:
    """Convenience wrapper using default tuning."""
    return WindingPathGenerator(size=size).generate(rng or random.Random())
