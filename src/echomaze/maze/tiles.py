from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator, List, Sequence, Tuple

from ..exceptions import InvalidInputError


class Cell(IntEnum):
    WALL = 0
    PATH = 1


class Direction(Enum):
    """Cardinal directions as (dx, dy); y grows downward."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, raw: object) -> "Direction":
        """Parse a direction from a Direction, a name ("up") or a short alias ("u")."""
        if isinstance(raw, Direction):
            return raw
        if isinstance(raw, str):
            key = raw.strip().upper()
            key = _ALIASES.get(key, key)
            if key in cls.__members__:
                return cls[key]
        raise InvalidInputError(f"Unknown direction: {raw!r}")


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_ALIASES = {"U": "UP", "D": "DOWN", "L": "LEFT", "R": "RIGHT", "N": "UP", "S": "DOWN", "W": "LEFT", "E": "RIGHT"}


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def step(self, direction: Direction) -> "Position":
        return Position(self.x + direction.dx, self.y + direction.dy)

    def distance(self, other: "Position") -> int:
        """Manhattan distance."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


@dataclass(frozen=True)
class Grid:
    """Immutable square cell grid addressed ``cells[y][x]``.

    Coordinates are (x, y) with (0,0) at top-left; x grows to the right, y grows down.
    """

    size: int
    cells: Tuple[Tuple[Cell, ...], ...]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        size = len(rows)
        if size == 0 or any(len(r) != size for r in rows):
            raise ValueError("Grid rows must form a non-empty square")
        return cls(size, tuple(tuple(Cell(v) for v in row) for row in rows))

    @classmethod
    def from_strings(cls, rows: Sequence[str]) -> "Grid":
        """Build a grid from strings where '#' is wall and anything else is path."""
        return cls.from_rows([[Cell.WALL if ch == "#" else Cell.PATH for ch in row] for row in rows])

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    def cell_at(self, pos: Position) -> Cell:
        return self.cells[pos.y][pos.x]

    def is_path(self, pos: Position) -> bool:
        return self.in_bounds(pos) and self.cells[pos.y][pos.x] == Cell.PATH

    def neighbors4(self, pos: Position) -> Iterator[Position]:
        for direction in Direction:
            nxt = pos.step(direction)
            if self.in_bounds(nxt):
                yield nxt

    def path_cells(self) -> List[Position]:
        return [Position(x, y) for y in range(self.size) for x in range(self.size) if self.cells[y][x] == Cell.PATH]

    def render(self, marks: dict | None = None) -> str:
        """ASCII dump: '#' wall, '.' path, overridden per position by ``marks``."""
        marks = marks or {}
        lines = []
        for y in range(self.size):
            row = []
            for x in range(self.size):
                pos = Position(x, y)
                if pos in marks:
                    row.append(marks[pos])
                else:
                    row.append("." if self.cells[y][x] == Cell.PATH else "#")
            lines.append("".join(row))
        return "\n".join(lines)
