from __future__ import annotations

import random

import pytest

from echomaze.maze.generator import WindingPathGenerator, generate_level
from echomaze.maze.pathfinding import find_path_bfs
from echomaze.maze.tiles import Cell, Direction, Position


@pytest.mark.parametrize("seed", range(200))
def test_end_is_reachable_from_start(seed):
    level = WindingPathGenerator().generate(random.Random(seed))
    assert level.grid.size == 10
    assert level.grid.cell_at(level.start) == Cell.PATH
    assert level.grid.cell_at(level.end) == Cell.PATH
    assert find_path_bfs(level.grid, level.start, level.end) is not None


def test_endpoints_respect_minimum_distance():
    gen = WindingPathGenerator()
    for seed in range(300):
        level = gen.generate(random.Random(seed))
        assert level.start != level.end
        assert level.start.distance(level.end) >= 5


def test_same_seed_same_layout():
    a = generate_level(random.Random(99))
    b = generate_level(random.Random(99))
    assert a == b


def test_different_seeds_vary_layout():
    layouts = {generate_level(random.Random(seed)).grid for seed in range(20)}
    assert len(layouts) > 1


def test_pure_greedy_walk_still_reaches_end():
    gen = WindingPathGenerator(turn_bias=1.0, greedy_bias=1.0, room_chance=1.0)
    for seed in range(50):
        level = gen.generate(random.Random(seed))
        assert find_path_bfs(level.grid, level.start, level.end) is not None


def test_other_grid_sizes():
    level = WindingPathGenerator(size=6, min_endpoint_distance=4).generate(random.Random(3))
    assert level.grid.size == 6
    assert find_path_bfs(level.grid, level.start, level.end) is not None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"size": 1},
        {"size": 3, "min_endpoint_distance": 5},
        {"min_endpoint_distance": 0},
    ],
)
def test_invalid_parameters_rejected(kwargs):
    with pytest.raises(ValueError):
        WindingPathGenerator(**kwargs)


def test_candidate_needs_exactly_one_path_neighbour():
    gen = WindingPathGenerator(size=5)
    tiles = [[Cell.WALL] * 5 for _ in range(5)]
    tiles[2][2] = Cell.PATH  # current cell
    tiles[1][3] = Cell.PATH  # older corridor cell diagonal to it
    moves = gen._candidate_moves(tiles, Position(2, 2))
    # (2,1) and (3,2) would also touch (3,1)
    assert moves == [Direction.DOWN, Direction.LEFT]


def test_candidates_skip_carved_and_out_of_bounds_cells():
    gen = WindingPathGenerator(size=5)
    tiles = [[Cell.WALL] * 5 for _ in range(5)]
    tiles[0][0] = Cell.PATH
    tiles[0][1] = Cell.PATH
    assert gen._candidate_moves(tiles, Position(0, 0)) == [Direction.DOWN]


class _NoFallbackGenerator(WindingPathGenerator):
    """Leaves dead ends open so only the constrained carve shows up in the grid."""

    def _walk_direct(self, tiles, current, end):
        pass


@pytest.mark.parametrize("seed", range(100))
def test_carve_without_rooms_is_a_simple_path(seed):
    level = _NoFallbackGenerator(room_chance=0.0).generate(random.Random(seed))
    grid = level.grid
    cells = set(grid.path_cells())

    for p in cells:
        degree = sum(1 for n in grid.neighbors4(p) if n in cells)
        assert degree <= 2, f"{p} branches"

    for y in range(grid.size - 1):
        for x in range(grid.size - 1):
            block = {Position(x, y), Position(x + 1, y), Position(x, y + 1), Position(x + 1, y + 1)}
            assert not block <= cells, f"2x2 block at ({x},{y})"

    # one chain from start: exactly two ends unless nothing but the start was carved
    ends = [p for p in cells if sum(1 for n in grid.neighbors4(p) if n in cells) <= 1]
    assert level.start in ends
    assert len(ends) == (1 if len(cells) == 1 else 2)
