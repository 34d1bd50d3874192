from __future__ import annotations

import random

from echomaze.maze.generator import generate_level
from echomaze.maze.tiles import Direction, Grid, Position
from echomaze.world.goblins import (
    Goblin,
    advance,
    advance_all,
    ambushing_goblins,
    backstab_target,
    is_adjacent,
    is_approaching,
    is_walking_away,
)

CORRIDOR = Grid.from_strings(
    [
        "#####",
        "....#",
        "###.#",
        "###.#",
        "#####",
    ]
)


def test_goblin_walks_straight_while_path_ahead():
    g = Goblin(1, Position(0, 1), Direction.RIGHT)
    g = advance(g, CORRIDOR, Position(0, 0), random.Random(0))
    assert g.position == Position(1, 1)
    assert g.direction is Direction.RIGHT


def test_goblin_turns_at_wall():
    g = Goblin(1, Position(3, 1), Direction.RIGHT)
    g = advance(g, CORRIDOR, Position(0, 0), random.Random(0))
    # only LEFT and DOWN are open from (3,1)
    assert g.position in (Position(2, 1), Position(3, 2))
    assert g.direction in (Direction.LEFT, Direction.DOWN)


def test_goblin_boxed_in_stays_put():
    grid = Grid.from_strings(["###", "#.#", "###"])
    g = Goblin(1, Position(1, 1), Direction.UP)
    assert advance(g, grid, Position(0, 0), random.Random(0)) == g


def test_goblin_walks_through_player_cell():
    g = Goblin(1, Position(0, 1), Direction.RIGHT)
    moved = advance(g, CORRIDOR, Position(1, 1), random.Random(0))
    assert moved.position == Position(1, 1)


def test_goblins_never_enter_walls():
    for seed in range(40):
        rng = random.Random(seed)
        level = generate_level(rng)
        cells = level.grid.path_cells()
        goblins = tuple(Goblin(i + 1, rng.choice(cells), rng.choice(list(Direction))) for i in range(2))
        for _ in range(50):
            goblins = advance_all(goblins, level.grid, level.start, rng)
            assert all(level.grid.is_path(g.position) for g in goblins)


def test_approach_and_retreat_queries():
    player = Position(5, 5)
    coming = Goblin(1, Position(6, 5), Direction.LEFT)
    leaving = Goblin(2, Position(6, 5), Direction.RIGHT)
    sideways = Goblin(3, Position(6, 5), Direction.UP)

    assert is_adjacent(coming, player)
    assert is_approaching(coming, player)
    assert not is_walking_away(coming, player)

    assert is_walking_away(leaving, player)
    assert not is_approaching(leaving, player)

    # a sideways step from an adjacent cell also opens the distance
    assert is_walking_away(sideways, player)


def test_walking_away_needs_adjacency():
    far = Goblin(1, Position(8, 5), Direction.RIGHT)
    assert not is_walking_away(far, Position(5, 5))


def test_ambush_detection():
    player = Position(2, 2)
    approaching = Goblin(1, Position(2, 1), Direction.DOWN)
    two_away = Goblin(2, Position(2, 4), Direction.UP)
    assert ambushing_goblins([approaching, two_away], player) == [approaching]


def test_backstab_target_picks_lowest_id():
    player = Position(5, 5)
    a = Goblin(2, Position(4, 5), Direction.LEFT)
    b = Goblin(1, Position(5, 6), Direction.DOWN)
    approaching = Goblin(3, Position(5, 4), Direction.DOWN)
    assert backstab_target([a, b, approaching], player) == b
    assert backstab_target([approaching], player) is None
    assert backstab_target([], player) is None
