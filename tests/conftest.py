import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from echomaze.audio.fakes import RecordingCueBackend, RecordingHaptics  # noqa: E402
from echomaze.config import GameConfig  # noqa: E402
from echomaze.engine.runtime import GameRuntime  # noqa: E402
from echomaze.engine.state import GameState  # noqa: E402
from echomaze.maze.tiles import Grid, Position  # noqa: E402

# Mostly open 10x10 room with a single wall at (3,2).
OPEN_ROWS = [
    "..........",
    "..........",
    "...#......",
    "..........",
    "..........",
    "..........",
    "..........",
    "..........",
    "..........",
    "..........",
]


@pytest.fixture
def open_grid() -> Grid:
    return Grid.from_strings(OPEN_ROWS)


@pytest.fixture
def make_state(open_grid):
    """Factory for hand-built level states on the open grid."""

    def _make(player=(0, 0), start=None, end=(9, 9), traps=(), goblins=(), grid=None, level=1) -> GameState:
        p = Position(*player)
        return GameState(
            grid=grid or open_grid,
            player=p,
            start=Position(*start) if start else p,
            end=Position(*end),
            traps=frozenset(Position(*t) for t in traps),
            goblins=tuple(goblins),
            level=level,
        )

    return _make


@pytest.fixture
def audio() -> RecordingCueBackend:
    return RecordingCueBackend()


@pytest.fixture
def haptics() -> RecordingHaptics:
    return RecordingHaptics()


@pytest.fixture
def config() -> GameConfig:
    return GameConfig(seed=7)


@pytest.fixture
def runtime(config, audio, haptics):
    rt = GameRuntime(config, audio, haptics)
    yield rt
    rt.shutdown()
