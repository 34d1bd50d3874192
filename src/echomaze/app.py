from __future__ import annotations

import dataclasses
import logging
import time
from pathlib import Path
from typing import Callable, Optional

from .audio.fakes import ConsoleCueBackend, ConsoleHaptics
from .config import GameConfig
from .core.events import Event, GameEvent
from .engine.loop import EngineConfig, GameEngine
from .engine.runtime import GameRuntime
from .exceptions import EchoMazeError
from .input.router import GestureRouter
from .maze.pathfinding import find_path_bfs, reachable_from
from .maze.tiles import Direction

logger = logging.getLogger(__name__)

PLAY_HELP = """Commands:
  h <dir>   listen toward a direction (u/d/l/r)
  m <dir>   step in a direction
  t         tap (two quick taps backstab)
  b         backstab
  map       show the map
  q         quit"""


def load_config(config_path: Optional[Path] = None, seed: Optional[int] = None) -> GameConfig:
    """Settings for a CLI run; an explicit ``--seed`` wins over files and environment."""
    config = GameConfig.load(config_path)
    if seed is not None:
        config = dataclasses.replace(config, seed=seed)
    return config


def run_generate(seed: Optional[int] = None, config_path: Optional[Path] = None) -> int:
    """Print one freshly generated level with its traps and goblins."""
    config = load_config(config_path, seed)
    runtime = GameRuntime(config)
    state = runtime.start()
    runtime.shutdown()

    print(f"Seed: {runtime.rngs.master_seed_hex}")
    print(state.render())
    length = find_path_bfs(state.grid, state.start, state.end)
    print(f"Start {state.start} -> End {state.end}: shortest path {length} steps")
    print(
        f"Path cells: {len(state.grid.path_cells())} "
        f"(reachable from start: {len(reachable_from(state.grid, state.start))}), "
        f"traps: {len(state.traps)}, goblins: {len(state.goblins)}"
    )
    return 0


def run_play(
    seed: Optional[int] = None,
    reveal: bool = False,
    config_path: Optional[Path] = None,
    *,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Interactive console session.

    The runtime clock only moves when a command arrives: the wall time since the previous
    command is fed to the scheduler first, so timers that came due in between fire before the
    command is applied.
    """
    config = load_config(config_path, seed)
    runtime = GameRuntime(config, ConsoleCueBackend(write), ConsoleHaptics(write))
    router = GestureRouter(runtime.dispatch)

    def announce(event: Event) -> None:
        if event.name == GameEvent.PLAYER_DIED:
            write(f"You died: {event.payload['cause'].value}.")
        elif event.name == GameEvent.LEVEL_WON:
            write(f"Level {event.payload['level']} cleared!")
        elif event.name == GameEvent.LEVEL_STARTED:
            write(f"-- Level {event.payload['level']} --")
        elif event.name == GameEvent.LEVEL_RESTARTED:
            write("-- Back to the start --")
        elif event.name == GameEvent.TRAP_TICK:
            write(f"{event.payload['remaining']}...")

    for name in (
        GameEvent.PLAYER_DIED,
        GameEvent.LEVEL_WON,
        GameEvent.LEVEL_STARTED,
        GameEvent.LEVEL_RESTARTED,
        GameEvent.TRAP_TICK,
    ):
        runtime.bus.subscribe(name, announce)

    write("Echo Maze - find the exit by ear")
    write(PLAY_HELP)
    runtime.start()
    last = clock()
    try:
        while True:
            try:
                line = read("> ")
            except EOFError:
                break
            now = clock()
            runtime.advance(max(0.0, now - last))
            last = now

            cmd, _, arg = line.strip().lower().partition(" ")
            if not cmd:
                continue
            if cmd in ("q", "quit", "exit"):
                break
            try:
                if cmd in ("h", "hear"):
                    router.swipe(Direction.parse(arg.strip()), finger_count=1)
                    # let the echo play out before the next prompt
                    sleep(config.timing.hear_result_delay)
                    now = clock()
                    runtime.advance(max(0.0, now - last))
                    last = now
                elif cmd in ("m", "move"):
                    router.swipe(Direction.parse(arg.strip()), finger_count=2)
                elif cmd in ("t", "tap"):
                    router.tap()
                elif cmd in ("b", "backstab"):
                    if runtime.backstab() is None:
                        write("Your blade finds nothing.")
                elif cmd == "map":
                    write(runtime.state.render(show_entities=reveal))
                else:
                    write(PLAY_HELP)
            except EchoMazeError as exc:
                write(f"! {exc}")
    except KeyboardInterrupt:
        write("Interrupted by user")
        return 130
    finally:
        runtime.shutdown()
    return 0


def run_simulate(seed: Optional[int] = None, steps: int = 600, tick_rate: float = 30.0) -> int:
    """Drive a runtime with a random agent for ``steps`` simulated ticks, as fast as possible.

    Every tick advances the clock by ``1 / tick_rate`` seconds; the agent acts on roughly one
    tick in ten.
    """
    if tick_rate <= 0:
        logger.error("tick rate must be > 0, got %s", tick_rate)
        return 2
    config = load_config(seed=seed)
    runtime = GameRuntime(config)
    agent_rng = runtime.rngs.context_rng("agent")
    counts = {GameEvent.PLAYER_DIED: 0, GameEvent.LEVEL_WON: 0, GameEvent.GOBLIN_KILLED: 0}

    def count(event: Event) -> None:
        counts[event.name] += 1

    for name in counts:
        runtime.bus.subscribe(name, count)

    directions = list(Direction)

    def agent(rt: GameRuntime, step: int) -> None:
        if agent_rng.random() >= 0.1:
            return
        roll = agent_rng.random()
        if roll < 0.4:
            rt.hear(agent_rng.choice(directions))
        elif roll < 0.9:
            rt.move(agent_rng.choice(directions))
        else:
            rt.tap()

    engine = GameEngine(runtime, EngineConfig(tick_rate=0, max_steps=steps, fixed_dt=1.0 / tick_rate), agent)
    try:
        engine.run()
    except KeyboardInterrupt:
        engine.stop()
        print("Interrupted by user")
        return 130
    finally:
        runtime.shutdown()

    print(
        f"Simulated {engine.step} ticks ({runtime.now:.1f}s): level {runtime.state.level}, "
        f"deaths {counts[GameEvent.PLAYER_DIED]}, wins {counts[GameEvent.LEVEL_WON]}, "
        f"goblins killed {counts[GameEvent.GOBLIN_KILLED]}"
    )
    return 0
