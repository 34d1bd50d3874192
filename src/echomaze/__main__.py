from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .app import run_generate, run_play, run_simulate
from .exceptions import ConfigError


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="echo-maze",
        description="Echo Maze - audio maze game core",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Print a generated level")
    gen.add_argument("--seed", type=int, default=None, help="Master seed")
    gen.add_argument("--config", type=Path, default=None, help="User settings YAML")

    play = sub.add_parser("play", help="Play in the console")
    play.add_argument("--seed", type=int, default=None, help="Master seed")
    play.add_argument("--reveal", action="store_true", help="Show traps and goblins on the map")
    play.add_argument("--config", type=Path, default=None, help="User settings YAML")

    sim = sub.add_parser("simulate", help="Headless run with a random agent")
    sim.add_argument("--seed", type=int, default=None, help="Master seed")
    sim.add_argument("--steps", type=int, default=600, help="Number of ticks to simulate")
    sim.add_argument("--tick-rate", type=float, default=30.0, help="Simulated ticks per second")

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        if args.command == "generate":
            return run_generate(seed=args.seed, config_path=args.config)
        if args.command == "play":
            return run_play(seed=args.seed, reveal=args.reveal, config_path=args.config)
        return run_simulate(seed=args.seed, steps=args.steps, tick_rate=args.tick_rate)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
