from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..maze.tiles import Direction


@dataclass(frozen=True)
class HearRequested:
    """One-finger swipe: listen toward ``direction`` without moving."""

    direction: Direction


@dataclass(frozen=True)
class MoveRequested:
    """Two-finger swipe: step toward ``direction``."""

    direction: Direction


@dataclass(frozen=True)
class TapRequested:
    """A single tap. Two taps close together make a backstab."""


@dataclass(frozen=True)
class BackstabRequested:
    """An already-recognised double tap."""


InputEvent = Union[HearRequested, MoveRequested, TapRequested, BackstabRequested]


__all__ = ["HearRequested", "MoveRequested", "TapRequested", "BackstabRequested", "InputEvent"]
