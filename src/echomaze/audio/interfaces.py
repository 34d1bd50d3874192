from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class CueKind(Enum):
    """Sound cues the core can request. Values are the asset names a backend may map to files."""

    HEAR_AMBIENT = "hear"
    WIND = "wind"  # no path: edge or wall
    CAVE = "cave"  # open path
    STEP = "step"
    DEATH = "falling"
    WIN = "win"
    TICK_COUNTDOWN = "tick"
    ATTACK = "attack"
    LEVEL_START = "start"
    TRAP_LOOP_START = "trap_start"
    TRAP_LOOP_STOP = "trap_stop"


class HapticKind(Enum):
    LIGHT_IMPACT = "light_impact"
    SUCCESS = "success"
    ERROR = "error"


class ICueBackend(ABC):
    """Audio backend interface to decouple game logic from a concrete sound library.

    Goblins each own a looping cue whose volume tracks their distance to the player.
    """

    @abstractmethod
    def play_cue(self, kind: CueKind) -> None:
        """Play (or start/stop, for the trap loop cues) a one-shot cue."""
        raise NotImplementedError

    @abstractmethod
    def set_goblin_volume(self, goblin_id: int, volume: float) -> None:
        """Start the goblin's loop if needed and set its volume [0..1]."""
        raise NotImplementedError

    @abstractmethod
    def stop_goblin_cue(self, goblin_id: int) -> None:
        """Stop the goblin's loop. Stopping a silent goblin is a no-op."""
        raise NotImplementedError


class IHapticBackend(ABC):
    @abstractmethod
    def feedback(self, kind: HapticKind) -> None:
        raise NotImplementedError
