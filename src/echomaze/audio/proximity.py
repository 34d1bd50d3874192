from __future__ import annotations

import logging
from typing import Dict, Iterable, Set

from ..maze.tiles import Position
from ..world.goblins import Goblin, distance
from .dispatch import CueDispatcher

logger = logging.getLogger(__name__)


def proximity_volume(goblin_pos: Position, player: Position, max_audible_distance: float) -> float:
    """Linear fade: 1.0 on the player's cell, 0.0 at ``max_audible_distance`` and beyond."""
    return max(0.0, 1.0 - distance(goblin_pos, player) / float(max_audible_distance))


class ProximityMonitor:
    """Turns goblin distances into per-goblin loop volumes.

    Called from the fast sampling task. It only reads positions; the one piece of state it keeps
    is which goblins are currently audible, so it knows whom to silence when they walk out of
    range, die, or the level resets.
    """

    def __init__(self, dispatcher: CueDispatcher, max_audible_distance: float = 3.0) -> None:
        if max_audible_distance <= 0:
            raise ValueError("max_audible_distance must be > 0")
        self._dispatcher = dispatcher
        self._max = float(max_audible_distance)
        self._audible: Set[int] = set()

    @property
    def audible(self) -> Set[int]:
        return set(self._audible)

    def sample(self, goblins: Iterable[Goblin], player: Position) -> Dict[int, float]:
        volumes: Dict[int, float] = {}
        for goblin in goblins:
            volumes[goblin.id] = proximity_volume(goblin.position, player, self._max)

        for goblin_id, volume in volumes.items():
            if volume > 0.0:
                self._dispatcher.goblin_volume(goblin_id, volume)
                if goblin_id not in self._audible:
                    logger.debug("Goblin %d became audible (%.2f)", goblin_id, volume)
                self._audible.add(goblin_id)
            elif goblin_id in self._audible:
                self._silence(goblin_id)

        for goblin_id in list(self._audible):
            if goblin_id not in volumes:
                self._silence(goblin_id)
        return volumes

    def forget(self, goblin_id: int) -> None:
        """Stop a goblin's loop right away (e.g. it was just killed)."""
        if goblin_id in self._audible:
            self._silence(goblin_id)

    def reset(self) -> None:
        for goblin_id in sorted(self._audible):
            self._silence(goblin_id)

    def _silence(self, goblin_id: int) -> None:
        self._dispatcher.stop_goblin(goblin_id)
        self._audible.discard(goblin_id)
