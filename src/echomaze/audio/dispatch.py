from __future__ import annotations

import logging
from typing import Optional

from .interfaces import CueKind, HapticKind, ICueBackend, IHapticBackend

logger = logging.getLogger(__name__)


def clamp_volume(volume: float) -> float:
    """Clamp to [0, 1]; NaN becomes 0."""
    v = float(volume)
    if v != v:  # NaN check
        return 0.0
    return max(0.0, min(1.0, v))


class CueDispatcher:
    """Best-effort front for the audio and haptic collaborators.

    Every call is wrapped: a backend that raises is logged and the game carries on, so cue
    delivery can never change game-state progression. Either backend may be None (silent).
    """

    def __init__(self, audio: Optional[ICueBackend] = None, haptics: Optional[IHapticBackend] = None) -> None:
        self._audio = audio
        self._haptics = haptics

    def cue(self, kind: CueKind, haptic: Optional[HapticKind] = None) -> None:
        if self._audio is not None:
            try:
                self._audio.play_cue(kind)
            except Exception as exc:
                logger.exception("Failed to play cue %s: %s", kind.name, exc)
        if haptic is not None:
            self.haptic(haptic)

    def haptic(self, kind: HapticKind) -> None:
        if self._haptics is None:
            return
        try:
            self._haptics.feedback(kind)
        except Exception as exc:
            logger.exception("Haptic feedback %s failed: %s", kind.name, exc)

    def goblin_volume(self, goblin_id: int, volume: float) -> None:
        if self._audio is None:
            return
        v = clamp_volume(volume)
        try:
            self._audio.set_goblin_volume(goblin_id, v)
        except Exception as exc:
            logger.exception("Failed to set goblin %d volume to %.3f: %s", goblin_id, v, exc)

    def stop_goblin(self, goblin_id: int) -> None:
        if self._audio is None:
            return
        try:
            self._audio.stop_goblin_cue(goblin_id)
        except Exception as exc:
            logger.exception("Failed to stop goblin %d cue: %s", goblin_id, exc)
