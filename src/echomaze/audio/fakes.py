from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .interfaces import CueKind, HapticKind, ICueBackend, IHapticBackend

logger = logging.getLogger(__name__)


# ---------------------------
# Recording (Test) Implementations
# ---------------------------


@dataclass
class RecordingCueBackend(ICueBackend):
    """Dependency-free cue backend that records every request.

    - ``cues`` keeps one-shot cues in order
    - ``goblin_volumes`` holds the latest volume of each audible goblin
    - ``calls`` keeps the full call log, for ordering assertions
    """

    cues: List[CueKind] = field(default_factory=list)
    goblin_volumes: Dict[int, float] = field(default_factory=dict)
    calls: List[Tuple[str, object]] = field(default_factory=list)

    def play_cue(self, kind: CueKind) -> None:
        self.cues.append(kind)
        self.calls.append(("cue", kind))

    def set_goblin_volume(self, goblin_id: int, volume: float) -> None:
        self.goblin_volumes[goblin_id] = volume
        self.calls.append(("goblin_volume", (goblin_id, volume)))

    def stop_goblin_cue(self, goblin_id: int) -> None:
        self.goblin_volumes.pop(goblin_id, None)
        self.calls.append(("goblin_stop", goblin_id))

    def count(self, kind: CueKind) -> int:
        return self.cues.count(kind)


@dataclass
class RecordingHaptics(IHapticBackend):
    events: List[HapticKind] = field(default_factory=list)

    def feedback(self, kind: HapticKind) -> None:
        self.events.append(kind)


# ---------------------------
# Console Implementation
# ---------------------------

_DESCRIPTIONS = {
    CueKind.HEAR_AMBIENT: "(you listen...)",
    CueKind.WIND: "wind howls - no way through",
    CueKind.CAVE: "a hollow echo - the cave opens up",
    CueKind.STEP: "step",
    CueKind.DEATH: "AAAaaaah... you fall",
    CueKind.WIN: "a bright chime - you found the exit!",
    CueKind.TICK_COUNTDOWN: "tick",
    CueKind.ATTACK: "shhk! a goblin falls",
    CueKind.LEVEL_START: "a new maze hums around you",
    CueKind.TRAP_LOOP_START: "click... something under your foot starts whirring",
    CueKind.TRAP_LOOP_STOP: "the whirring stops",
}


class ConsoleCueBackend(ICueBackend):
    """Writes cue descriptions as text, for the console session and headless runs.

    Goblin loops are reported only when their loudness bucket changes, to keep output readable.
    """

    def __init__(self, write: Optional[Callable[[str], None]] = None) -> None:
        self._write = write or print
        self._buckets: Dict[int, int] = {}

    def play_cue(self, kind: CueKind) -> None:
        self._write(f"[sound] {_DESCRIPTIONS.get(kind, kind.value)}")

    def set_goblin_volume(self, goblin_id: int, volume: float) -> None:
        bucket = int(round(volume * 3))
        if self._buckets.get(goblin_id) == bucket:
            return
        self._buckets[goblin_id] = bucket
        loudness = {0: "faint", 1: "faint", 2: "close", 3: "right next to you"}[bucket]
        self._write(f"[sound] goblin snarl ({loudness})")

    def stop_goblin_cue(self, goblin_id: int) -> None:
        if self._buckets.pop(goblin_id, None) is not None:
            logger.debug("Goblin %d fell silent", goblin_id)


class ConsoleHaptics(IHapticBackend):
    def __init__(self, write: Optional[Callable[[str], None]] = None) -> None:
        self._write = write or print

    def feedback(self, kind: HapticKind) -> None:
        self._write(f"[buzz] {kind.value}")
