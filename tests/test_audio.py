from __future__ import annotations

import math

import pytest

from echomaze.audio import CueDispatcher, CueKind, HapticKind, ProximityMonitor, clamp_volume, proximity_volume
from echomaze.audio.fakes import ConsoleCueBackend, RecordingCueBackend, RecordingHaptics
from echomaze.audio.interfaces import ICueBackend, IHapticBackend
from echomaze.maze.tiles import Direction, Position
from echomaze.world.goblins import Goblin


class ExplodingAudio(ICueBackend):
    def play_cue(self, kind):
        raise RuntimeError("device lost")

    def set_goblin_volume(self, goblin_id, volume):
        raise RuntimeError("device lost")

    def stop_goblin_cue(self, goblin_id):
        raise RuntimeError("device lost")


class ExplodingHaptics(IHapticBackend):
    def feedback(self, kind):
        raise OSError("no motor")


def test_clamp_volume():
    assert clamp_volume(-0.5) == 0.0
    assert clamp_volume(1.7) == 1.0
    assert clamp_volume(0.25) == 0.25
    assert clamp_volume(math.nan) == 0.0


def test_dispatcher_forwards_cue_and_haptic():
    audio, haptics = RecordingCueBackend(), RecordingHaptics()
    d = CueDispatcher(audio, haptics)
    d.cue(CueKind.STEP, HapticKind.LIGHT_IMPACT)
    d.goblin_volume(1, 2.0)
    assert audio.cues == [CueKind.STEP]
    assert haptics.events == [HapticKind.LIGHT_IMPACT]
    assert audio.goblin_volumes == {1: 1.0}


def test_dispatcher_swallows_backend_failures(caplog):
    d = CueDispatcher(ExplodingAudio(), ExplodingHaptics())
    d.cue(CueKind.DEATH, HapticKind.ERROR)
    d.goblin_volume(1, 0.5)
    d.stop_goblin(1)
    assert "device lost" in caplog.text
    assert "no motor" in caplog.text


def test_dispatcher_without_backends_is_silent():
    d = CueDispatcher()
    d.cue(CueKind.WIN, HapticKind.SUCCESS)
    d.goblin_volume(1, 0.5)
    d.stop_goblin(1)


@pytest.mark.parametrize(
    "goblin, expected",
    [
        (Position(5, 5), 1.0),
        (Position(6, 5), pytest.approx(2 / 3)),
        (Position(6, 6), pytest.approx(1 / 3)),
        (Position(8, 5), 0.0),
        (Position(9, 9), 0.0),
    ],
)
def test_proximity_volume_fades_with_distance(goblin, expected):
    assert proximity_volume(goblin, Position(5, 5), 3.0) == expected


def test_monitor_sets_and_silences_loops():
    audio = RecordingCueBackend()
    monitor = ProximityMonitor(CueDispatcher(audio), max_audible_distance=3)
    near = Goblin(1, Position(6, 5), Direction.UP)
    far = Goblin(2, Position(0, 0), Direction.UP)

    volumes = monitor.sample([near, far], Position(5, 5))
    assert volumes[1] == pytest.approx(2 / 3)
    assert volumes[2] == 0.0
    assert audio.goblin_volumes == {1: pytest.approx(2 / 3)}
    assert monitor.audible == {1}

    # goblin 1 walks out of range
    monitor.sample([Goblin(1, Position(9, 5), Direction.RIGHT), far], Position(5, 5))
    assert ("goblin_stop", 1) in audio.calls
    assert monitor.audible == set()


def test_monitor_silences_missing_goblins_and_resets():
    audio = RecordingCueBackend()
    monitor = ProximityMonitor(CueDispatcher(audio))
    monitor.sample([Goblin(1, Position(1, 0), Direction.UP), Goblin(2, Position(0, 1), Direction.UP)], Position(0, 0))
    monitor.sample([Goblin(2, Position(0, 1), Direction.UP)], Position(0, 0))
    assert monitor.audible == {2}
    monitor.forget(2)
    assert monitor.audible == set()
    assert [c for c in audio.calls if c[0] == "goblin_stop"] == [("goblin_stop", 1), ("goblin_stop", 2)]


def test_monitor_rejects_bad_range():
    with pytest.raises(ValueError):
        ProximityMonitor(CueDispatcher(), max_audible_distance=0)


def test_console_backend_reports_loudness_changes_only():
    lines = []
    backend = ConsoleCueBackend(lines.append)
    backend.play_cue(CueKind.WIND)
    backend.set_goblin_volume(1, 0.34)
    backend.set_goblin_volume(1, 0.33)
    backend.set_goblin_volume(1, 1.0)
    assert lines[0].startswith("[sound] wind")
    assert len(lines) == 3
