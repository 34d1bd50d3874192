from __future__ import annotations

import pytest

from echomaze.core.events import ALL_EVENTS, EventBus, GameEvent


def test_emit_reaches_named_and_wildcard_handlers():
    bus = EventBus()
    named, everything = [], []
    bus.subscribe(GameEvent.PLAYER_MOVED, named.append)
    bus.subscribe(ALL_EVENTS, everything.append)

    bus.emit(GameEvent.PLAYER_MOVED, {"to": (1, 0)})
    bus.emit(GameEvent.LEVEL_WON)

    assert [e.payload for e in named] == [{"to": (1, 0)}]
    assert [e.name for e in everything] == [GameEvent.PLAYER_MOVED, GameEvent.LEVEL_WON]


def test_unsubscribe():
    bus = EventBus()
    seen = []
    bus.subscribe("x", seen.append)
    bus.unsubscribe("x", seen.append)
    bus.unsubscribe("x", seen.append)
    bus.emit("x")
    assert seen == []


def test_failing_handler_is_isolated(caplog):
    bus = EventBus()
    seen = []

    def broken(event):
        raise ValueError("nope")

    bus.subscribe("x", broken)
    bus.subscribe("x", seen.append)
    bus.emit("x")
    assert len(seen) == 1
    assert "Error in event handler" in caplog.text


def test_history_is_bounded():
    bus = EventBus(history_size=3)
    for i in range(5):
        bus.emit(f"e{i}")
    assert bus.names() == ["e2", "e3", "e4"]


def test_subscribe_requires_callable():
    with pytest.raises(TypeError):
        EventBus().subscribe("x", "not callable")
