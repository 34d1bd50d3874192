import logging
from collections import deque
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable, Deque, Dict, List, Optional

logger = logging.getLogger(__name__)

ALL_EVENTS = "*"


class GameEvent:
    """Centralized event names published by the runtime."""

    LEVEL_STARTED = "level.started"
    LEVEL_RESTARTED = "level.restarted"
    LEVEL_WON = "level.won"
    PLAYER_MOVED = "player.moved"
    PLAYER_DIED = "player.died"
    GOBLIN_MOVED = "goblin.moved"
    GOBLIN_KILLED = "goblin.killed"
    TRAP_ARMED = "trap.armed"
    TRAP_TICK = "trap.tick"
    TRAP_DISARMED = "trap.disarmed"


@dataclass(frozen=True)
class Event:
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


Handler = Callable[[Event], None]


class EventBus:
    """Thread-safe publish/subscribe bus for runtime notifications.

    Handlers subscribe to an event name, or to ``"*"`` for everything. Each published event is
    also kept in a bounded ``history`` so observers that attach late (or tests) can inspect
    what happened. A failing handler is logged and does not stop the others.
    """

    def __init__(self, history_size: int = 256) -> None:
        self._lock = RLock()
        self._handlers: Dict[str, List[Handler]] = {}
        self._history: Deque[Event] = deque(maxlen=max(1, history_size))

    def subscribe(self, name: str, handler: Handler) -> None:
        if not callable(handler):
            raise TypeError("handler must be callable")
        with self._lock:
            self._handlers.setdefault(name, []).append(handler)
        logger.debug("Subscribed %s to '%s'", getattr(handler, "__name__", repr(handler)), name)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        """Silently ignores handlers that are not subscribed."""
        with self._lock:
            handlers = self._handlers.get(name)
            if handlers and handler in handlers:
                handlers.remove(handler)

    def emit(self, name: str, payload: Optional[Dict[str, Any]] = None) -> Event:
        event = Event(name, dict(payload or {}))
        with self._lock:
            self._history.append(event)
            handlers = list(self._handlers.get(name, [])) + list(self._handlers.get(ALL_EVENTS, []))
        logger.debug("Emitting '%s' to %d handlers: %r", name, len(handlers), event.payload)
        for handler in handlers:
            try:
                handler(event)
            except Exception as exc:  # noqa: BLE001 - observers must not break the game
                logger.exception("Error in event handler for '%s': %s", name, exc)
        return event

    @property
    def history(self) -> List[Event]:
        with self._lock:
            return list(self._history)

    def names(self) -> List[str]:
        """Names of the events in history, oldest first."""
        return [e.name for e in self.history]
