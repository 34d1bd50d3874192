from .events import Event, EventBus, GameEvent
from .scheduler import Scheduler, TimerHandle

__all__ = ["Event", "EventBus", "GameEvent", "Scheduler", "TimerHandle"]
