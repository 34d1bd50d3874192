"""
Input layer: discrete events the runtime consumes.

Exposes:
- HearRequested, MoveRequested, TapRequested, BackstabRequested
- GestureRouter: (direction, finger count) -> event
"""
from .actions import BackstabRequested, HearRequested, InputEvent, MoveRequested, TapRequested
from .router import GestureRouter

__all__ = [
    "BackstabRequested",
    "HearRequested",
    "InputEvent",
    "MoveRequested",
    "TapRequested",
    "GestureRouter",
]
