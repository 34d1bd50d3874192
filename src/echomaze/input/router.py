from __future__ import annotations

import logging
from typing import Callable, Optional

from ..exceptions import InvalidInputError
from ..maze.tiles import Direction
from .actions import HearRequested, InputEvent, MoveRequested, TapRequested

logger = logging.getLogger(__name__)


class GestureRouter:
    """Maps classified gestures from the touch front end to input events.

    The front end has already turned raw touch deltas into a direction and a finger count;
    this class only decides what that means: one finger listens, two or more move.

    Example usage:
        router = GestureRouter(runtime.dispatch)
        router.swipe(Direction.UP, finger_count=1)   # -> HearRequested(UP)
        router.tap()                                 # -> TapRequested()
    """

    def __init__(self, sink: Callable[[InputEvent], object]) -> None:
        self._sink = sink

    @staticmethod
    def classify(direction: Direction | str, finger_count: int) -> InputEvent:
        """Pure mapping; raises InvalidInputError for malformed gestures."""
        d = Direction.parse(direction)
        if isinstance(finger_count, bool) or not isinstance(finger_count, int) or finger_count < 1:
            raise InvalidInputError(f"Invalid finger count: {finger_count!r}")
        if finger_count == 1:
            return HearRequested(d)
        return MoveRequested(d)

    def swipe(self, direction: Direction | str, finger_count: int) -> Optional[InputEvent]:
        """Route a swipe; malformed gestures are dropped with a warning."""
        try:
            event = self.classify(direction, finger_count)
        except InvalidInputError as exc:
            logger.warning("Dropping gesture: %s", exc)
            return None
        logger.debug("Swipe %s with %d finger(s) -> %s", direction, finger_count, type(event).__name__)
        self._sink(event)
        return event

    def tap(self) -> InputEvent:
        event = TapRequested()
        self._sink(event)
        return event
