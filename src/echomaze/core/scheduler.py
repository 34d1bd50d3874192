from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Tolerance for accumulated float error when comparing due times.
_EPSILON = 1e-9


@dataclass(eq=False)
class TimerHandle:
    """A scheduled callback. Single-shot unless ``interval`` is set.

    Attributes:
        label: Human readable name used in logs.
        due: Clock time at which the callback fires next.
        interval: Period in seconds for repeating timers, None for single-shot.
    """

    label: str
    due: float
    callback: Callable[[], None]
    interval: Optional[float] = None
    cancelled: bool = False
    fired: int = 0

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        if self.cancelled:
            return False
        return self.interval is not None or self.fired == 0


@dataclass
class Scheduler:
    """Deterministic timer queue driven by ``advance(dt)``.

    Nothing runs on its own thread: the owner advances the clock (a real-time loop, a console
    session, or a test) and due callbacks run synchronously, earliest first, ties in scheduling
    order. Callback exceptions are logged and the remaining timers still run.
    """

    now: float = 0.0
    _queue: List[Tuple[float, int, TimerHandle]] = field(default_factory=list)
    _seq: "itertools.count[int]" = field(default_factory=itertools.count)

    def call_later(self, delay: float, callback: Callable[[], None], label: str = "") -> TimerHandle:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        handle = TimerHandle(label=label or getattr(callback, "__name__", "timer"), due=self.now + delay, callback=callback)
        self._push(handle)
        logger.debug("Scheduled '%s' at t=%.3f", handle.label, handle.due)
        return handle

    def call_every(
        self,
        interval: float,
        callback: Callable[[], None],
        label: str = "",
        first_delay: Optional[float] = None,
    ) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        delay = interval if first_delay is None else first_delay
        handle = TimerHandle(
            label=label or getattr(callback, "__name__", "periodic"),
            due=self.now + delay,
            callback=callback,
            interval=float(interval),
        )
        self._push(handle)
        logger.debug("Scheduled periodic '%s' every %.3fs", handle.label, interval)
        return handle

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        """Cancel a handle; None and already finished handles are ignored."""
        if handle is not None and handle.active:
            handle.cancel()
            logger.debug("Cancelled '%s'", handle.label)

    def cancel_all(self) -> None:
        for _, _, handle in self._queue:
            handle.cancel()
        self._queue.clear()

    @property
    def pending(self) -> List[str]:
        """Labels of active timers in firing order."""
        return [h.label for _, _, h in sorted(self._queue) if h.active]

    def advance(self, dt: float) -> int:
        """Move the clock forward by ``dt`` seconds, firing everything that comes due.

        Returns the number of callbacks run.
        """
        if dt < 0:
            raise ValueError("dt must be non-negative")
        target = self.now + dt
        fired = 0
        while self._queue and self._queue[0][0] <= target + _EPSILON:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self.now = max(self.now, due)
            handle.fired += 1
            if handle.interval is not None:
                handle.due = due + handle.interval
                self._push(handle)
            try:
                handle.callback()
            except Exception:  # noqa: BLE001 - one bad timer must not stall the clock
                logger.exception("Timer '%s' raised", handle.label)
            fired += 1
        self.now = max(self.now, target)
        return fired

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
