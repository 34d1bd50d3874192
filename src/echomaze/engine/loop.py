from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .runtime import GameRuntime

logger = logging.getLogger(__name__)

TickHook = Callable[[GameRuntime, int], None]


@dataclass
class EngineConfig:
    """Settings for the frame loop that drives a runtime.

    Attributes:
        tick_rate: Target updates per second. If 0 or None, updates as fast as possible.
        max_steps: If provided and > 0, the loop stops after this many updates.
        fixed_dt: Simulated seconds per update. When set, the runtime clock advances by this
            amount every tick regardless of wall time, which makes headless runs reproducible.
    """

    tick_rate: float = 30.0
    max_steps: Optional[int] = None
    fixed_dt: Optional[float] = None


class GameEngine:
    """Headless frame loop: measures dt, advances the runtime clock, calls an optional hook.

    All game timing (goblin motion, proximity sampling, trap countdown, transitions) lives in
    the runtime's scheduler; this loop only feeds it time.
    """

    def __init__(
        self,
        runtime: GameRuntime,
        config: Optional[EngineConfig] = None,
        on_tick: Optional[TickHook] = None,
    ) -> None:
        self.runtime = runtime
        self.config = config or EngineConfig()
        self._on_tick = on_tick
        self._running: bool = False
        self._step: int = 0
        self._last_time: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        return self._step

    def start(self) -> None:
        """Start the loop state, starting the runtime if needed. Repeated calls are no-ops."""
        if self._running:
            logger.debug("GameEngine.start() called while already running")
            return
        if not self.runtime.started:
            self.runtime.start()
        self._running = True
        self._step = 0
        self._last_time = time.perf_counter()
        logger.info("GameEngine started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        logger.info("GameEngine stopped at step=%s (t=%.2f)", self._step, self.runtime.now)

    def update(self, dt: float) -> None:
        """Perform a single tick.

        Args:
            dt: Seconds since the last update. Replaced by ``fixed_dt`` when configured.
        """
        if not self._running:
            logger.debug("update() called while not running; ignored")
            return
        if self.config.fixed_dt is not None:
            dt = self.config.fixed_dt
        self._step += 1
        fired = self.runtime.advance(dt)
        logger.debug("Tick #%d (dt=%.4f, timers fired=%d)", self._step, dt, fired)
        if self._on_tick is not None:
            self._on_tick(self.runtime, self._step)

        if self.config.max_steps is not None and self._step >= self.config.max_steps:
            self.stop()

    def run(self) -> None:
        """Blocking loop until stopped or max_steps reached, throttled to tick_rate if set."""
        self.start()
        target_dt = 0.0
        if self.config.tick_rate and self.config.tick_rate > 0:
            target_dt = 1.0 / float(self.config.tick_rate)

        while self._running:
            now = time.perf_counter()
            dt = 0.0 if self._last_time is None else now - self._last_time
            self._last_time = now

            self.update(dt)

            if target_dt > 0:
                remaining = target_dt - (time.perf_counter() - now)
                if remaining > 0:
                    time.sleep(remaining)

        logger.info("Loop complete (steps=%d)", self._step)
