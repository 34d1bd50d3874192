from __future__ import annotations

import logging
import random
from dataclasses import replace
from threading import RLock
from typing import Callable, List, Optional

from ..audio.dispatch import CueDispatcher
from ..audio.interfaces import CueKind, HapticKind, ICueBackend, IHapticBackend
from ..audio.proximity import ProximityMonitor
from ..config import GameConfig
from ..core.events import EventBus, GameEvent
from ..core.scheduler import Scheduler, TimerHandle
from ..exceptions import InvalidInputError
from ..input.actions import BackstabRequested, HearRequested, InputEvent, MoveRequested, TapRequested
from ..maze.generator import LevelGenerator, WindingPathGenerator
from ..maze.tiles import Direction
from ..rng import RNGManager
from ..world.goblins import Goblin, advance_all, ambushing_goblins, backstab_target
from ..world.placement import place_goblins, place_traps
from .state import DeathCause, GameState, HearResult, Status

logger = logging.getLogger(__name__)


def build_generator(config: GameConfig) -> WindingPathGenerator:
    g = config.generator
    return WindingPathGenerator(
        size=config.grid.size,
        min_endpoint_distance=config.grid.min_endpoint_distance,
        turn_bias=g.turn_bias,
        greedy_bias=g.greedy_bias,
        room_chance=g.room_chance,
        max_rooms=g.max_rooms,
        room_min_distance_from_start=g.room_min_distance_from_start,
        room_min_distance_to_end=g.room_min_distance_to_end,
        room_clearance=g.room_clearance,
    )


class GameRuntime:
    """Owns one game session: the live GameState and everything that acts on it.

    Holds the scheduler with every timer handle, the audio/haptic collaborators, the random
    streams and the event bus, so nothing lives in module globals and ``shutdown()`` tears it
    all down.

    Timers are tied to a level *generation*. Starting, restarting or continuing a level bumps
    the generation, and any callback scheduled under an older one is dropped when it fires.
    A death timer from the previous attempt can therefore never hit the next one.

    Every public operation runs under one lock, reads the current snapshot, decides, and commits
    a new snapshot. The goblin motion tick goes through the same lock, so a Move or Backstab is
    always judged against the goblin positions it commits with.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        audio: Optional[ICueBackend] = None,
        haptics: Optional[IHapticBackend] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        bus: Optional[EventBus] = None,
        rngs: Optional[RNGManager] = None,
        generator: Optional[LevelGenerator] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.scheduler = scheduler or Scheduler()
        self.bus = bus or EventBus()
        self.rngs = rngs or RNGManager(self.config.seed)
        self.generator = generator or build_generator(self.config)
        self.cues = CueDispatcher(audio, haptics)
        self.proximity = ProximityMonitor(self.cues, self.config.audio.max_audible_distance)

        self._lock = RLock()
        self._state: Optional[GameState] = None
        self._generation = 0
        self._motion_rng = random.Random(0)
        self._hearing = False
        self._last_tap: Optional[float] = None
        self._trap_remaining: Optional[int] = None
        self._trap_timer: Optional[TimerHandle] = None
        self._transition_timer: Optional[TimerHandle] = None
        self._hear_timer: Optional[TimerHandle] = None
        self._periodic: List[TimerHandle] = []

    # ----- Introspection -----

    @property
    def state(self) -> GameState:
        with self._lock:
            if self._state is None:
                raise RuntimeError("GameRuntime.start() has not been called")
            return self._state

    @property
    def started(self) -> bool:
        return self._state is not None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def hearing(self) -> bool:
        return self._hearing

    @property
    def trap_countdown(self) -> Optional[int]:
        """Seconds left on the armed trap, or None when the player is not on one."""
        return self._trap_remaining

    @property
    def now(self) -> float:
        return self.scheduler.now

    # ----- Lifecycle -----

    def start(self, initial: Optional[GameState] = None) -> GameState:
        """Begin the session with level 1, or with a prepared state."""
        with self._lock:
            state = initial or self._build_level(1)
            self._motion_rng = self.rngs.context_rng("goblin_motion", state.level)
            self._begin(state, GameEvent.LEVEL_STARTED)
            return state

    def restart_level(self) -> GameState:
        """Same level again: player back at the start, traps and goblins left as they are."""
        with self._lock:
            current = self.state
            state = replace(current, player=current.start, status=Status.PLAYING)
            logger.info("Restarting level %d", state.level)
            self._begin(state, GameEvent.LEVEL_RESTARTED)
            return state

    def continue_to_next_level(self) -> GameState:
        """Brand new layout, traps and goblins."""
        with self._lock:
            level = self.state.level + 1
            state = self._build_level(level)
            self._motion_rng = self.rngs.context_rng("goblin_motion", level)
            self._begin(state, GameEvent.LEVEL_STARTED)
            return state

    def shutdown(self) -> None:
        with self._lock:
            self._generation += 1
            self._disarm_trap()
            self._cancel_timers()
            self.proximity.reset()
            logger.info("Runtime shut down at t=%.2f", self.scheduler.now)

    def advance(self, dt: float) -> int:
        """Advance the session clock; due timers fire under the runtime lock."""
        with self._lock:
            return self.scheduler.advance(dt)

    def __enter__(self) -> "GameRuntime":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # ----- Player actions -----

    def dispatch(self, event: InputEvent) -> object:
        if isinstance(event, HearRequested):
            return self.hear(event.direction)
        if isinstance(event, MoveRequested):
            return self.move(event.direction)
        if isinstance(event, TapRequested):
            return self.tap()
        if isinstance(event, BackstabRequested):
            return self.backstab()
        raise InvalidInputError(f"Unsupported input event: {event!r}")

    def hear(self, direction: Direction | str) -> Optional[HearResult]:
        """Listen toward a neighbouring cell. Read-only; ignored while a previous hear is playing.

        Returns the classification, or None when the request was ignored.
        """
        d = Direction.parse(direction)
        with self._lock:
            state = self.state
            if not state.playing:
                logger.debug("Hear blocked: status=%s", state.status.name)
                return None
            if self._hearing:
                logger.debug("Hear ignored: previous hear still playing")
                return None
            self._hearing = True
            result = state.classify(state.player.step(d))
            logger.debug("Hear %s from %s -> %s", d.name, state.player, result.name)
            self.cues.cue(CueKind.HEAR_AMBIENT)
            self._hear_timer = self._later(
                self.config.timing.hear_result_delay, lambda: self._finish_hear(result), "hear_result"
            )
            return result

    def move(self, direction: Direction | str) -> Status:
        d = Direction.parse(direction)
        with self._lock:
            state = self.state
            if not state.playing:
                logger.debug("Move blocked: status=%s", state.status.name)
                return state.status

            target = state.player.step(d)
            if not state.grid.in_bounds(target):
                self._die(DeathCause.FELL, attempted=target)
                return Status.DEAD
            if not state.grid.is_path(target):
                self._die(DeathCause.WALL, attempted=target)
                return Status.DEAD
            ambushers = ambushing_goblins(state.goblins, state.player)
            if ambushers:
                self._die(DeathCause.AMBUSH, goblin_id=ambushers[0].id)
                return Status.DEAD

            left_trap = state.on_trap
            self._state = replace(state, player=target)
            self.cues.cue(CueKind.STEP, HapticKind.LIGHT_IMPACT)
            self.bus.emit(GameEvent.PLAYER_MOVED, {"from": state.player, "to": target, "direction": d})
            logger.debug("Player moved %s to %s", d.name, target)
            if left_trap:
                self._disarm_trap()

            if target == state.end:
                self._win()
            elif target in state.traps:
                self._arm_trap()
            return self._state.status

    def tap(self) -> Optional[Goblin]:
        """Register a tap; a second tap within the double-tap window backstabs."""
        with self._lock:
            if not self.state.playing:
                return None
            now = self.scheduler.now
            previous = self._last_tap
            self._last_tap = now
            if previous is not None and 0 < now - previous <= self.config.timing.double_tap_window:
                self._last_tap = None
                return self.backstab()
            return None

    def backstab(self) -> Optional[Goblin]:
        """Attack. Kills a retreating adjacent goblin; fatal if one is coming at the player.

        Returns the killed goblin, or None.
        """
        with self._lock:
            state = self.state
            if not state.playing:
                return None
            ambushers = ambushing_goblins(state.goblins, state.player)
            if ambushers:
                self._die(DeathCause.AMBUSH, goblin_id=ambushers[0].id)
                return None
            victim = backstab_target(state.goblins, state.player)
            if victim is None:
                logger.debug("Backstab missed at %s", state.player)
                return None
            self._state = state.without_goblin(victim.id)
            self.proximity.forget(victim.id)
            self.cues.cue(CueKind.ATTACK, HapticKind.SUCCESS)
            self.bus.emit(GameEvent.GOBLIN_KILLED, {"goblin_id": victim.id, "position": victim.position})
            logger.info("Goblin %d killed at %s", victim.id, victim.position)
            return victim

    # ----- Periodic tasks -----

    def _goblin_tick(self) -> None:
        state = self._state
        if state is None or not state.playing or not state.goblins:
            return
        moved = advance_all(state.goblins, state.grid, state.player, self._motion_rng)
        self._state = replace(state, goblins=moved)
        for before, after in zip(state.goblins, moved):
            if before.position != after.position:
                self.bus.emit(
                    GameEvent.GOBLIN_MOVED,
                    {"goblin_id": after.id, "from": before.position, "to": after.position, "direction": after.direction},
                )

    def _proximity_tick(self) -> None:
        state = self._state
        if state is None or not state.playing:
            return
        self.proximity.sample(state.goblins, state.player)

    # ----- Transitions -----

    def _build_level(self, level: int) -> GameState:
        layout = self.generator.generate(self.rngs.context_rng("layout", level))
        placement_rng = self.rngs.context_rng("placement", level)
        traps = place_traps(layout.grid, layout.start, layout.end, self.config.entities.trap_count, placement_rng)
        goblins = place_goblins(
            layout.grid,
            layout.start,
            layout.end,
            layout.start,
            placement_rng,
            max_goblins=self.config.entities.max_goblins,
        )
        return GameState(
            grid=layout.grid,
            player=layout.start,
            start=layout.start,
            end=layout.end,
            traps=traps,
            goblins=goblins,
            status=Status.PLAYING,
            level=level,
        )

    def _begin(self, state: GameState, event: str) -> None:
        self._generation += 1
        self._disarm_trap()
        self._cancel_timers()
        self.proximity.reset()
        self._hearing = False
        self._last_tap = None
        self._state = state

        timing = self.config.timing
        self._periodic = [
            self._every(timing.goblin_tick_interval, self._goblin_tick, "goblin_motion"),
            self._every(timing.proximity_sample_interval, self._proximity_tick, "goblin_proximity"),
        ]
        self.cues.cue(CueKind.LEVEL_START)
        self.bus.emit(
            event,
            {"level": state.level, "start": state.start, "end": state.end, "goblins": len(state.goblins)},
        )
        logger.info(
            "Level %d (generation %d): start=%s end=%s traps=%d goblins=%d",
            state.level,
            self._generation,
            state.start,
            state.end,
            len(state.traps),
            len(state.goblins),
        )

    def _die(self, cause: DeathCause, **details: object) -> None:
        state = self.state
        self._disarm_trap()
        self._drop_hear()
        self._state = state.with_status(Status.DEAD)
        self.proximity.reset()
        self.cues.cue(CueKind.DEATH, HapticKind.ERROR)
        self.bus.emit(GameEvent.PLAYER_DIED, {"cause": cause, "position": state.player, **details})
        logger.info("Player died at %s: %s", state.player, cause.value)
        self._transition_timer = self._later(self.config.timing.death_restart_delay, self.restart_level, "restart_level")

    def _win(self) -> None:
        state = self.state
        self._disarm_trap()
        self._drop_hear()
        self._state = state.with_status(Status.WON)
        self.proximity.reset()
        self.cues.cue(CueKind.WIN, HapticKind.SUCCESS)
        self.bus.emit(GameEvent.LEVEL_WON, {"level": state.level})
        logger.info("Level %d cleared", state.level)
        self._transition_timer = self._later(
            self.config.timing.win_continue_delay, self.continue_to_next_level, "next_level"
        )

    def _finish_hear(self, result: HearResult) -> None:
        self._hearing = False
        self._hear_timer = None
        kind = CueKind.CAVE if result is HearResult.PATH else CueKind.WIND
        self.cues.cue(kind, HapticKind.LIGHT_IMPACT)

    def _drop_hear(self) -> None:
        """Cancel a pending echo; a death or win supersedes it."""
        self.scheduler.cancel(self._hear_timer)
        self._hear_timer = None
        self._hearing = False

    def _arm_trap(self) -> None:
        timing = self.config.timing
        self._trap_remaining = timing.trap_countdown_seconds
        self.cues.cue(CueKind.TRAP_LOOP_START)
        self.bus.emit(GameEvent.TRAP_ARMED, {"position": self.state.player, "seconds": self._trap_remaining})
        logger.info("Trap armed at %s (%ds)", self.state.player, self._trap_remaining)
        self._trap_timer = self._every(timing.trap_tick_interval, self._trap_tick, "trap_countdown")

    def _trap_tick(self) -> None:
        if self._trap_remaining is None:
            return
        self._trap_remaining -= 1
        self.cues.cue(CueKind.TICK_COUNTDOWN)
        self.bus.emit(GameEvent.TRAP_TICK, {"remaining": self._trap_remaining})
        if self._trap_remaining <= 0:
            self._die(DeathCause.TRAP)

    def _disarm_trap(self) -> None:
        if self._trap_remaining is None:
            return
        self.scheduler.cancel(self._trap_timer)
        self._trap_timer = None
        self._trap_remaining = None
        self.cues.cue(CueKind.TRAP_LOOP_STOP)
        self.bus.emit(GameEvent.TRAP_DISARMED, {})

    # ----- Timer plumbing -----

    def _guard(self, fn: Callable[[], object], label: str) -> Callable[[], None]:
        generation = self._generation

        def run() -> None:
            with self._lock:
                if generation != self._generation:
                    logger.debug("Dropping stale '%s' (generation %d, now %d)", label, generation, self._generation)
                    return
                fn()

        run.__name__ = label
        return run

    def _later(self, delay: float, fn: Callable[[], object], label: str) -> TimerHandle:
        return self.scheduler.call_later(delay, self._guard(fn, label), label)

    def _every(self, interval: float, fn: Callable[[], object], label: str) -> TimerHandle:
        return self.scheduler.call_every(interval, self._guard(fn, label), label)

    def _cancel_timers(self) -> None:
        for handle in (self._trap_timer, self._transition_timer, self._hear_timer, *self._periodic):
            self.scheduler.cancel(handle)
        self._trap_timer = None
        self._transition_timer = None
        self._hear_timer = None
        self._periodic = []
