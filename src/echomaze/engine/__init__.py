from .loop import EngineConfig, GameEngine
from .runtime import GameRuntime, build_generator
from .state import DeathCause, GameState, HearResult, Status

__all__ = [
    "DeathCause",
    "EngineConfig",
    "GameEngine",
    "GameRuntime",
    "GameState",
    "HearResult",
    "Status",
    "build_generator",
]
