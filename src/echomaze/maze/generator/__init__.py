from .base import GeneratedLevel, LevelGenerator
from .winding import WindingPathGenerator, generate_level

__all__ = ["GeneratedLevel", "LevelGenerator", "WindingPathGenerator", "generate_level"]
