from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import random

from ..tiles import Grid, Position


@dataclass(frozen=True)
class GeneratedLevel:
    grid: Grid
    start: Position
    end: Position


class LevelGenerator(ABC):
    """Abstract base for level generators."""

    @abstractmethod
    def generate(self, rng: random.Random) -> GeneratedLevel:
        """Generate a level layout using the given random stream."""
        raise NotImplementedError
