from .tiles import Cell, Direction, Grid, Position
from .generator import GeneratedLevel, WindingPathGenerator

__all__ = ["Cell", "Direction", "Grid", "Position", "GeneratedLevel", "WindingPathGenerator"]
