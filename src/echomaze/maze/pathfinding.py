from collections import deque
from typing import Optional

from .tiles import Grid, Position


def find_path_bfs(grid: Grid, start: Position, goal: Position) -> Optional[int]:
    """Breadth-first search shortest path length on PATH cells; returns number of steps or None.

    Uses 4-directional movement.
    """
    if not grid.is_path(start) or not grid.is_path(goal):
        return None

    q = deque([(start, 0)])
    seen = {start}
    while q:
        pos, d = q.popleft()
        if pos == goal:
            return d
        for nxt in grid.neighbors4(pos):
            if nxt not in seen and grid.is_path(nxt):
                seen.add(nxt)
                q.append((nxt, d + 1))
    return None


def reachable_from(grid: Grid, start: Position) -> set[Position]:
    """Return every PATH cell 4-connected to ``start``."""
    if not grid.is_path(start):
        return set()
    seen = {start}
    q = deque([start])
    while q:
        pos = q.popleft()
        for nxt in grid.neighbors4(pos):
            if nxt not in seen and grid.is_path(nxt):
                seen.add(nxt)
                q.append(nxt)
    return seen
