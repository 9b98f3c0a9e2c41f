"""Grid A* over a generated :class:`Terrain`."""

from __future__ import annotations

from heapq import heappop, heappush
from itertools import count
from typing import Callable, Dict, List, Optional, Tuple

from ...core.geometry import Coord
from ...worldgen.terrain import Terrain
from ...worldgen.tiles import is_walkable

WalkablePredicate = Callable[[Optional[int]], bool]


def _heuristic(a: Coord, b: Coord) -> int:
    """Return estimated distance between two points.

    Manhattan distance never overestimates on a 4-neighbour unit-cost grid.
    """

    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _neighbors(node: Coord) -> List[Coord]:
    """Return the cardinal neighbours of ``node``."""

    x, y = node
    return [Coord(x + 1, y), Coord(x - 1, y), Coord(x, y + 1), Coord(x, y - 1)]


def _reconstruct(came_from: Dict[Coord, Coord], current: Coord) -> List[Coord]:
    """Walk predecessors back from ``current``. The start cell is left out."""

    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.pop()
    path.reverse()
    return path


def find_path(
    terrain: Terrain,
    start: Tuple[int, int],
    goal: Tuple[int, int],
    walkable: WalkablePredicate | None = None,
) -> List[Coord] | None:
    """Return the shortest walkable route from ``start`` to ``goal``.

    The result lists future waypoints only: ``start`` is excluded and
    ``goal`` is the last element, so ``len(path)`` is the number of steps.
    ``start == goal`` yields ``[]``. ``None`` means the goal is unreachable;
    callers must test ``is None`` rather than truthiness.

    The start cell is never checked for walkability (the agent is already
    there); every other cell on the path must satisfy ``walkable``. Equal
    f-scores are expanded in insertion order so results are reproducible.
    """

    passable = walkable or is_walkable
    start = Coord(*start)
    goal = Coord(*goal)

    if not terrain.in_bounds(start) or not terrain.in_bounds(goal):
        return None
    if start == goal:
        return []
    if not passable(terrain.tile_at(goal)):
        return None

    tie = count()
    open_set: List[Tuple[int, int, Coord]] = []
    heappush(open_set, (_heuristic(start, goal), next(tie), start))

    came_from: Dict[Coord, Coord] = {}
    g_score: Dict[Coord, int] = {start: 0}
    closed: set[Coord] = set()

    while open_set:
        _f, _, current = heappop(open_set)

        if current == goal:
            return _reconstruct(came_from, current)

        if current in closed:
            continue
        closed.add(current)

        tentative_g = g_score[current] + 1
        for n in _neighbors(current):
            if n in closed or not passable(terrain.tile_at(n)):
                continue
            if tentative_g < g_score.get(n, 1 << 62):
                came_from[n] = current
                g_score[n] = tentative_g
                heappush(open_set, (tentative_g + _heuristic(n, goal), next(tie), n))

    return None


def path_cost(path: List[Coord] | None) -> int | None:
    """Number of unit steps in ``path`` (``None`` stays ``None``)."""

    return None if path is None else len(path)


__all__ = ["find_path", "path_cost", "WalkablePredicate"]
