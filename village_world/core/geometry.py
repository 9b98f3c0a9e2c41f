"""Grid coordinates, cardinal directions and space conversions."""

from __future__ import annotations

import math
from enum import Enum
from typing import Iterator, NamedTuple, Tuple

# World units covered by a single tile.
TILE_SIZE = 16.0


class Coord(NamedTuple):
    """Integer cell coordinate. ``y`` grows downward (row index)."""

    x: int
    y: int

    def offset(self, direction: "Direction") -> "Coord":
        dx, dy = direction.value
        return Coord(self.x + dx, self.y + dy)

    def manhattan(self, other: Tuple[int, int]) -> int:
        return abs(self.x - other[0]) + abs(self.y - other[1])

    def distance2(self, other: Tuple[int, int]) -> int:
        dx = self.x - other[0]
        dy = self.y - other[1]
        return dx * dx + dy * dy

    def to_world_space(self) -> Tuple[float, float]:
        """Return the world-space position of this cell's origin."""
        return (self.x * TILE_SIZE, self.y * TILE_SIZE)


class Direction(Enum):
    """The four grid-axis neighbours."""

    N = (0, -1)
    E = (1, 0)
    S = (0, 1)
    W = (-1, 0)

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


_OPPOSITES = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}


def neighbors(coord: Tuple[int, int]) -> Iterator[Tuple[Direction, Coord]]:
    """Yield ``(direction, coord)`` for the four cardinal neighbours of ``coord``."""

    x, y = coord
    for direction in Direction:
        yield direction, Coord(x + direction.dx, y + direction.dy)


def to_grid_space(pos: Tuple[float, float]) -> Coord:
    """Convert a world-space position to the nearest cell (tiles are centred on their origin)."""

    return Coord(int(math.floor(pos[0] / TILE_SIZE + 0.5)), int(math.floor(pos[1] / TILE_SIZE + 0.5)))


def direction_towards(
    origin: Tuple[float, float], target: Tuple[float, float]
) -> Direction | None:
    """Return the cardinal direction from ``origin`` towards ``target``.

    The normalised delta is rounded per axis; diagonals and zero-length
    deltas have no cardinal direction and return ``None``.
    """

    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    length = math.hypot(dx, dy)
    if length == 0:
        return None
    rounded = (round(dx / length), round(dy / length))
    for direction in Direction:
        if direction.value == rounded:
            return direction
    return None


__all__ = [
    "TILE_SIZE",
    "Coord",
    "Direction",
    "neighbors",
    "to_grid_space",
    "direction_towards",
]
