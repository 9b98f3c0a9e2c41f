"""Immutable handle on a generated terrain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from ..core.geometry import Coord, Direction
from ..core.grid import Grid
from .model import CompatibilityModel
from .tiles import is_walkable


@dataclass(frozen=True)
class Terrain:
    """Resolved tile grid plus the model that produced it.

    Built once per generation run and never mutated afterwards; consumers
    (pathfinding, spawning, rendering) receive it explicitly.
    """

    tiles: Tuple[Tuple[int, ...], ...]
    model: CompatibilityModel | None = None

    def __post_init__(self) -> None:
        if not self.tiles or not self.tiles[0]:
            raise ValueError("terrain must be at least 1x1")
        width = len(self.tiles[0])
        if any(len(row) != width for row in self.tiles):
            raise ValueError("terrain rows must all have the same length")

    @classmethod
    def from_grid(cls, grid: Grid[int], model: CompatibilityModel | None = None) -> "Terrain":
        return cls(tuple(tuple(int(t) for t in row) for row in grid.rows()), model)

    @classmethod
    def from_rows(
        cls, rows: Sequence[Sequence[int]], model: CompatibilityModel | None = None
    ) -> "Terrain":
        return cls(tuple(tuple(int(t) for t in row) for row in rows), model)

    @property
    def width(self) -> int:
        return len(self.tiles[0])

    @property
    def height(self) -> int:
        return len(self.tiles)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def in_bounds(self, coord: Tuple[int, int]) -> bool:
        return 0 <= coord[0] < self.width and 0 <= coord[1] < self.height

    def tile_at(self, coord: Tuple[int, int]) -> int | None:
        """Return the tile at ``coord`` or ``None`` when out of bounds."""
        if not self.in_bounds(coord):
            return None
        return self.tiles[coord[1]][coord[0]]

    def is_walkable(self, coord: Tuple[int, int]) -> bool:
        return is_walkable(self.tile_at(coord))

    def coords(self) -> Iterator[Coord]:
        for y in range(self.height):
            for x in range(self.width):
                yield Coord(x, y)

    def walkable_coords(self) -> Iterator[Coord]:
        return (c for c in self.coords() if self.is_walkable(c))

    def violations(self) -> Iterator[Tuple[Coord, Direction, Coord]]:
        """Yield adjacent pairs that break ``model``. Empty when no model is attached."""

        if self.model is None:
            return
        for coord in self.coords():
            tile = self.tiles[coord.y][coord.x]
            for direction in (Direction.E, Direction.S, Direction.W, Direction.N):
                other = coord.offset(direction)
                neighbor = self.tile_at(other)
                if neighbor is None:
                    continue
                if not self.model.permits(tile, direction, neighbor):
                    yield coord, direction, other


__all__ = ["Terrain"]
