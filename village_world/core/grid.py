"""Row-major 2D grid storage."""

from __future__ import annotations

from typing import Callable, Generic, Iterator, List, Sequence, Tuple, TypeVar

from .geometry import Coord, Direction, neighbors

T = TypeVar("T")


class Grid(Generic[T]):
    """Fixed size ``width`` × ``height`` grid addressed by :class:`Coord`."""

    def __init__(self, width: int, height: int, fill: Callable[[Coord], T]) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"grid dimensions must be at least 1x1, got {width}x{height}")
        self.width = width
        self.height = height
        self._cells: List[List[T]] = [
            [fill(Coord(x, y)) for x in range(width)] for y in range(height)
        ]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[T]]) -> "Grid[T]":
        """Build a grid from a list of equally sized rows."""

        if not rows or not rows[0]:
            raise ValueError("grid rows must be non-empty")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("grid rows must all have the same length")
        return cls(width, len(rows), lambda c: rows[c.y][c.x])

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def in_bounds(self, coord: Tuple[int, int]) -> bool:
        return 0 <= coord[0] < self.width and 0 <= coord[1] < self.height

    def get(self, coord: Tuple[int, int]) -> T | None:
        """Return the value at ``coord`` or ``None`` when out of bounds."""
        if not self.in_bounds(coord):
            return None
        return self._cells[coord[1]][coord[0]]

    def __getitem__(self, coord: Tuple[int, int]) -> T:
        if not self.in_bounds(coord):
            raise IndexError(f"{coord} outside {self.width}x{self.height} grid")
        return self._cells[coord[1]][coord[0]]

    def __setitem__(self, coord: Tuple[int, int], value: T) -> None:
        if not self.in_bounds(coord):
            raise IndexError(f"{coord} outside {self.width}x{self.height} grid")
        self._cells[coord[1]][coord[0]] = value

    def coords(self) -> Iterator[Coord]:
        """Iterate coordinates in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield Coord(x, y)

    def neighbors(self, coord: Tuple[int, int]) -> Iterator[Tuple[Direction, Coord]]:
        """Yield in-bounds cardinal neighbours of ``coord``."""
        for direction, other in neighbors(coord):
            if self.in_bounds(other):
                yield direction, other

    def rows(self) -> List[List[T]]:
        """Return a shallow copy of the rows."""
        return [list(row) for row in self._cells]


__all__ = ["Grid"]
