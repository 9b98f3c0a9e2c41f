"""Adjacency model learned from a sample grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Sequence, Set, Tuple

from ..core.geometry import Coord, Direction
from .tiles import VOID


@dataclass(frozen=True)
class CompatibilityModel:
    """Allowed neighbour tiles per ``(tile, direction)``.

    ``tiles`` holds every placeable tile; the ``VOID`` sentinel may appear in
    an allowed set (meaning the tile may sit on the grid border in that
    direction) but is never a member of ``tiles``.
    """

    tiles: FrozenSet[int]
    rules: Mapping[Tuple[int, Direction], FrozenSet[int]] = field(default_factory=dict)

    def allowed(self, tile: int, direction: Direction) -> FrozenSet[int]:
        """Return the tiles permitted next to ``tile`` in ``direction``."""
        return self.rules.get((tile, direction), frozenset())

    def permits(self, tile: int, direction: Direction, neighbor: int) -> bool:
        return neighbor in self.allowed(tile, direction)

    @classmethod
    def from_rules(
        cls, rules: Mapping[Tuple[int, Direction], Iterable[int]]
    ) -> "CompatibilityModel":
        """Build a model from hand-authored rules."""

        frozen = {key: frozenset(value) for key, value in rules.items()}
        tiles = frozenset(tile for tile, _ in frozen if tile != VOID)
        if not tiles:
            raise ValueError("compatibility model has no placeable tiles")
        return cls(tiles=tiles, rules=frozen)


def build_compatibility_model(sample_grid: Sequence[Sequence[int]]) -> CompatibilityModel:
    """Record every adjacency observed in ``sample_grid``.

    Cells beyond the sample edge count as ``VOID`` so that border tiles of the
    sample are only allowed on the border of generated grids.
    """

    if not sample_grid or not sample_grid[0]:
        raise ValueError("sample grid must be non-empty")
    width = len(sample_grid[0])
    height = len(sample_grid)
    if any(len(row) != width for row in sample_grid):
        raise ValueError("sample grid rows must all have the same length")

    rules: Dict[Tuple[int, Direction], Set[int]] = {}
    for y, row in enumerate(sample_grid):
        for x, tile in enumerate(row):
            tile = int(tile)
            if tile == VOID:
                continue
            for direction in Direction:
                other = Coord(x, y).offset(direction)
                if 0 <= other.x < width and 0 <= other.y < height:
                    neighbor = int(sample_grid[other.y][other.x])
                else:
                    neighbor = VOID
                rules.setdefault((tile, direction), set()).add(neighbor)

    if not rules:
        raise ValueError("sample grid contains only VOID tiles")
    return CompatibilityModel.from_rules(rules)


__all__ = ["CompatibilityModel", "build_compatibility_model"]
