"""Tile taxonomy used by terrain generation and walkability."""

from __future__ import annotations

from enum import IntEnum


class Tile(IntEnum):
    """Discrete terrain symbols. Values are the pattern ids stored in the grid."""

    GRASS_CENTER = 0
    GRASS_EDGE_N = 1
    GRASS_EDGE_E = 2
    GRASS_EDGE_S = 3
    GRASS_EDGE_W = 4
    GRASS_CORNER_NE = 5
    GRASS_CORNER_SE = 6
    GRASS_CORNER_SW = 7
    GRASS_CORNER_NW = 8
    WATER = 9
    # Out-of-bounds / empty. Only ever appears in a model as the neighbour
    # of a sample edge; never placed into a live possibility set.
    VOID = 255


VOID = int(Tile.VOID)

IMPASSABLE_TILES = frozenset({int(Tile.VOID), int(Tile.WATER)})


def is_walkable(tile: int | None) -> bool:
    """Return ``True`` if an agent may stand on ``tile``."""

    return tile is not None and tile not in IMPASSABLE_TILES


def tile_from_name(name: str | int) -> int:
    """Resolve a tile given as an enum name (``"grass_center"``) or an int."""

    if isinstance(name, int):
        return name
    key = name.strip().upper()
    try:
        return int(Tile[key])
    except KeyError:
        pass
    try:
        return int(key)
    except ValueError:
        raise ValueError(f"Unknown tile: {name!r}") from None


__all__ = ["Tile", "VOID", "IMPASSABLE_TILES", "is_walkable", "tile_from_name"]
