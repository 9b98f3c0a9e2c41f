"""Reference sample grids the compatibility model is learned from."""

from __future__ import annotations

from pathlib import Path
from typing import List

import yaml

from .tiles import Tile, tile_from_name

_W = Tile.WATER
_C = Tile.GRASS_CENTER

# A grass island surrounded by water. Water borders every edge, so any grid
# size can be tiled by the learned model.
ISLAND_SAMPLE: List[List[int]] = [
    [int(t) for t in row]
    for row in (
        (_W, _W, _W, _W, _W, _W),
        (_W, Tile.GRASS_CORNER_NW, Tile.GRASS_EDGE_N, Tile.GRASS_EDGE_N, Tile.GRASS_CORNER_NE, _W),
        (_W, Tile.GRASS_EDGE_W, _C, _C, Tile.GRASS_EDGE_E, _W),
        (_W, Tile.GRASS_EDGE_W, _C, _C, Tile.GRASS_EDGE_E, _W),
        (_W, Tile.GRASS_CORNER_SW, Tile.GRASS_EDGE_S, Tile.GRASS_EDGE_S, Tile.GRASS_CORNER_SE, _W),
        (_W, _W, _W, _W, _W, _W),
    )
]

SAMPLES = {"island": ISLAND_SAMPLE}


def load_sample(source: str | Path) -> List[List[int]]:
    """Return a sample grid by built-in name or from a YAML file.

    The YAML document is a list of rows; each entry is a tile name such as
    ``grass_edge_n`` or an integer pattern id.
    """

    if isinstance(source, str) and source in SAMPLES:
        return [list(row) for row in SAMPLES[source]]

    path = Path(source)
    if not path.is_file():
        raise FileNotFoundError(f"sample grid not found: {source}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    if not isinstance(raw, list) or not all(isinstance(row, list) for row in raw):
        raise ValueError(f"sample grid in {path} must be a list of rows")
    return [[tile_from_name(cell) for cell in row] for row in raw]


__all__ = ["ISLAND_SAMPLE", "SAMPLES", "load_sample"]
