"""Load and save generated terrain."""

from __future__ import annotations

import json
import gzip
from pathlib import Path

from ..worldgen.terrain import Terrain
from .serializer import terrain_from_dict, terrain_to_dict


def save_terrain(terrain: Terrain, path: str | Path, *, gzip_compress: bool = True) -> None:
    """Write ``terrain`` to ``path`` as JSON.

    Parameters
    ----------
    terrain:
        The generated :class:`~village_world.worldgen.terrain.Terrain`.
    path:
        Destination file path. Parent directories are created.
    gzip_compress:
        If ``True`` (default), compress the JSON using gzip.
    """

    text = json.dumps(terrain_to_dict(terrain))
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if gzip_compress:
        with gzip.open(path, "wt", encoding="utf-8") as fh:
            fh.write(text)
    else:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)


def load_terrain(path: str | Path, *, gzip_compress: bool = True) -> Terrain:
    """Read terrain from ``path`` and return a new :class:`Terrain`."""

    path = Path(path)
    if gzip_compress:
        with gzip.open(path, "rt", encoding="utf-8") as fh:
            data = json.load(fh)
    else:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    return terrain_from_dict(data)


__all__ = ["save_terrain", "load_terrain"]
