"""Helpers for serializing generated terrain to JSON."""

from __future__ import annotations

from typing import Any, Dict, List

from ..core.geometry import Direction
from ..worldgen.model import CompatibilityModel
from ..worldgen.terrain import Terrain

FORMAT_VERSION = 1


def model_to_dict(model: CompatibilityModel) -> Dict[str, Any]:
    """Serialize ``model`` as ``{"tiles": [...], "rules": [[tile, dir, [allowed]]]}``."""

    rules: List[List[Any]] = [
        [tile, direction.name, sorted(allowed)]
        for (tile, direction), allowed in sorted(
            model.rules.items(), key=lambda item: (item[0][0], item[0][1].name)
        )
    ]
    return {"tiles": sorted(model.tiles), "rules": rules}


def model_from_dict(data: Dict[str, Any]) -> CompatibilityModel:
    rules = {
        (int(tile), Direction[name]): frozenset(int(t) for t in allowed)
        for tile, name, allowed in data.get("rules", [])
    }
    return CompatibilityModel(tiles=frozenset(int(t) for t in data["tiles"]), rules=rules)


def terrain_to_dict(terrain: Terrain) -> Dict[str, Any]:
    """Serialize ``terrain`` into a dictionary."""

    return {
        "version": FORMAT_VERSION,
        "size": list(terrain.size),
        "tiles": [list(row) for row in terrain.tiles],
        "model": model_to_dict(terrain.model) if terrain.model is not None else None,
    }


def terrain_from_dict(data: Dict[str, Any]) -> Terrain:
    """Create a :class:`Terrain` from ``data`` produced by :func:`terrain_to_dict`."""

    version = data.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise ValueError(f"unsupported terrain format version: {version}")
    model_data = data.get("model")
    model = model_from_dict(model_data) if model_data else None
    terrain = Terrain.from_rows(data["tiles"], model)
    size = data.get("size")
    if size is not None and tuple(size) != terrain.size:
        raise ValueError(f"terrain size {tuple(size)} does not match tiles {terrain.size}")
    return terrain


__all__ = [
    "FORMAT_VERSION",
    "model_to_dict",
    "model_from_dict",
    "terrain_to_dict",
    "terrain_from_dict",
]
