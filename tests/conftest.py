# tests/conftest.py
from typing import Iterable, List, Tuple

import pytest

from village_world.core.component_manager import ComponentManager
from village_world.core.entity_manager import EntityManager
from village_world.core.world import World
from village_world.reservations.manager import ReservationManager
from village_world.worldgen.model import build_compatibility_model
from village_world.worldgen.samples import ISLAND_SAMPLE
from village_world.worldgen.terrain import Terrain
from village_world.worldgen.tiles import Tile

GRASS = int(Tile.GRASS_CENTER)
WATER = int(Tile.WATER)


def _open_terrain(width: int, height: int, blocked: Iterable[Tuple[int, int]] = ()) -> Terrain:
    rows: List[List[int]] = [[GRASS] * width for _ in range(height)]
    for x, y in blocked:
        rows[y][x] = WATER
    return Terrain.from_rows(rows)


@pytest.fixture
def open_terrain():
    """Factory for all-grass terrain with ``blocked`` cells turned to water."""
    return _open_terrain


@pytest.fixture
def make_world():
    """Factory for a world with fresh managers but no registered systems."""

    def factory(terrain: Terrain, seed: int = 7, cell_size: int = 2) -> World:
        world = World(terrain, seed=seed)
        world.entity_manager = EntityManager()
        world.component_manager = ComponentManager()
        world.reservations = ReservationManager(cell_size=cell_size)
        return world

    return factory


@pytest.fixture
def island_model():
    return build_compatibility_model(ISLAND_SAMPLE)


@pytest.fixture
def distinct_sample():
    """3x3 sample of nine distinct tiles."""
    return [[0, 1, 2], [3, 4, 5], [6, 7, 8]]
