import logging
from random import Random

import pytest

from village_world.core.geometry import Coord, Direction
from village_world.worldgen.model import build_compatibility_model
from village_world.worldgen.solver import (
    Contradiction,
    GenerationExhausted,
    generate,
    generate_with_retry,
)
from village_world.worldgen.tiles import Tile

WATER = int(Tile.WATER)


def _assert_sound(rows, model):
    height, width = len(rows), len(rows[0])
    for y in range(height):
        for x in range(width):
            tile = rows[y][x]
            assert tile in model.tiles
            if x + 1 < width:
                assert rows[y][x + 1] in model.allowed(tile, Direction.E)
            if y + 1 < height:
                assert rows[y + 1][x] in model.allowed(tile, Direction.S)


@pytest.mark.parametrize("mode", ["local", "full"])
def test_distinct_sample_reproduces_itself(distinct_sample, mode):
    model = build_compatibility_model(distinct_sample)
    for seed in range(5):
        result = generate(3, 3, model, seed, propagation=mode)
        assert not isinstance(result, Contradiction)
        assert result.rows() == distinct_sample


@pytest.mark.parametrize("mode", ["local", "full"])
def test_generated_pairs_respect_model(island_model, mode):
    successes = 0
    for seed in range(40):
        result = generate(7, 6, island_model, seed, propagation=mode)
        if isinstance(result, Contradiction):
            continue
        successes += 1
        _assert_sound(result.rows(), island_model)
    assert successes > 0


def test_island_border_is_water(island_model):
    terrain = generate_with_retry(10, 8, island_model, 3, propagation="full")
    rows = terrain.tiles
    assert all(t == WATER for t in rows[0])
    assert all(t == WATER for t in rows[-1])
    assert all(row[0] == WATER and row[-1] == WATER for row in rows)
    assert list(terrain.violations()) == []


def test_same_seed_same_terrain(island_model):
    a = generate_with_retry(12, 9, island_model, 42, propagation="full")
    b = generate_with_retry(12, 9, island_model, 42, propagation="full")
    assert a.tiles == b.tiles


def test_shared_rng_is_accepted(island_model):
    rng = Random(5)
    terrain = generate_with_retry(5, 5, island_model, rng, max_attempts=200)
    assert terrain.size == (5, 5)
    assert list(terrain.violations()) == []


def test_single_cell_grid(island_model):
    result = generate(1, 1, island_model, 0)
    assert result.rows() == [[WATER]]


def test_unsatisfiable_width_contradicts():
    model = build_compatibility_model([[0, 1]])
    result = generate(3, 1, model, 0)
    assert isinstance(result, Contradiction)
    assert not result
    assert result.cell == Coord(1, 0)


def test_exhaustion_raises_and_logs(caplog):
    model = build_compatibility_model([[0, 1]])
    with caplog.at_level(logging.ERROR, logger="village_world.worldgen.solver"):
        with pytest.raises(GenerationExhausted) as info:
            generate_with_retry(3, 1, model, 0, max_attempts=3)
    assert info.value.attempts == 3
    assert isinstance(info.value.last, Contradiction)
    assert isinstance(info.value, RuntimeError)
    assert any("Exhausted 3 attempts" in r.getMessage() for r in caplog.records)


def test_invalid_arguments(island_model):
    with pytest.raises(ValueError):
        generate(0, 4, island_model)
    with pytest.raises(ValueError):
        generate(4, 4, island_model, propagation="global")
    with pytest.raises(ValueError):
        generate_with_retry(4, 4, island_model, max_attempts=0)
