import logging

import pytest

from village_world import main as main_mod
from village_world.config import load_config
from village_world.core.components import Gatherer, Inventory, Position
from village_world.persistence.event_log import RESOURCE_SPAWNED, iter_events
from village_world.persistence.save_load import load_terrain
from village_world.reservations.manager import ResourceState
from village_world.systems.ai.villager_system import VillagerSystem
from village_world.systems.movement.movement_system import MovementSystem
from village_world.systems.reservation_system import ReservationSystem
from village_world.worldgen.solver import GenerationExhausted


MEADOW = (
    "- [grass_center, grass_center, grass_center]\n"
    "- [grass_center, water, grass_center]\n"
    "- [grass_center, grass_center, grass_center]\n"
)


def _write_config(tmp_path, extra="", sample=None):
    if sample is None:
        sample = tmp_path / "meadow.yaml"
        sample.write_text(MEADOW, encoding="utf-8")
    path = tmp_path / "config.yaml"
    path.write_text(
        "world:\n"
        "  size: [12, 10]\n"
        "  seed: 21\n"
        "  tick_rate: 1000\n"
        "worldgen:\n"
        "  propagation: full\n"
        "  max_attempts: 200\n"
        f"  sample: {sample}\n"
        "resources:\n"
        "  density: 0.3\n"
        "  cell_size: 3\n"
        "villagers:\n"
        "  count: 3\n"
        "  gather_ticks: 2\n"
        + extra,
        encoding="utf-8",
    )
    return path


def test_bootstrap_builds_world(tmp_path):
    world = main_mod.bootstrap(_write_config(tmp_path))
    assert world.size == (12, 10)
    assert list(world.terrain.violations()) == []
    systems = list(world.systems_manager)
    assert [type(s) for s in systems] == [ReservationSystem, VillagerSystem, MovementSystem]
    villagers = world.component_manager.entities_with(Gatherer, Inventory)
    assert len(villagers) == 3
    for vid in villagers:
        pos = world.component_manager.get_component(vid, Position)
        assert world.terrain.is_walkable(pos.coord)
    assert len(world.reservations) > 0


def test_run_keeps_reservations_exclusive(tmp_path):
    world = main_mod.bootstrap(_write_config(tmp_path))
    for _ in range(60):
        main_mod.step(world)
        owners = {}
        for vid in world.component_manager.entities_with(Gatherer):
            for rid in world.reservations.targets_of(vid):
                assert rid not in owners
                owners[rid] = vid
                assert world.reservations.state_of(rid) is ResourceState.RESERVED
    assert world.tick == 60


def test_same_seed_same_world(tmp_path):
    a = main_mod.bootstrap(_write_config(tmp_path))
    b = main_mod.bootstrap(_write_config(tmp_path))
    assert a.terrain.tiles == b.terrain.tiles
    assert len(a.reservations) == len(b.reservations)


def test_bootstrap_writes_paths(tmp_path):
    extra = (
        "paths:\n"
        f"  event_log: {tmp_path / 'logs' / 'events.jsonl'}\n"
        f"  terrain: {tmp_path / 'saves' / 'terrain.json.gz'}\n"
    )
    world = main_mod.bootstrap(_write_config(tmp_path, extra))
    saved = load_terrain(tmp_path / "saves" / "terrain.json.gz")
    assert saved.tiles == world.terrain.tiles
    spawned = list(iter_events(tmp_path / "logs" / "events.jsonl", RESOURCE_SPAWNED))
    assert len(spawned) == len(world.reservations)


def test_seed_override_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(main_mod.SEED_ENV, "99")
    monkeypatch.setenv(main_mod.CONFIG_ENV, str(_write_config(tmp_path)))
    cfg = main_mod._resolve_config(None)
    assert cfg.world.seed == 99
    assert cfg.world.size == (12, 10)


def test_bootstrap_with_given_terrain(tmp_path, open_terrain):
    cfg = load_config(_write_config(tmp_path))
    terrain = open_terrain(5, 5)
    world = main_mod.bootstrap(cfg, terrain=terrain)
    assert world.terrain is terrain


def test_impossible_sample_propagates_exhaustion(tmp_path):
    sample = tmp_path / "strip.yaml"
    sample.write_text("- [grass_center, water]\n", encoding="utf-8")
    path = _write_config(tmp_path)
    cfg = load_config(path)
    cfg.world.size = (3, 1)
    cfg.worldgen.sample = str(sample)
    cfg.worldgen.max_attempts = 2
    with pytest.raises(GenerationExhausted):
        main_mod.bootstrap(cfg)


def test_configure_logging_levels(tmp_path):
    cfg = load_config(_write_config(
        tmp_path,
        "logging:\n"
        "  global_level: WARNING\n"
        "  module_levels:\n"
        "    village_world.worldgen.solver: DEBUG\n",
    ))
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, list(root.handlers)
    solver_logger = logging.getLogger("village_world.worldgen.solver")
    try:
        main_mod.configure_logging(cfg)
        assert root.level == logging.WARNING
        assert solver_logger.level == logging.DEBUG
    finally:
        solver_logger.setLevel(logging.NOTSET)
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_bootstrap_with_builtin_island(tmp_path):
    world = main_mod.bootstrap(_write_config(tmp_path, sample="island"))
    assert list(world.terrain.violations()) == []
    assert all(not world.terrain.is_walkable((x, 0)) for x in range(12))
    for _ in range(20):
        main_mod.step(world)
