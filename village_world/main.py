# village_world/main.py
"""World bootstrap and headless tick loop."""

from __future__ import annotations

from pathlib import Path
from typing import Any
import os
import logging

from dotenv import load_dotenv

from .config import CONFIG_PATH, Config, load_config
from .core.world import World
from .core.entity_manager import EntityManager
from .core.component_manager import ComponentManager
from .core.time_manager import TimeManager
from .core.systems_manager import SystemsManager
from .reservations.manager import ReservationManager
from .systems.reservation_system import ReservationSystem
from .systems.ai.villager_system import VillagerSystem
from .systems.movement.movement_system import MovementSystem
from .worldgen.model import build_compatibility_model
from .worldgen.samples import load_sample
from .worldgen.solver import generate_with_retry
from .worldgen.terrain import Terrain
from .persistence.save_load import save_terrain

logger = logging.getLogger(__name__)

CONFIG_ENV = "VILLAGE_WORLD_CONFIG"
SEED_ENV = "VILLAGE_WORLD_SEED"


def configure_logging(cfg: Config) -> None:
    """Apply the configured root level and per-module overrides."""

    numeric_level = getattr(logging, cfg.logging.global_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )
    for module_name, level_str in cfg.logging.module_levels.items():
        module_numeric_level = getattr(logging, str(level_str).upper(), None)
        if isinstance(module_numeric_level, int):
            logging.getLogger(module_name).setLevel(module_numeric_level)
        else:
            logger.warning("Invalid log level '%s' for module '%s' in config.", level_str, module_name)


def _resolve_config(config_path: str | Path | None) -> Config:
    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = os.getenv(CONFIG_ENV) or CONFIG_PATH
    cfg = load_config(Path(config_path))

    seed_override = os.getenv(SEED_ENV)
    if seed_override:
        cfg.world.seed = int(seed_override)
    return cfg


def build_terrain(cfg: Config) -> Terrain:
    """Learn the model from the configured sample and generate the terrain.

    :class:`~village_world.worldgen.solver.GenerationExhausted` propagates:
    without terrain there is nothing to simulate.
    """

    sample = load_sample(cfg.worldgen.sample)
    model = build_compatibility_model(sample)
    width, height = cfg.world.size
    logger.info(
        "[Bootstrap] Generating %dx%d terrain (seed %s, %s propagation, %d attempts max)",
        width, height, cfg.world.seed, cfg.worldgen.propagation, cfg.worldgen.max_attempts,
    )
    return generate_with_retry(
        width,
        height,
        model,
        cfg.world.seed,
        cfg.worldgen.max_attempts,
        propagation=cfg.worldgen.propagation,
    )


def bootstrap(
    config: str | Path | Config | None = None, terrain: Terrain | None = None
) -> World:
    """Build a ready-to-tick :class:`World`.

    ``config`` is a path, an already loaded :class:`Config`, or ``None`` for
    the default lookup. ``terrain`` skips generation, e.g. for a terrain
    loaded from disk.
    """

    cfg = config if isinstance(config, Config) else _resolve_config(config)
    if terrain is None:
        terrain = build_terrain(cfg)

    world = World(terrain, seed=cfg.world.seed)
    world.entity_manager = EntityManager(cfg.world.max_entities)
    world.component_manager = ComponentManager()
    world.time_manager = TimeManager(cfg.world.tick_rate)

    paths = cfg.paths or {}
    world.reservations = ReservationManager(
        cell_size=cfg.resources.cell_size, event_log=paths.get("event_log")
    )
    if paths.get("terrain"):
        save_terrain(terrain, paths["terrain"])
        logger.info("[Bootstrap] Terrain saved to %s", paths["terrain"])

    world.systems_manager = SystemsManager()
    world.register_system(MovementSystem(world))
    world.register_system(VillagerSystem(world, candidate_pool=cfg.villagers.candidate_pool))
    world.register_system(ReservationSystem(world))

    world.spawn_resources(cfg.resources.density)
    for _ in range(cfg.villagers.count):
        coord = world.random_walkable()
        if coord is None:
            logger.warning("[Bootstrap] No walkable cell left for villagers.")
            break
        world.spawn_villager(
            coord,
            gather_ticks=cfg.villagers.gather_ticks,
            capacity=cfg.villagers.inventory_capacity,
        )
    logger.info(
        "[Bootstrap] World ready: %d entities, %d reservable bushes",
        len(world.entity_manager), len(world.reservations),
    )
    return world


def step(world: World) -> int:
    """Advance ``world`` by one tick and return the new tick number."""

    tick = world.time_manager.advance()
    world.systems_manager.update(tick)
    return tick


def run(world: World, ticks: int, *, realtime: bool = False) -> None:
    """Tick ``world`` ``ticks`` times, optionally paced by ``tick_rate``."""

    tm = world.time_manager
    for _ in range(ticks):
        if realtime:
            tick = tm.sleep_until_next_tick()
            world.systems_manager.update(tick)
        else:
            step(world)


def main(ticks: int = 600) -> Any:
    cfg = _resolve_config(None)
    configure_logging(cfg)
    world = bootstrap(cfg)
    try:
        run(world, ticks, realtime=True)
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt caught. Shutting down...")
    logger.info("Simulation stopped at tick %s.", world.tick)
    return world


if __name__ == "__main__":
    main()
