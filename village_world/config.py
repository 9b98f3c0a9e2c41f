"""Simple configuration loader for village_world."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.yaml"


@dataclass
class WorldConfig:
    """Configuration values for the world section."""

    size: tuple[int, int] = (48, 32)
    tick_rate: float = 10.0
    seed: int | None = None
    max_entities: int = 8000


@dataclass
class WorldgenConfig:
    """Terrain generation settings."""

    max_attempts: int = 100
    propagation: str = "local"
    # Built-in sample name or path to a YAML sample grid.
    sample: str = "island"


@dataclass
class ResourceConfig:
    """Bush placement and reservation index settings."""

    density: float = 0.05
    cell_size: int = 4


@dataclass
class VillagerConfig:
    """Villager spawning and behaviour settings."""

    count: int = 4
    gather_ticks: int = 30
    candidate_pool: int = 10
    inventory_capacity: int = 5


@dataclass
class LoggingConfig:
    """Root log level and per-module overrides."""

    global_level: str = "INFO"
    module_levels: Dict[str, str] = field(default_factory=dict)


@dataclass
class Config:
    """Top level configuration dataclass."""

    world: WorldConfig
    worldgen: WorldgenConfig
    resources: ResourceConfig
    villagers: VillagerConfig
    logging: LoggingConfig
    paths: Optional[Dict[str, Any]] = None


def _parse_config(data: dict[str, Any]) -> Config:
    """Convert raw ``data`` into :class:`Config`."""

    world_data = data.get("world") or {}
    seed = world_data.get("seed")
    world = WorldConfig(
        size=tuple(world_data.get("size", [48, 32])),
        tick_rate=float(world_data.get("tick_rate", 10)),
        seed=int(seed) if seed is not None else None,
        max_entities=int(world_data.get("max_entities", 8000)),
    )

    gen_data = data.get("worldgen") or {}
    worldgen = WorldgenConfig(
        max_attempts=int(gen_data.get("max_attempts", 100)),
        propagation=str(gen_data.get("propagation", "local")),
        sample=str(gen_data.get("sample", "island")),
    )

    res_data = data.get("resources") or {}
    resources = ResourceConfig(
        density=float(res_data.get("density", 0.05)),
        cell_size=int(res_data.get("cell_size", 4)),
    )

    vil_data = data.get("villagers") or {}
    villagers = VillagerConfig(
        count=int(vil_data.get("count", 4)),
        gather_ticks=int(vil_data.get("gather_ticks", 30)),
        candidate_pool=int(vil_data.get("candidate_pool", 10)),
        inventory_capacity=int(vil_data.get("inventory_capacity", 5)),
    )

    log_data = data.get("logging") or {}
    logging_cfg = LoggingConfig(
        global_level=str(log_data.get("global_level", "INFO")).upper(),
        module_levels=dict(log_data.get("module_levels") or {}),
    )

    return Config(
        world=world,
        worldgen=worldgen,
        resources=resources,
        villagers=villagers,
        logging=logging_cfg,
        paths=data.get("paths"),
    )


def load_config(path: Path = CONFIG_PATH) -> Config:
    """Load configuration from ``path`` and return a :class:`Config`."""

    path = Path(path)
    if path.is_file():
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        raw = {}
    return _parse_config(raw)


# Load configuration at module import time.
CONFIG = load_config()


__all__ = [
    "CONFIG",
    "CONFIG_PATH",
    "Config",
    "WorldConfig",
    "WorldgenConfig",
    "ResourceConfig",
    "VillagerConfig",
    "LoggingConfig",
    "load_config",
]
