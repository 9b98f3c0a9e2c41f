"""Session container for the generated terrain and core managers."""

from __future__ import annotations

from random import Random
from typing import Any, List, Tuple, TYPE_CHECKING
import logging

from .components import BUSH, VILLAGER, Gatherer, Inventory, Movement, Position, Tag
from .geometry import Coord
from ..worldgen import noise

if TYPE_CHECKING:
    from ..worldgen.terrain import Terrain
    from ..reservations.manager import ReservationManager

logger = logging.getLogger(__name__)


class World:
    """Holds one generated :class:`Terrain` plus the managers acting on it.

    The terrain is fixed for the lifetime of the world; regenerating means
    building a new ``World``.
    """

    def __init__(self, terrain: "Terrain", seed: int | None = None):
        self.terrain = terrain
        self.size: Tuple[int, int] = terrain.size
        self.rng = Random(seed)

        # These managers will be populated during the bootstrapping phase.
        self.entity_manager: Any | None = None
        self.component_manager: Any | None = None
        self.systems_manager: Any | None = None
        self.time_manager: Any | None = None
        self.reservations: "ReservationManager" | None = None

        # Movement and AI systems append dict events here
        self.event_log: List[dict[str, Any]] = []

    @property
    def tick(self) -> int:
        return self.time_manager.tick_counter if self.time_manager is not None else 0

    # ------------------------------------------------------------------
    # Entity operations
    # ------------------------------------------------------------------
    def destroy_entity(self, entity_id: int) -> None:
        """Retire ``entity_id`` and drop its components.

        A bush still known to the reservation manager is removed from it too;
        any villager holding it will find its claim gone.
        """
        if self.reservations is not None and entity_id in self.reservations:
            self.reservations.remove_resource(entity_id)
        if self.entity_manager is not None:
            self.entity_manager.destroy_entity(entity_id)
        if self.component_manager is not None:
            self.component_manager.remove_entity(entity_id)

    def _require_managers(self) -> None:
        if self.entity_manager is None or self.component_manager is None:
            raise RuntimeError("world managers are not initialised")

    # ------------------------------------------------------------------
    # System operations
    # ------------------------------------------------------------------
    def register_system(self, system: Any) -> None:
        if self.systems_manager is not None:
            self.systems_manager.register(system)

    def unregister_system(self, system: Any) -> None:
        if self.systems_manager is not None:
            self.systems_manager.unregister(system)

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------
    def spawn_resource(self, x: int, y: int) -> int | None:
        """Place a bush at ``(x, y)`` and register it as reservable.

        Returns the new entity id, or ``None`` when the cell is out of bounds
        or not walkable.
        """

        self._require_managers()
        if not self.terrain.is_walkable((x, y)):
            return None
        eid = self.entity_manager.create_entity(self.tick)
        self.component_manager.add_component(eid, Position(x, y))
        self.component_manager.add_component(eid, Tag(BUSH))
        if self.reservations is not None:
            self.reservations.add_resource(eid, (x, y))
        return eid

    def spawn_resources(self, density: float = 0.05, seed: int | Random | None = None) -> List[int]:
        """Scatter bushes over walkable cells using white noise.

        A walkable cell receives a bush when its noise value falls in the top
        ``density`` fraction.
        """

        width, height = self.size
        data = noise.white_noise(width, height, seed=self.rng if seed is None else seed)
        mask = noise.threshold_mask(data, 1.0 - density)
        spawned: List[int] = []
        for y, row in enumerate(mask):
            for x, hit in enumerate(row):
                if hit:
                    eid = self.spawn_resource(x, y)
                    if eid is not None:
                        spawned.append(eid)
        logger.info("[World] Spawned %d bushes (density %.2f)", len(spawned), density)
        return spawned

    def spawn_villager(
        self, coord: Tuple[int, int], gather_ticks: int = 30, capacity: int = 5
    ) -> int:
        """Create a villager standing on ``coord``."""

        self._require_managers()
        if not self.terrain.is_walkable(coord):
            raise ValueError(f"cannot place villager on unwalkable cell {tuple(coord)}")
        eid = self.entity_manager.create_entity(self.tick)
        cm = self.component_manager
        cm.add_component(eid, Position(coord[0], coord[1]))
        cm.add_component(eid, Tag(VILLAGER))
        cm.add_component(eid, Movement())
        cm.add_component(eid, Gatherer(gather_ticks=gather_ticks))
        cm.add_component(eid, Inventory(capacity=capacity))
        return eid

    def random_walkable(self) -> Coord | None:
        """Return a uniformly chosen walkable cell, or ``None`` if there are none."""
        cells = list(self.terrain.walkable_coords())
        if not cells:
            return None
        return self.rng.choice(cells)


__all__ = ["World"]
