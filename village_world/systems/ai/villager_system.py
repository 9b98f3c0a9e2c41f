# village_world/systems/ai/villager_system.py
from __future__ import annotations

from typing import Any, Dict
import logging

from ...core.components.gatherer import Gatherer
from .behavior_tree import BehaviorTree, Status
from ...ai.behaviors.villager_bt import DEFAULT_CANDIDATE_POOL, build_villager_tree


logger = logging.getLogger(__name__)

class VillagerSystem:
    """Run the gather behaviour tree for every entity with a :class:`Gatherer`."""

    # After ReservationSystem (outcomes visible), before MovementSystem.
    phase = 10

    def __init__(
        self,
        world: Any,
        tree: BehaviorTree | None = None,
        candidate_pool: int = DEFAULT_CANDIDATE_POOL,
    ) -> None:
        self.world = world
        self.tree = tree or build_villager_tree(candidate_pool)
        self.last_status: Dict[int, Status] = {}

    def update(self, tick: int) -> None:
        cm = getattr(self.world, "component_manager", None)
        if cm is None or getattr(self.world, "reservations", None) is None:
            return

        for entity_id, _gatherer in cm.query(Gatherer):
            status = self.tree.run(entity_id, self.world)
            if status != self.last_status.get(entity_id):
                logger.debug(
                    "[Tick %s][Villager System] Agent %s -> %s", tick, entity_id, status
                )
            self.last_status[entity_id] = status


__all__ = ["VillagerSystem"]
