# village_world/systems/movement/movement_system.py
"""Movement system advancing entities along their planned paths."""

from __future__ import annotations

from typing import Any, Dict, List
import logging

from ...core.components.movement import Movement
from ...core.components.position import Position

logger = logging.getLogger(__name__)


class MovementSystem:
    """Step each entity with a :class:`Movement` path one waypoint per tick."""

    phase = 20

    def __init__(
        self, world: Any, event_log: List[Dict[str, Any]] | None = None
    ) -> None:
        self.world = world
        if event_log is None:
            event_log = getattr(world, "event_log", None)
        self.event_log = event_log if event_log is not None else []

    def update(self, tick: int = 0) -> None:
        cm = getattr(self.world, "component_manager", None)
        terrain = getattr(self.world, "terrain", None)
        if cm is None or terrain is None:
            return

        for entity_id, movement in cm.query(Movement):
            if movement.idle:
                continue
            pos = cm.get_component(entity_id, Position)
            if pos is None:
                continue

            waypoint = movement.path[0]
            if abs(waypoint.x - pos.x) + abs(waypoint.y - pos.y) != 1 or not terrain.is_walkable(waypoint):
                # Paths are planned on immutable terrain, so this means a stale
                # or hand-built path. Drop it and let the AI replan.
                logger.debug(
                    "[Tick %s] MovementSystem: Entity %s step from (%s,%s) to %s refused; clearing path.",
                    tick, entity_id, pos.x, pos.y, tuple(waypoint),
                )
                self.event_log.append({
                    "type": "move_blocked", "entity": entity_id,
                    "target_pos": tuple(waypoint), "tick": tick,
                })
                movement.set_path(())
                continue

            movement.path.popleft()
            pos.x, pos.y = waypoint.x, waypoint.y
            logger.debug(
                "[Tick %s] MovementSystem: Entity %s moved to (%s,%s), %d waypoint(s) left",
                tick, entity_id, pos.x, pos.y, len(movement.path),
            )


__all__ = ["MovementSystem"]
