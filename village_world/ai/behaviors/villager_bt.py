"""Behaviour tree driving villagers through the gather loop.

Each tick exactly one branch handles a villager, picked by its
:class:`GatherPhase`:

* seek: choose a random bush among the nearest reservable ones and submit
  a reservation request;
* claim: on the following tick, either path to the granted bush or go back
  to seeking (rejected, or unreachable and released);
* move: wait for the movement system to reach the bush;
* gather: count down, then consume the bush into the inventory.
"""

from __future__ import annotations

from typing import Any, Callable
import logging

from village_world.core.components import (
    GatherPhase,
    Gatherer,
    Inventory,
    Movement,
    Position,
    Reservation,
)
from village_world.systems.ai.behavior_tree import (
    Action,
    BehaviorTree,
    Condition,
    Selector,
    Status,
)
from village_world.systems.movement.pathfinding import find_path

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATE_POOL = 10


def _in_phase(phase: GatherPhase) -> Callable[[int, Any], bool]:
    def check(agent_id: int, world: Any) -> bool:
        gatherer = world.component_manager.get_component(agent_id, Gatherer)
        return gatherer is not None and gatherer.phase is phase
    return check


def _drop_claim(agent_id: int, world: Any, gatherer: Gatherer, release: bool) -> None:
    """Forget the current target, releasing it back to the pool if still ours."""

    manager = world.reservations
    target = gatherer.target
    if release and target is not None and manager.owner_of(target) == agent_id:
        manager.release(target)
    world.component_manager.remove_component(agent_id, Reservation)
    world.component_manager.get_component(agent_id, Movement).set_path(())
    gatherer.reset()


def _seek(pool: int) -> Callable[[int, Any], Status]:
    def seek(agent_id: int, world: Any) -> Status:
        cm = world.component_manager
        gatherer = cm.get_component(agent_id, Gatherer)
        inventory = cm.get_component(agent_id, Inventory)
        if inventory is not None and inventory.full:
            gatherer.phase = GatherPhase.DONE
            return "FULL"

        pos = cm.get_component(agent_id, Position)
        nearby = world.reservations.nearest_k(pos.coord, pool + len(gatherer.unreachable))
        candidates = [c for c in nearby if c[1] not in gatherer.unreachable][:pool]
        if not candidates:
            return "IDLE"

        goal, target = world.rng.choice(candidates)
        world.reservations.submit(agent_id, target)
        gatherer.target = target
        gatherer.goal = goal
        gatherer.phase = GatherPhase.CLAIMING
        logger.info(
            "[Tick %s] Villager %s found bush %s at (%d, %d)",
            world.tick, agent_id, target, goal.x, goal.y,
        )
        return "REQUESTED"
    return seek


def _claim(agent_id: int, world: Any) -> Status:
    cm = world.component_manager
    gatherer = cm.get_component(agent_id, Gatherer)
    reservation = cm.get_component(agent_id, Reservation)

    if reservation is None or reservation.target != gatherer.target:
        # The reservation system already ran this tick; no grant means rejected.
        gatherer.rejections += 1
        logger.info(
            "[Tick %s] Villager %s lost bush %s to another villager",
            world.tick, agent_id, gatherer.target,
        )
        gatherer.reset()
        return "REJECTED"

    pos = cm.get_component(agent_id, Position)
    path = find_path(world.terrain, pos.coord, gatherer.goal)
    if path is None:
        logger.info(
            "[Tick %s] Villager %s cannot reach bush %s, releasing it",
            world.tick, agent_id, gatherer.target,
        )
        gatherer.unreachable.add(gatherer.target)
        _drop_claim(agent_id, world, gatherer, release=True)
        return "UNREACHABLE"

    cm.get_component(agent_id, Movement).set_path(path)
    gatherer.phase = GatherPhase.MOVING
    logger.debug(
        "[Tick %s] Villager %s set %d-step path to bush %s",
        world.tick, agent_id, len(path), gatherer.target,
    )
    return "PATH_SET"


def _move(agent_id: int, world: Any) -> Status:
    cm = world.component_manager
    gatherer = cm.get_component(agent_id, Gatherer)
    if world.reservations.owner_of(gatherer.target) != agent_id:
        _drop_claim(agent_id, world, gatherer, release=False)
        return "LOST"

    pos = cm.get_component(agent_id, Position)
    if pos.coord == gatherer.goal:
        gatherer.phase = GatherPhase.GATHERING
        gatherer.timer = gatherer.gather_ticks
        logger.info("[Tick %s] Villager %s reached bush %s", world.tick, agent_id, gatherer.target)
        return "ARRIVED"

    if cm.get_component(agent_id, Movement).idle:
        _drop_claim(agent_id, world, gatherer, release=True)
        return "STUCK"
    return "MOVING"


def _gather(agent_id: int, world: Any) -> Status:
    cm = world.component_manager
    gatherer = cm.get_component(agent_id, Gatherer)
    target = gatherer.target
    if world.reservations.owner_of(target) != agent_id:
        _drop_claim(agent_id, world, gatherer, release=False)
        return "LOST"

    gatherer.timer -= 1
    if gatherer.timer > 0:
        return "GATHERING"

    world.reservations.consume(target)
    world.destroy_entity(target)
    cm.remove_component(agent_id, Reservation)
    inventory = cm.get_component(agent_id, Inventory)
    if inventory is not None:
        inventory.items.append(target)
    gatherer.gathered += 1
    gatherer.unreachable.clear()
    gatherer.reset()
    if inventory is not None and inventory.full:
        gatherer.phase = GatherPhase.DONE
    logger.info("[Tick %s] Villager %s gathered bush %s", world.tick, agent_id, target)
    return "CONSUMED"


def _rest(agent_id: int, world: Any) -> Status:
    return "DONE"


def build_villager_tree(candidate_pool: int = DEFAULT_CANDIDATE_POOL) -> BehaviorTree:
    """Return the gather-loop tree; ``candidate_pool`` nearest bushes are considered."""

    if candidate_pool < 1:
        raise ValueError("candidate_pool must be at least 1")
    root = Selector([
        Condition(_in_phase(GatherPhase.GATHERING), Action(_gather)),
        Condition(_in_phase(GatherPhase.MOVING), Action(_move)),
        Condition(_in_phase(GatherPhase.CLAIMING), Action(_claim)),
        Condition(_in_phase(GatherPhase.SEEKING), Action(_seek(candidate_pool))),
        Condition(_in_phase(GatherPhase.DONE), Action(_rest)),
    ])
    return BehaviorTree(root)


__all__ = ["build_villager_tree", "DEFAULT_CANDIDATE_POOL"]
