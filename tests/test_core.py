import pytest

from village_world.core.components import (
    BUSH,
    VILLAGER,
    GatherPhase,
    Gatherer,
    Inventory,
    Movement,
    Position,
    Tag,
)
from village_world.core.world import World
from village_world.core.systems_manager import SystemsManager
from village_world.persistence.event_log import RESOURCE_REMOVED
from village_world.reservations.manager import RejectReason, ResourceState
from village_world.systems.ai.villager_system import VillagerSystem
from village_world.systems.movement.movement_system import MovementSystem
from village_world.systems.reservation_system import ReservationSystem


def test_world_holds_terrain(open_terrain):
    terrain = open_terrain(4, 3)
    world = World(terrain, seed=1)
    assert world.size == (4, 3)
    assert world.tick == 0
    assert world.event_log == []


def test_spawn_resource_registers_bush(open_terrain, make_world):
    world = make_world(open_terrain(3, 3, blocked=[(0, 0)]))
    eid = world.spawn_resource(2, 1)
    assert world.component_manager.get_component(eid, Tag).name == BUSH
    assert world.component_manager.get_component(eid, Position).coord == (2, 1)
    assert world.reservations.state_of(eid) is ResourceState.RESERVABLE
    assert world.spawn_resource(0, 0) is None
    assert world.spawn_resource(5, 5) is None


def test_spawn_resources_only_on_walkable_cells(open_terrain, make_world):
    blocked = [(x, 0) for x in range(10)]
    world = make_world(open_terrain(10, 10, blocked=blocked))
    spawned = world.spawn_resources(density=0.5, seed=4)
    assert spawned
    for eid in spawned:
        pos = world.component_manager.get_component(eid, Position)
        assert world.terrain.is_walkable(pos.coord)
    assert len(world.reservations) == len(spawned)


def test_spawn_resources_density_bounds(open_terrain, make_world):
    world = make_world(open_terrain(5, 5))
    assert world.spawn_resources(density=0.0, seed=1) == []
    full = make_world(open_terrain(5, 5))
    assert len(full.spawn_resources(density=1.0, seed=1)) == 25


def test_spawn_villager_components(open_terrain, make_world):
    world = make_world(open_terrain(3, 3, blocked=[(1, 1)]))
    vid = world.spawn_villager((0, 2), gather_ticks=12, capacity=3)
    cm = world.component_manager
    assert cm.get_component(vid, Tag).name == VILLAGER
    assert cm.get_component(vid, Movement).idle
    gatherer = cm.get_component(vid, Gatherer)
    assert gatherer.gather_ticks == 12 and gatherer.phase is GatherPhase.SEEKING
    assert cm.get_component(vid, Inventory).capacity == 3
    with pytest.raises(ValueError):
        world.spawn_villager((1, 1))


def test_spawning_requires_managers(open_terrain):
    world = World(open_terrain(2, 2))
    with pytest.raises(RuntimeError):
        world.spawn_resource(0, 0)


def test_random_walkable(open_terrain, make_world):
    world = make_world(open_terrain(3, 1, blocked=[(0, 0), (2, 0)]))
    assert world.random_walkable() == (1, 0)
    none_left = make_world(open_terrain(1, 1, blocked=[(0, 0)]))
    assert none_left.random_walkable() is None


def test_destroy_entity_drops_components(open_terrain, make_world):
    world = make_world(open_terrain(2, 2))
    eid = world.spawn_resource(1, 1)
    world.destroy_entity(eid)
    assert not world.entity_manager.has_entity(eid)
    assert world.component_manager.get_component(eid, Position) is None


def test_destroying_reservable_bush_forgets_it(open_terrain, make_world):
    world = make_world(open_terrain(4, 1))
    bush = world.spawn_resource(3, 0)
    world.destroy_entity(bush)
    assert bush not in world.reservations
    assert world.reservations.nearest_k((0, 0), 5) == []
    assert world.reservations.request_reservation(1, bush).reason is RejectReason.MISSING
    assert world.reservations.drain_events()[-1].kind == RESOURCE_REMOVED


def test_destroying_reserved_bush_drops_the_claim(open_terrain, make_world):
    world = make_world(open_terrain(6, 1))
    bush = world.spawn_resource(5, 0)
    vid = world.spawn_villager((0, 0))
    world.systems_manager = SystemsManager()
    ai = VillagerSystem(world)
    for system in (ReservationSystem(world), ai, MovementSystem(world)):
        world.register_system(system)
    for tick in (1, 2):
        world.systems_manager.update(tick)
    assert world.reservations.owner_of(bush) == vid

    world.destroy_entity(bush)
    assert world.reservations.targets_of(vid) == []
    world.systems_manager.update(3)
    assert ai.last_status[vid] == "LOST"
    assert world.component_manager.get_component(vid, Gatherer).phase is GatherPhase.SEEKING
