from collections import deque
from random import Random

from village_world.systems.movement.pathfinding import find_path, path_cost
from village_world.worldgen.tiles import Tile


def _bfs_distance(terrain, start, goal):
    """Reference shortest distance; ``None`` when unreachable."""
    if start == goal:
        return 0
    seen = {start}
    frontier = deque([(start, 0)])
    while frontier:
        (x, y), dist = frontier.popleft()
        for nxt in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if nxt in seen or not terrain.is_walkable(nxt):
                continue
            if nxt == goal:
                return dist + 1
            seen.add(nxt)
            frontier.append((nxt, dist + 1))
    return None


def _assert_valid(terrain, start, path):
    prev = start
    for step in path:
        assert terrain.is_walkable(step)
        assert abs(step[0] - prev[0]) + abs(step[1] - prev[1]) == 1
        prev = step


def test_path_around_block(open_terrain):
    terrain = open_terrain(5, 5, blocked=[(1, 1), (1, 2), (2, 1), (2, 2)])
    path = find_path(terrain, (0, 0), (4, 4))
    assert path is not None
    assert len(path) == 8
    assert path[-1] == (4, 4)
    assert (0, 0) not in path
    _assert_valid(terrain, (0, 0), path)


def test_start_equals_goal(open_terrain):
    terrain = open_terrain(3, 3)
    assert find_path(terrain, (1, 1), (1, 1)) == []
    assert path_cost([]) == 0


def test_straight_line(open_terrain):
    terrain = open_terrain(4, 1)
    assert find_path(terrain, (0, 0), (3, 0)) == [(1, 0), (2, 0), (3, 0)]


def test_unreachable_goal(open_terrain):
    # Wall splits the map in two.
    terrain = open_terrain(5, 3, blocked=[(2, 0), (2, 1), (2, 2)])
    assert find_path(terrain, (0, 1), (4, 1)) is None
    assert path_cost(None) is None


def test_goal_out_of_bounds_or_blocked(open_terrain):
    terrain = open_terrain(3, 3, blocked=[(2, 2)])
    assert find_path(terrain, (0, 0), (3, 0)) is None
    assert find_path(terrain, (-1, 0), (1, 1)) is None
    assert find_path(terrain, (0, 0), (2, 2)) is None


def test_start_on_blocked_cell_still_plans(open_terrain):
    terrain = open_terrain(3, 1, blocked=[(0, 0)])
    assert find_path(terrain, (0, 0), (2, 0)) == [(1, 0), (2, 0)]


def test_custom_walkable_predicate(open_terrain):
    terrain = open_terrain(3, 1, blocked=[(1, 0)])
    water = int(Tile.WATER)
    assert find_path(terrain, (0, 0), (2, 0)) is None
    assert find_path(terrain, (0, 0), (2, 0), walkable=lambda t: t is not None) == [(1, 0), (2, 0)]
    assert find_path(terrain, (0, 0), (2, 0), walkable=lambda t: t == water) is None


def test_matches_breadth_first_search(open_terrain):
    rng = Random(11)
    for _ in range(25):
        blocked = {(rng.randrange(8), rng.randrange(8)) for _ in range(18)}
        terrain = open_terrain(8, 8, blocked=blocked)
        cells = list(terrain.walkable_coords())
        start, goal = rng.choice(cells), rng.choice(cells)
        expected = _bfs_distance(terrain, start, goal)
        path = find_path(terrain, start, goal)
        if expected is None:
            assert path is None
        else:
            assert path is not None
            assert len(path) == expected
            _assert_valid(terrain, start, path)
            if path:
                assert path[-1] == goal


def test_deterministic_tie_breaking(open_terrain):
    terrain = open_terrain(6, 6)
    # Equal f-scores expand first-in first-out: east along the top row, then south.
    expected = [(x, 0) for x in range(1, 6)] + [(5, y) for y in range(1, 6)]
    assert find_path(terrain, (0, 0), (5, 5)) == expected
