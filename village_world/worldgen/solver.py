"""Wave-function-collapse style terrain solver.

Every cell starts with the full set of placeable tiles. The solver repeatedly
collapses the undecided cell with the fewest remaining options to a random
tile and propagates the consequences to its neighbours. An empty possibility
set is a :class:`Contradiction`: the attempt is abandoned and
:func:`generate_with_retry` starts over with fresh state.

Two propagation modes are supported:

``"local"``
    A collapsed cell filters its four neighbours only. A neighbour that is
    forced down to a single tile counts as collapsed and filters its own
    neighbours in turn; neighbours left with several options are not
    revisited until they are chosen for collapse.
``"full"``
    Any change to a cell re-filters its neighbours until nothing changes
    (AC-3 style closure). More work per collapse, fewer contradictions.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from random import Random
from typing import Deque, List, Set, Tuple
import logging

from ..core.geometry import Coord, Direction
from ..core.grid import Grid
from .model import CompatibilityModel
from .terrain import Terrain
from .tiles import VOID

logger = logging.getLogger(__name__)

PROPAGATION_MODES = ("local", "full")


@dataclass(frozen=True, slots=True)
class Contradiction:
    """A generation attempt reached a cell with no remaining tiles."""

    cell: Coord
    collapsed: int

    def __bool__(self) -> bool:
        return False


class GenerationExhausted(RuntimeError):
    """Raised when no attempt produced a valid grid within the budget."""

    def __init__(self, attempts: int, last: Contradiction | None) -> None:
        self.attempts = attempts
        self.last = last
        where = f" (last contradiction at {tuple(last.cell)})" if last else ""
        super().__init__(f"terrain generation failed after {attempts} attempts{where}")


def _make_rng(rng_seed: int | Random | None) -> Random:
    if isinstance(rng_seed, Random):
        return rng_seed
    return Random(rng_seed)


class _Wave:
    """Mutable possibility sets for a single attempt."""

    def __init__(self, width: int, height: int, model: CompatibilityModel, mode: str) -> None:
        self.model = model
        self.mode = mode
        self.collapsed = 0
        placeable = frozenset(t for t in model.tiles if t != VOID)
        self.cells: Grid[Set[int]] = Grid(width, height, lambda _c: set(placeable))

    # ------------------------------------------------------------------
    # Constraint helpers
    # ------------------------------------------------------------------
    def _supported(self, options: Set[int], direction: Direction) -> Set[int]:
        """Tiles a neighbour in ``direction`` may take given ``options``."""

        allowed: Set[int] = set()
        for tile in options:
            allowed |= self.model.allowed(tile, direction)
        return allowed

    def _filter(self, source: Coord, direction: Direction, target: Coord) -> bool:
        """Narrow ``target`` against ``source``. Return ``True`` if it changed."""

        options = self.cells[source]
        before = self.cells[target]
        back = direction.opposite
        after = {
            t
            for t in before & self._supported(options, direction)
            if self.model.allowed(t, back) & options
        }
        if after == before:
            return False
        self.cells[target] = after
        return True

    # ------------------------------------------------------------------
    # Solver steps
    # ------------------------------------------------------------------
    def constrain_border(self) -> Contradiction | None:
        """Keep only tiles that may face the void on the grid border."""

        seeds: List[Coord] = []
        for coord in self.cells.coords():
            before = self.cells[coord]
            options = before
            for direction in Direction:
                if not self.cells.in_bounds(coord.offset(direction)):
                    options = {t for t in options if self.model.permits(t, direction, VOID)}
            self.cells[coord] = options
            if not options:
                return Contradiction(coord, self.collapsed)
            if len(options) == 1 or (self.mode == "full" and options != before):
                seeds.append(coord)
        return self.propagate(seeds)

    def choose_cell(self, rng: Random) -> Coord | None:
        """Pick a minimum-entropy undecided cell, ties broken by ``rng``."""

        best = 0
        candidates: List[Coord] = []
        for coord in self.cells.coords():
            size = len(self.cells[coord])
            if size <= 1:
                continue
            if not candidates or size < best:
                best = size
                candidates = [coord]
            elif size == best:
                candidates.append(coord)
        if not candidates:
            return None
        return rng.choice(candidates)

    def collapse(self, coord: Coord, rng: Random) -> int:
        tile = rng.choice(sorted(self.cells[coord]))
        self.cells[coord] = {tile}
        self.collapsed += 1
        return tile

    def propagate(self, seeds: List[Coord]) -> Contradiction | None:
        queue: Deque[Coord] = deque(seeds)
        while queue:
            source = queue.popleft()
            for direction, target in self.cells.neighbors(source):
                was_single = len(self.cells[target]) == 1
                if not self._filter(source, direction, target):
                    continue
                remaining = len(self.cells[target])
                if remaining == 0:
                    return Contradiction(target, self.collapsed)
                if self.mode == "full" or (remaining == 1 and not was_single):
                    queue.append(target)
        return None

    def resolved(self) -> Grid[int]:
        return Grid(self.cells.width, self.cells.height, lambda c: next(iter(self.cells[c])))


def generate(
    width: int,
    height: int,
    model: CompatibilityModel,
    rng_seed: int | Random | None = None,
    *,
    propagation: str = "local",
) -> Grid[int] | Contradiction:
    """Run a single collapse attempt.

    Returns the fully resolved grid, or a :class:`Contradiction` describing
    where the attempt failed. ``rng_seed`` may be a seed or a ``Random``
    instance shared across attempts.
    """

    if width < 1 or height < 1:
        raise ValueError(f"grid dimensions must be at least 1x1, got {width}x{height}")
    if propagation not in PROPAGATION_MODES:
        raise ValueError(f"unknown propagation mode: {propagation!r}")
    if not model.tiles:
        raise ValueError("compatibility model has no placeable tiles")

    rng = _make_rng(rng_seed)
    wave = _Wave(width, height, model, propagation)

    failure = wave.constrain_border()
    if failure is not None:
        return failure

    while True:
        coord = wave.choose_cell(rng)
        if coord is None:
            return wave.resolved()
        wave.collapse(coord, rng)
        failure = wave.propagate([coord])
        if failure is not None:
            return failure


def generate_with_retry(
    width: int,
    height: int,
    model: CompatibilityModel,
    rng_seed: int | Random | None = None,
    max_attempts: int = 100,
    *,
    propagation: str = "local",
) -> Terrain:
    """Call :func:`generate` until it succeeds and wrap the result.

    A single RNG is threaded through every attempt so the same seed always
    reproduces the same terrain. Raises :class:`GenerationExhausted` once
    ``max_attempts`` contradictions have been seen.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be positive")

    rng = _make_rng(rng_seed)
    last: Contradiction | None = None
    for attempt in range(1, max_attempts + 1):
        result = generate(width, height, model, rng, propagation=propagation)
        if isinstance(result, Contradiction):
            last = result
            logger.debug(
                "[Worldgen] Attempt %d/%d contradicted at %s after %d collapses",
                attempt, max_attempts, tuple(result.cell), result.collapsed,
            )
            continue
        logger.info(
            "[Worldgen] Generated %dx%d terrain in %d attempt(s)", width, height, attempt
        )
        return Terrain.from_grid(result, model)

    logger.error(
        "[Worldgen] Exhausted %d attempts generating %dx%d terrain", max_attempts, width, height
    )
    raise GenerationExhausted(max_attempts, last)


__all__ = [
    "PROPAGATION_MODES",
    "Contradiction",
    "GenerationExhausted",
    "generate",
    "generate_with_retry",
]
