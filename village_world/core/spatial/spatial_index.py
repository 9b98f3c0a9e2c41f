from __future__ import annotations

import math
from typing import Dict, List, Set, Tuple


class SpatialGrid:
    """Bucketed point index for k-nearest lookups on the tile grid.

    Points are integer cell coordinates; each bucket covers a
    ``cell_size`` × ``cell_size`` block of cells.
    """

    def __init__(self, cell_size: int) -> None:
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self.cell_size = cell_size
        self._buckets: Dict[Tuple[int, int], Set[int]] = {}
        self._points: Dict[int, Tuple[int, int]] = {}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _bucket_of(self, pos: Tuple[int, int]) -> Tuple[int, int]:
        return (pos[0] // self.cell_size, pos[1] // self.cell_size)

    def _ring(self, centre: Tuple[int, int], r: int) -> List[Tuple[int, int]]:
        """Return bucket keys at Chebyshev distance ``r`` from ``centre``."""
        cx, cy = centre
        if r == 0:
            return [centre]
        ring = [(cx + dx, cy - r) for dx in range(-r, r + 1)]
        ring += [(cx + dx, cy + r) for dx in range(-r, r + 1)]
        ring += [(cx - r, cy + dy) for dy in range(-r + 1, r)]
        ring += [(cx + r, cy + dy) for dy in range(-r + 1, r)]
        return ring

    def _ring_limit(self, centre: Tuple[int, int]) -> int:
        """Largest ring that still touches an occupied bucket."""
        return max(
            max(abs(bx - centre[0]), abs(by - centre[1])) for bx, by in self._buckets
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def insert(self, entity_id: int, pos: Tuple[int, int]) -> None:
        """Index ``entity_id`` at ``pos``, moving it if already present."""
        self.remove(entity_id)
        self._buckets.setdefault(self._bucket_of(pos), set()).add(entity_id)
        self._points[entity_id] = (pos[0], pos[1])

    def remove(self, entity_id: int) -> None:
        """Drop ``entity_id``; unknown ids are ignored."""
        pos = self._points.pop(entity_id, None)
        if pos is None:
            return
        key = self._bucket_of(pos)
        bucket = self._buckets[key]
        bucket.discard(entity_id)
        if not bucket:
            del self._buckets[key]

    def position_of(self, entity_id: int) -> Tuple[int, int] | None:
        return self._points.get(entity_id)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._points

    def __len__(self) -> int:
        return len(self._points)

    def nearest(self, pos: Tuple[int, int], k: int) -> List[Tuple[int, int]]:
        """Return up to ``k`` ``(distance2, entity_id)`` pairs closest to ``pos``.

        Ordered by squared distance, then entity id. Buckets are scanned in
        rings around ``pos``; the scan stops once no unvisited bucket can
        hold anything closer than the current ``k``-th candidate. A
        fractional ``pos`` is snapped to the cell containing it.
        """
        if k <= 0 or not self._buckets:
            return []

        pos = (math.floor(pos[0]), math.floor(pos[1]))
        centre = self._bucket_of(pos)
        found: List[Tuple[int, int]] = []
        for r in range(self._ring_limit(centre) + 1):
            for key in self._ring(centre, r):
                for ent in self._buckets.get(key, ()):
                    ex, ey = self._points[ent]
                    found.append(((ex - pos[0]) ** 2 + (ey - pos[1]) ** 2, ent))
            if len(found) >= k:
                found.sort()
                # Anything in ring r+1 or beyond is at least r*cell_size+1 away.
                reach = r * self.cell_size + 1
                if found[k - 1][0] < reach * reach:
                    break
        found.sort()
        return found[:k]


__all__ = ["SpatialGrid"]
