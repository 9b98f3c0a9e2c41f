"""Movement component."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable

from ..geometry import Coord


@dataclass
class Movement:
    """Waypoints still to visit, nearest first. The current cell is never included."""

    path: Deque[Coord] = field(default_factory=deque)

    def set_path(self, waypoints: Iterable[Coord]) -> None:
        self.path = deque(Coord(*w) for w in waypoints)

    @property
    def idle(self) -> bool:
        return not self.path


__all__ = ["Movement"]
