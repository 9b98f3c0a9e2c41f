"""Position component."""

from __future__ import annotations

from dataclasses import dataclass

from ..geometry import Coord


@dataclass
class Position:
    """Cell an entity currently occupies."""

    x: int
    y: int

    @property
    def coord(self) -> Coord:
        return Coord(self.x, self.y)


__all__ = ["Position"]
