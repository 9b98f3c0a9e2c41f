"""Inventory component."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class Inventory:
    """Gathered resource ids, up to ``capacity``."""

    capacity: int
    items: List[int] = field(default_factory=list)

    @property
    def full(self) -> bool:
        return len(self.items) >= self.capacity


__all__ = ["Inventory"]
