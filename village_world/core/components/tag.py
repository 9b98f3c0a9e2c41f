"""Tag component."""

from __future__ import annotations

from dataclasses import dataclass

BUSH = "bush"
VILLAGER = "villager"


@dataclass
class Tag:
    """Simple tag component used for categorising entities."""

    name: str


__all__ = ["Tag", "BUSH", "VILLAGER"]
