"""Component representing a villager's gathering task."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Set

from ..geometry import Coord


class GatherPhase(Enum):
    SEEKING = "seeking"        # looking for a candidate resource
    CLAIMING = "claiming"      # reservation request submitted, awaiting outcome
    MOVING = "moving"          # following a path to the reserved resource
    GATHERING = "gathering"    # standing on the resource, timer running
    DONE = "done"              # inventory full


@dataclass(slots=True)
class Gatherer:
    """Per-villager state for the seek → claim → move → gather loop."""

    gather_ticks: int = 30
    phase: GatherPhase = GatherPhase.SEEKING
    target: int | None = None
    goal: Coord | None = None
    timer: int = 0
    # Resources found unreachable; skipped until the next successful gather.
    unreachable: Set[int] = field(default_factory=set)
    rejections: int = 0
    gathered: int = 0

    def reset(self) -> None:
        """Drop the current target and go back to seeking."""
        self.phase = GatherPhase.SEEKING
        self.target = None
        self.goal = None
        self.timer = 0


__all__ = ["GatherPhase", "Gatherer"]
