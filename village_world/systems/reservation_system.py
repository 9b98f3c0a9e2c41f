"""Drain queued reservation requests once per tick."""

from __future__ import annotations

from typing import Any, List
import logging

from ..core.components.reservation import Reservation
from ..reservations.manager import ReservationOutcome

logger = logging.getLogger(__name__)


class ReservationSystem:
    """Resolve all pending requests before any AI runs in the same tick."""

    phase = 0

    def __init__(self, world: Any) -> None:
        self.world = world
        self.last_outcomes: List[ReservationOutcome] = []

    def update(self, tick: int) -> None:
        manager = getattr(self.world, "reservations", None)
        cm = getattr(self.world, "component_manager", None)
        if manager is None:
            return

        self.last_outcomes = manager.process_requests(tick)
        for outcome in self.last_outcomes:
            if not outcome.accepted or cm is None:
                continue
            requester = outcome.request.requester
            cm.add_component(requester, Reservation(outcome.request.target, tick))

        if self.last_outcomes:
            granted = sum(1 for o in self.last_outcomes if o.accepted)
            logger.debug(
                "[Tick %s] ReservationSystem: processed %d request(s), %d granted",
                tick, len(self.last_outcomes), granted,
            )


__all__ = ["ReservationSystem"]
