"""Exclusive claims on spatially indexed resources.

Each resource is either ``RESERVABLE`` (indexed, discoverable, claimable) or
``RESERVED`` (exactly one owner, invisible to :meth:`ReservationManager.nearest_k`).
Requests are queued with :meth:`~ReservationManager.submit` and resolved in
arrival order by :meth:`~ReservationManager.process_requests`. Accepting a
request, recording the owner and dropping the target from the spatial index
happen in one step, so two requests can never win the same resource.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Deque, Dict, List, Tuple
import logging

from ..core.events import ReservationRequest, ResourceEvent
from ..core.geometry import Coord
from ..core.spatial.spatial_index import SpatialGrid
from ..persistence.event_log import (
    RESERVATION_GRANTED,
    RESERVATION_REJECTED,
    RESOURCE_CONSUMED,
    RESOURCE_RELEASED,
    RESOURCE_REMOVED,
    RESOURCE_SPAWNED,
    append_resource_event,
)

logger = logging.getLogger(__name__)


class ResourceState(Enum):
    RESERVABLE = "reservable"
    RESERVED = "reserved"


class RejectReason(Enum):
    ALREADY_RESERVED = "already_reserved"
    MISSING = "missing"


class InvalidTarget(LookupError):
    """A release/consume/remove referenced a resource in the wrong state.

    This signals an ownership-tracking bug in the caller, unlike a rejected
    reservation which is an ordinary outcome.
    """

    def __init__(self, target: int, operation: str, state: ResourceState | None) -> None:
        self.target = target
        self.operation = operation
        self.state = state
        found = state.value if state else "missing"
        super().__init__(f"cannot {operation} resource {target}: it is {found}")


@dataclass(frozen=True, slots=True)
class ReservationOutcome:
    """Result of processing one :class:`ReservationRequest`."""

    request: ReservationRequest
    accepted: bool
    reason: RejectReason | None = None

    @property
    def rejected(self) -> bool:
        return not self.accepted


class ReservationManager:
    """Single owner of reservable/reserved resource state."""

    def __init__(
        self,
        cell_size: int = 4,
        event_log: str | Path | List[Dict[str, Any]] | None = None,
    ) -> None:
        self._index = SpatialGrid(cell_size)
        self._positions: Dict[int, Coord] = {}
        self._owners: Dict[int, int] = {}
        self._queue: Deque[ReservationRequest] = deque()
        self._events: List[ResourceEvent] = []
        self.event_log = event_log
        # Stamped on emitted events; advanced by the reservation system.
        self.tick = 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _emit(self, kind: str, resource_id: int, owner_id: int | None = None) -> None:
        pos = self._positions.get(resource_id)
        event = ResourceEvent(
            kind=kind,
            resource_id=resource_id,
            position=tuple(pos) if pos is not None else None,
            owner_id=owner_id,
            tick=self.tick,
        )
        self._events.append(event)
        if self.event_log is not None:
            append_resource_event(self.event_log, event)

    def _require_reserved(self, target: int, operation: str) -> int:
        owner = self._owners.get(target)
        if owner is None:
            state = self.state_of(target)
            logger.error(
                "[Tick %s] ReservationManager: %s of resource %s rejected, state is %s",
                self.tick, operation, target, state.value if state else "missing",
            )
            raise InvalidTarget(target, operation, state)
        return owner

    # ------------------------------------------------------------------
    # Resource lifecycle (spawner notifications)
    # ------------------------------------------------------------------
    def add_resource(self, resource_id: int, position: Tuple[int, int]) -> None:
        """Register a newly spawned resource as reservable at ``position``."""

        if resource_id in self._positions:
            raise ValueError(f"resource {resource_id} is already registered")
        coord = Coord(*position)
        self._positions[resource_id] = coord
        self._index.insert(resource_id, coord)
        self._emit(RESOURCE_SPAWNED, resource_id)

    def remove_resource(self, resource_id: int) -> None:
        """Forget a resource destroyed outside of :meth:`consume`.

        Any outstanding reservation on it is dropped; its owner will see the
        target vanish.
        """

        if resource_id not in self._positions:
            raise InvalidTarget(resource_id, "remove", None)
        owner = self._owners.pop(resource_id, None)
        self._index.remove(resource_id)
        self._emit(RESOURCE_REMOVED, resource_id, owner)
        del self._positions[resource_id]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def nearest_k(self, origin: Tuple[int, int], k: int) -> List[Tuple[Coord, int]]:
        """Return up to ``k`` reservable ``(position, resource_id)`` pairs nearest ``origin``.

        Reserved resources are not in the index and never appear.
        """

        if k < 0:
            raise ValueError("k must be non-negative")
        return [(self._positions[rid], rid) for _, rid in self._index.nearest(origin, k)]

    def state_of(self, resource_id: int) -> ResourceState | None:
        if resource_id not in self._positions:
            return None
        if resource_id in self._owners:
            return ResourceState.RESERVED
        return ResourceState.RESERVABLE

    def is_reservable(self, resource_id: int) -> bool:
        return self.state_of(resource_id) is ResourceState.RESERVABLE

    def owner_of(self, resource_id: int) -> int | None:
        return self._owners.get(resource_id)

    def targets_of(self, requester: int) -> List[int]:
        return [rid for rid, owner in self._owners.items() if owner == requester]

    def position_of(self, resource_id: int) -> Coord | None:
        return self._positions.get(resource_id)

    def __contains__(self, resource_id: object) -> bool:
        return resource_id in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    @property
    def pending(self) -> int:
        return len(self._queue)

    # ------------------------------------------------------------------
    # Request protocol
    # ------------------------------------------------------------------
    def submit(self, requester: int, target: int) -> ReservationRequest:
        """Queue a request for the next :meth:`process_requests` call."""

        request = ReservationRequest(requester, target)
        self._queue.append(request)
        return request

    def request_reservation(self, requester: int, target: int) -> ReservationOutcome:
        """Resolve one request against the current reservable set."""

        request = ReservationRequest(requester, target)
        state = self.state_of(target)
        if state is not ResourceState.RESERVABLE:
            reason = (
                RejectReason.MISSING if state is None else RejectReason.ALREADY_RESERVED
            )
            logger.info(
                "[Tick %s] ReservationManager: %s failed to reserve %s (%s)",
                self.tick, requester, target, reason.value,
            )
            self._emit(RESERVATION_REJECTED, target, requester)
            return ReservationOutcome(request, False, reason)

        self._owners[target] = requester
        self._index.remove(target)
        logger.debug(
            "[Tick %s] ReservationManager: %s has reserved %s", self.tick, requester, target
        )
        self._emit(RESERVATION_GRANTED, target, requester)
        return ReservationOutcome(request, True)

    def process_requests(self, tick: int | None = None) -> List[ReservationOutcome]:
        """Drain the queue in arrival order and return every outcome."""

        if tick is not None:
            self.tick = tick
        outcomes: List[ReservationOutcome] = []
        while self._queue:
            request = self._queue.popleft()
            outcomes.append(self.request_reservation(request.requester, request.target))
        return outcomes

    def release(self, target: int) -> None:
        """Return a reserved ``target`` to the pool without consuming it."""

        owner = self._require_reserved(target, "release")
        del self._owners[target]
        self._index.insert(target, self._positions[target])
        logger.debug(
            "[Tick %s] ReservationManager: %s released %s", self.tick, owner, target
        )
        self._emit(RESOURCE_RELEASED, target, owner)

    def consume(self, target: int) -> None:
        """Permanently remove a reserved ``target``."""

        owner = self._require_reserved(target, "consume")
        del self._owners[target]
        self._emit(RESOURCE_CONSUMED, target, owner)
        del self._positions[target]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def drain_events(self) -> List[ResourceEvent]:
        """Return and clear events emitted since the last call."""

        events, self._events = self._events, []
        return events


__all__ = [
    "InvalidTarget",
    "RejectReason",
    "ReservationManager",
    "ReservationOutcome",
    "ResourceState",
]
