"""Event dataclasses used by core systems."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True, slots=True)
class ReservationRequest:
    """Ask for exclusive use of ``target`` on behalf of ``requester``."""

    requester: int
    target: int


@dataclass(slots=True)
class ResourceEvent:
    """Lifecycle change of a reservable resource, for renderers and logs.

    ``owner_id`` is the owner for grant, release and consume events and the
    losing requester for rejections.
    """

    kind: str
    resource_id: int
    position: Tuple[int, int] | None
    owner_id: int | None
    tick: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.position is not None:
            data["position"] = list(self.position)
        return data


__all__ = ["ReservationRequest", "ResourceEvent"]
