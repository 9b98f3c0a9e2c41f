"""Reservation component."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Reservation:
    """Attached to a requester once the manager granted it ``target``."""

    target: int
    granted_tick: int = 0


__all__ = ["Reservation"]
