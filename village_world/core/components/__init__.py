"""components package."""

from .gatherer import GatherPhase, Gatherer
from .inventory import Inventory
from .movement import Movement
from .position import Position
from .reservation import Reservation
from .tag import BUSH, VILLAGER, Tag

__all__ = [
    "BUSH",
    "VILLAGER",
    "GatherPhase",
    "Gatherer",
    "Inventory",
    "Movement",
    "Position",
    "Reservation",
    "Tag",
]
