"""Domain models for collection stops."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Priority(str, Enum):
    """Collection priority of a waste bin, ordered from low to urgent."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return _PRIORITY_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self.rank >= other.rank


_PRIORITY_ORDER = (Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.URGENT)


class DistanceModel(str, Enum):
    PLANAR = "planar"
    GREAT_CIRCLE = "great_circle"


@dataclass(slots=True, frozen=True)
class Stop:
    """A waste-bin stop on a collection route."""

    stop_id: str
    longitude: float
    latitude: float
    priority: Priority = Priority.MEDIUM
    service_time_min: Optional[float] = None

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)
