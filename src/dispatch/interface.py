from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Protocol, TypeVar

from .queues import DirectionalQueues

T = TypeVar("T")


@dataclass(frozen=True)
class CarView:
    """Lightweight view of an elevator for allocation decisions."""

    elevator_id: int
    floor: int
    accepting: bool
    capacity: int


class Allocator(Protocol):
    """Strategy interface for handing queued requests to elevators."""

    def allocate(
        self,
        cars: Iterable[CarView],
        queues: DirectionalQueues[T],
        top_floor: int,
    ) -> Dict[int, List[T]]:
        """
        Return mapping of elevator_id -> batch of requests drained from ``queues``.

        Every request in a returned batch has already been removed from its
        queue. Elevators without a batch are left out of the mapping.
        """
        ...
