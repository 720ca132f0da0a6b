from __future__ import annotations

from typing import Dict, Iterable, List, TypeVar

from .interface import CarView
from .queues import DirectionalQueues

T = TypeVar("T")

GROUND_FLOOR = 0


class RendezvousAllocator:
    """Hands out batches only to idle elevators waiting at the ground or top floor.

    An elevator at the ground floor takes up to ``capacity`` requests from the
    front of the up queue; one at the top floor takes from the down queue.
    Elevators anywhere else get nothing this tick. Cars are served in the
    order given, so lower ids see the oldest requests first.
    """

    def allocate(
        self,
        cars: Iterable[CarView],
        queues: DirectionalQueues[T],
        top_floor: int,
    ) -> Dict[int, List[T]]:
        assignments: Dict[int, List[T]] = {}
        for car in cars:
            if not car.accepting:
                continue
            if car.floor == GROUND_FLOOR:
                batch = queues.up.drain(car.capacity)
            elif car.floor == top_floor:
                batch = queues.down.drain(car.capacity)
            else:
                continue
            if batch:
                assignments[car.elevator_id] = batch
        return assignments
