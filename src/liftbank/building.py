from __future__ import annotations

from typing import List, Optional, Union

import structlog

from dispatch import CarView, DirectionalQueues, get_allocator

from .config import MIN_CAPACITY, MIN_ELEVATORS, MIN_FLOORS, ElevatorSettings
from .elevator import Elevator
from .errors import InvalidConfiguration, InvalidRequest, InvalidTransition, SystemNotAccepting
from .report import BuildingReport
from .request import Request
from .states import SystemStatus

logger = structlog.get_logger(__name__)


class Building:
    """Owns the elevators and request queues and advances them tick by tick.

    Requests are accepted only while the system is running. Each ``step``
    first hands queued requests to idle elevators waiting at the ground or
    top floor, then ticks every elevator once in id order.
    """

    def __init__(
        self,
        number_of_floors: int,
        number_of_elevators: int,
        elevator_capacity: int,
        settings: Optional[ElevatorSettings] = None,
        allocator: str = "rendezvous",
    ) -> None:
        if number_of_floors < MIN_FLOORS:
            raise InvalidConfiguration(f"Number of floors must be at least {MIN_FLOORS}.")
        if number_of_elevators < MIN_ELEVATORS:
            raise InvalidConfiguration(f"Number of elevators must be at least {MIN_ELEVATORS}.")
        if elevator_capacity < MIN_CAPACITY:
            raise InvalidConfiguration(f"Elevator capacity must be at least {MIN_CAPACITY}.")
        try:
            self._allocator = get_allocator(allocator)
        except ValueError as exc:
            raise InvalidConfiguration(str(exc)) from exc

        self.number_of_floors = number_of_floors
        self.number_of_elevators = number_of_elevators
        self.elevator_capacity = elevator_capacity
        self.settings = settings or ElevatorSettings()
        self.allocator_name = allocator
        self._elevators: List[Elevator] = [
            Elevator(i, number_of_floors, elevator_capacity, settings=self.settings)
            for i in range(number_of_elevators)
        ]
        self._queues: DirectionalQueues[Request] = DirectionalQueues()
        self._status = SystemStatus.OUT_OF_SERVICE

    @property
    def top_floor(self) -> int:
        return self.number_of_floors - 1

    @property
    def status(self) -> SystemStatus:
        return self._status

    def get_status(self) -> BuildingReport:
        return BuildingReport(
            number_of_floors=self.number_of_floors,
            number_of_elevators=self.number_of_elevators,
            elevator_capacity=self.elevator_capacity,
            elevator_reports=tuple(elevator.report() for elevator in self._elevators),
            up_requests=self._queues.up.snapshot(),
            down_requests=self._queues.down.snapshot(),
            system_status=self._status,
        )

    def start_system(self) -> bool:
        if self._status is SystemStatus.RUNNING:
            return True
        if self._status is SystemStatus.STOPPING:
            raise InvalidTransition("Elevator system is stopping")
        for elevator in self._elevators:
            elevator.start()
        self._set_status(SystemStatus.RUNNING)
        return True

    def stop_system(self) -> None:
        if self._status is not SystemStatus.RUNNING:
            return
        for elevator in self._elevators:
            elevator.take_out_of_service()
        self._queues.clear()
        self._set_status(SystemStatus.STOPPING)

    def add_request(self, request: Union[Request, int], destination: Optional[int] = None) -> bool:
        """Queue a request, given as a ``Request`` or an origin/destination pair."""
        if not self._status.accepting_requests:
            raise SystemNotAccepting(self._status)
        if not isinstance(request, Request):
            if destination is None:
                raise InvalidRequest("A destination floor is required.")
            request = Request(request, destination)
        if not request.within(self.number_of_floors):
            raise InvalidRequest(
                f"Request {request} is outside floors 0..{self.top_floor}."
            )
        self._queues.enqueue(request, going_up=request.going_up)
        return True

    def step(self) -> None:
        if self._status is SystemStatus.RUNNING:
            self._allocate()
        if self._status is SystemStatus.OUT_OF_SERVICE:
            return

        for elevator in self._elevators:
            elevator.step()

        if self._status is SystemStatus.STOPPING and self._all_halted():
            self._set_status(SystemStatus.OUT_OF_SERVICE)

    def take_elevator_out_of_service(self, elevator_id: int) -> None:
        if 0 <= elevator_id < len(self._elevators):
            self._elevators[elevator_id].take_out_of_service()

    def take_all_out_of_service(self) -> None:
        for elevator in self._elevators:
            elevator.take_out_of_service()
        self._set_status(SystemStatus.OUT_OF_SERVICE)

    def _allocate(self) -> None:
        cars = [
            CarView(
                elevator_id=elevator.elevator_id,
                floor=elevator.current_floor,
                accepting=elevator.is_taking_requests(),
                capacity=elevator.capacity,
            )
            for elevator in self._elevators
        ]
        assignments = self._allocator.allocate(cars, self._queues, self.top_floor)
        for elevator_id, batch in assignments.items():
            logger.debug(
                "building.allocated",
                elevator_id=elevator_id,
                requests=[str(request) for request in batch],
            )
            self._elevators[elevator_id].process_requests(batch)

    def _all_halted(self) -> bool:
        return all(elevator.is_halted for elevator in self._elevators)

    def _set_status(self, status: SystemStatus) -> None:
        if status is not self._status:
            logger.info("building.status_changed", previous=self._status.value, status=status.value)
        self._status = status
