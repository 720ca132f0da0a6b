from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, ClassVar, Dict, Iterable, List, Set

import structlog

from dispatch import GROUND_FLOOR

from .config import ElevatorSettings
from .report import ElevatorReport
from .request import Direction, Request
from .states import Phase, ServiceState

logger = structlog.get_logger(__name__)


@dataclass
class Elevator:
    """A single car driven one tick at a time by an explicit transition table.

    A new car sits halted at the ground floor with its door open until
    ``start`` admits it to service. While idle it only counts down its
    waiting timer. A batch handed to ``process_requests`` fills the stop set
    with every pickup and drop-off floor and the car sweeps through them,
    spending one tick to open the door at each stop and ``door_open_ticks``
    ticks before the door closes again.
    """

    elevator_id: int
    number_of_floors: int
    capacity: int
    settings: ElevatorSettings = field(default_factory=ElevatorSettings)
    current_floor: int = GROUND_FLOOR
    direction: Direction = Direction.IDLE
    phase: Phase = Phase.OUT_OF_SERVICE
    service_state: ServiceState = ServiceState.OUT_OF_SERVICE
    stops: Set[int] = field(default_factory=set)
    door_open: bool = True
    door_timer: int = 0
    wait_timer: int = 0
    _pickups: List[Request] = field(default_factory=list)
    _riders: List[Request] = field(default_factory=list)

    _TRANSITIONS: ClassVar[Dict[Phase, Callable[["Elevator"], None]]]

    @property
    def top_floor(self) -> int:
        return self.number_of_floors - 1

    @property
    def occupant_count(self) -> int:
        return len(self._riders)

    def is_taking_requests(self) -> bool:
        return self.service_state is ServiceState.IN_SERVICE

    def is_out_of_service(self) -> bool:
        return self.service_state is ServiceState.OUT_OF_SERVICE

    @property
    def is_halted(self) -> bool:
        return (
            self.phase is Phase.OUT_OF_SERVICE
            and self.current_floor == GROUND_FLOOR
            and self.door_open
            and self.door_timer == 0
        )

    def start(self) -> None:
        """Admit the car to service, idle at whatever floor it is on."""
        self.stops.clear()
        self._pickups.clear()
        self._riders.clear()
        self.door_open = False
        self.door_timer = 0
        self._become_idle()

    def process_requests(self, batch: Iterable[Request]) -> None:
        requests = list(batch)
        if not requests or not self.is_taking_requests():
            return
        for request in requests:
            self.stops.add(request.origin)
            self.stops.add(request.destination)
            self._pickups.append(request)
        self.direction = self._next_direction(requests[0].direction)
        self.phase = Phase.MOVING
        self.service_state = ServiceState.TAKING_NO_MORE_REQUESTS
        logger.debug(
            "elevator.batch_accepted",
            elevator_id=self.elevator_id,
            floor=self.current_floor,
            requests=[str(r) for r in requests],
            stops=sorted(self.stops),
        )

    def take_out_of_service(self) -> None:
        """Drop every stop and head for the ground floor.

        An open door finishes its countdown first unless the grace period is
        switched off. The car halts with its door open once it reaches the
        ground floor.
        """
        if self.is_out_of_service():
            return
        self.service_state = ServiceState.OUT_OF_SERVICE
        self.phase = Phase.OUT_OF_SERVICE
        self.stops.clear()
        self._pickups.clear()
        self.direction = Direction.DOWN if self.current_floor > GROUND_FLOOR else Direction.IDLE
        if self.door_open and not self.settings.out_of_service_grace:
            self.door_timer = 0
            if self.current_floor > GROUND_FLOOR:
                self.door_open = False
        logger.info(
            "elevator.out_of_service",
            elevator_id=self.elevator_id,
            floor=self.current_floor,
            door_open=self.door_open,
        )

    def step(self) -> None:
        self._TRANSITIONS[self.phase](self)

    def report(self) -> ElevatorReport:
        return ElevatorReport(
            elevator_id=self.elevator_id,
            current_floor=self.current_floor,
            direction=self.direction,
            door_closed=not self.door_open,
            door_timer=self.door_timer,
            stops=tuple(floor in self.stops for floor in range(self.number_of_floors)),
            service_state=self.service_state,
            phase=self.phase,
            halted=self.is_halted,
            wait_time=self.wait_timer,
            occupant_count=self.occupant_count,
            capacity=self.capacity,
        )

    def _step_idle(self) -> None:
        if self.wait_timer > 0:
            self.wait_timer -= 1
        if self.wait_timer == 0 and self.settings.park_when_idle:
            self._park()

    def _step_moving(self) -> None:
        if self.current_floor in self.stops:
            self._arrive()
            return
        if self.direction is Direction.UP and self.current_floor < self.top_floor:
            self.current_floor += 1
        elif self.direction is Direction.DOWN and self.current_floor > GROUND_FLOOR:
            self.current_floor -= 1

    def _step_door_open(self) -> None:
        self.door_timer -= 1
        if self.door_timer > 0:
            return
        self.door_open = False
        if self.stops:
            self.direction = self._next_direction(self.direction)
            self.phase = Phase.MOVING
        else:
            self._become_idle()

    def _step_out_of_service(self) -> None:
        if self.is_halted:
            return
        if self.door_open and self.door_timer > 0:
            self.door_timer -= 1
            if self.door_timer == 0:
                if self.current_floor == GROUND_FLOOR:
                    self._halt()
                else:
                    self.door_open = False
            return
        if self.current_floor > GROUND_FLOOR:
            self.current_floor -= 1
        if self.current_floor == GROUND_FLOOR:
            self._halt()

    def _arrive(self) -> None:
        floor = self.current_floor
        self.stops.discard(floor)

        # Alight
        self._riders = [r for r in self._riders if r.destination != floor]

        # Board
        free_space = self.capacity - len(self._riders)
        boarding = [r for r in self._pickups if r.origin == floor][:free_space]
        for request in boarding:
            self._pickups.remove(request)
        self._riders.extend(boarding)

        self.door_open = True
        self.door_timer = self.settings.door_open_ticks
        self.phase = Phase.DOOR_OPEN

    def _become_idle(self) -> None:
        self.direction = Direction.IDLE
        self.phase = Phase.IDLE
        self.service_state = ServiceState.IN_SERVICE
        self.wait_timer = self.settings.idle_wait_ticks

    def _halt(self) -> None:
        self.direction = Direction.IDLE
        self.door_open = True
        self.door_timer = 0
        self._riders.clear()
        logger.info("elevator.halted", elevator_id=self.elevator_id, floor=self.current_floor)

    def _park(self) -> None:
        if self.current_floor in (GROUND_FLOOR, self.top_floor):
            return
        # Nearest rendezvous floor, ground on a tie.
        if self.top_floor - self.current_floor < self.current_floor - GROUND_FLOOR:
            target = self.top_floor
        else:
            target = GROUND_FLOOR
        self.stops.add(target)
        self.direction = Direction.UP if target > self.current_floor else Direction.DOWN
        self.phase = Phase.MOVING
        self.service_state = ServiceState.TAKING_NO_MORE_REQUESTS
        logger.debug("elevator.parking", elevator_id=self.elevator_id, target=target)

    def _next_direction(self, preferred: Direction) -> Direction:
        above = any(stop > self.current_floor for stop in self.stops)
        below = any(stop < self.current_floor for stop in self.stops)
        if preferred is Direction.UP and above:
            return Direction.UP
        if preferred is Direction.DOWN and below:
            return Direction.DOWN
        if above:
            return Direction.UP
        if below:
            return Direction.DOWN
        return preferred


Elevator._TRANSITIONS = {
    Phase.IDLE: Elevator._step_idle,
    Phase.MOVING: Elevator._step_moving,
    Phase.DOOR_OPEN: Elevator._step_door_open,
    Phase.OUT_OF_SERVICE: Elevator._step_out_of_service,
}
