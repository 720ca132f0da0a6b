"""Immutable snapshots of the elevator bank for display layers and tests.

Reports are plain values: they hold copies of the live state and no
reference back to the building, so nothing done to a report can change
the simulation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .request import Direction, Request
from .states import Phase, ServiceState, SystemStatus


@dataclass(frozen=True)
class ElevatorReport:
    """State of one elevator at the end of a tick."""

    elevator_id: int
    current_floor: int
    direction: Direction
    door_closed: bool
    door_timer: int
    stops: Tuple[bool, ...]
    service_state: ServiceState
    phase: Phase
    halted: bool
    wait_time: int
    occupant_count: int
    capacity: int

    @property
    def is_out_of_service(self) -> bool:
        return self.service_state is ServiceState.OUT_OF_SERVICE

    @property
    def is_waiting(self) -> bool:
        return self.service_state is ServiceState.IN_SERVICE

    @property
    def stop_floors(self) -> Tuple[int, ...]:
        return tuple(floor for floor, marked in enumerate(self.stops) if marked)

    def door_text(self) -> str:
        if self.door_closed:
            return "C  "
        return f"O {self.door_timer}"

    def to_dict(self) -> dict:
        return {
            "id": self.elevator_id,
            "floor": self.current_floor,
            "direction": self.direction.value,
            "door_closed": self.door_closed,
            "door_timer": self.door_timer,
            "stops": list(self.stop_floors),
            "service_state": self.service_state.value,
            "phase": self.phase.value,
            "halted": self.halted,
            "wait_time": self.wait_time,
            "occupant_count": self.occupant_count,
            "capacity": self.capacity,
            "text": str(self),
        }

    def __str__(self) -> str:
        if self.halted:
            return f"Out of Service[Floor {self.current_floor}]"
        if self.is_waiting:
            return f"Waiting[Floor {self.current_floor}, Time {self.wait_time}]"
        markers = "".join(
            f" {floor:2d}" if marked else " --" for floor, marked in enumerate(self.stops)
        )
        return (
            f"[{self.current_floor}|{self.direction.symbol}|{self.door_text()}]"
            f"<{markers}>"
        )


@dataclass(frozen=True)
class BuildingReport:
    """Snapshot of every elevator, both request queues and the system status."""

    number_of_floors: int
    number_of_elevators: int
    elevator_capacity: int
    elevator_reports: Tuple[ElevatorReport, ...]
    up_requests: Tuple[Request, ...]
    down_requests: Tuple[Request, ...]
    system_status: SystemStatus

    def to_dict(self) -> dict:
        return {
            "floors": self.number_of_floors,
            "elevator_count": self.number_of_elevators,
            "capacity": self.elevator_capacity,
            "system_status": self.system_status.value,
            "elevators": [report.to_dict() for report in self.elevator_reports],
            "up_requests": [request.to_dict() for request in self.up_requests],
            "down_requests": [request.to_dict() for request in self.down_requests],
        }

    def __str__(self) -> str:
        lines = [
            "Building Report:",
            f"Number of Floors: {self.number_of_floors}",
            f"Number of Elevators: {self.number_of_elevators}",
            f"Elevator Capacity: {self.elevator_capacity}",
            f"System Status: {self.system_status.value}",
            "",
            "Elevator Status:",
        ]
        for report in self.elevator_reports:
            door = "Door Closed" if report.door_closed else "Door Open"
            lines.append(
                f" - Elevator ID {report.elevator_id}: Floor {report.current_floor}, "
                f"{door}, Direction {report.direction.symbol}, Status: {report}"
            )
        lines += ["", "Up Requests:"]
        lines += [f" - {request}" for request in self.up_requests]
        lines += ["", "Down Requests:"]
        lines += [f" - {request}" for request in self.down_requests]
        return "\n".join(lines) + "\n"
