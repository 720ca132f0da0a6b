"""Discrete-time simulation of a bank of elevators."""

from .building import Building
from .config import BuildingConfig, ElevatorSettings
from .elevator import Elevator
from .errors import (
    ElevatorSystemError,
    InvalidConfiguration,
    InvalidRequest,
    InvalidTransition,
    SystemNotAccepting,
)
from .report import BuildingReport, ElevatorReport
from .request import Direction, Request
from .states import Phase, ServiceState, SystemStatus

__all__ = [
    "Building",
    "BuildingConfig",
    "BuildingReport",
    "Direction",
    "Elevator",
    "ElevatorReport",
    "ElevatorSettings",
    "ElevatorSystemError",
    "InvalidConfiguration",
    "InvalidRequest",
    "InvalidTransition",
    "Phase",
    "Request",
    "ServiceState",
    "SystemNotAccepting",
    "SystemStatus",
]
