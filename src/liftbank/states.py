from __future__ import annotations

from enum import Enum


class Phase(str, Enum):
    """Which transition function drives an elevator on its next tick."""

    IDLE = "idle"
    MOVING = "moving"
    DOOR_OPEN = "door_open"
    OUT_OF_SERVICE = "out_of_service"


class ServiceState(str, Enum):
    """Whether an elevator can be handed new requests."""

    IN_SERVICE = "in_service"
    TAKING_NO_MORE_REQUESTS = "taking_no_more_requests"
    OUT_OF_SERVICE = "out_of_service"


class SystemStatus(str, Enum):
    """Lifecycle of the whole elevator bank."""

    OUT_OF_SERVICE = "out_of_service"
    RUNNING = "running"
    STOPPING = "stopping"

    @property
    def accepting_requests(self) -> bool:
        return self is SystemStatus.RUNNING
