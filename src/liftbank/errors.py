"""Exceptions raised by the elevator bank core."""

from __future__ import annotations

from .states import SystemStatus


class ElevatorSystemError(Exception):
    """Base exception for all elevator system errors."""

    pass


class InvalidConfiguration(ElevatorSystemError, ValueError):
    """Raised when a building or its settings cannot be constructed."""

    pass


class InvalidTransition(ElevatorSystemError):
    """Raised when the system is asked to start while it is winding down."""

    pass


class SystemNotAccepting(ElevatorSystemError):
    """Raised when a request is submitted while the system is not running."""

    def __init__(self, status: SystemStatus) -> None:
        super().__init__(
            f"The building elevator system is not currently accepting requests: {status.value}"
        )
        self.status = status


class InvalidRequest(ElevatorSystemError, ValueError):
    """Raised when a request names the same floor twice or a floor outside the building."""

    pass


__all__ = [
    "ElevatorSystemError",
    "InvalidConfiguration",
    "InvalidTransition",
    "SystemNotAccepting",
    "InvalidRequest",
]
