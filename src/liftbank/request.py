from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import InvalidRequest


class Direction(str, Enum):
    """Travel direction of a request or an elevator."""

    UP = "up"
    DOWN = "down"
    IDLE = "idle"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {Direction.UP: "^", Direction.DOWN: "v", Direction.IDLE: "-"}


@dataclass(frozen=True)
class Request:
    """A rider travelling from ``origin`` to ``destination``."""

    origin: int
    destination: int

    def __post_init__(self) -> None:
        if self.origin < 0 or self.destination < 0:
            raise InvalidRequest(f"Floors must be non-negative, got {self}")
        if self.origin == self.destination:
            raise InvalidRequest("Start floor and end floor cannot be the same.")

    @property
    def direction(self) -> Direction:
        return Direction.UP if self.destination > self.origin else Direction.DOWN

    @property
    def going_up(self) -> bool:
        return self.direction is Direction.UP

    def within(self, number_of_floors: int) -> bool:
        return self.origin < number_of_floors and self.destination < number_of_floors

    def to_dict(self) -> dict:
        return {
            "origin": self.origin,
            "destination": self.destination,
            "direction": self.direction.value,
        }

    def __str__(self) -> str:
        return f"{self.origin}->{self.destination}"
