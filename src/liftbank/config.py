from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

from dotenv import load_dotenv

from .errors import InvalidConfiguration

if TYPE_CHECKING:  # pragma: no cover - import cycle safe typing
    from .building import Building


MIN_FLOORS = 2
MIN_ELEVATORS = 1
MIN_CAPACITY = 3


@dataclass(frozen=True)
class ElevatorSettings:
    """Timing and behaviour knobs shared by every elevator in a building."""

    door_open_ticks: int = 3
    idle_wait_ticks: int = 5
    out_of_service_grace: bool = True
    park_when_idle: bool = False

    def __post_init__(self) -> None:
        if self.door_open_ticks < 1:
            raise InvalidConfiguration("Door open duration must be at least 1 tick.")
        if self.idle_wait_ticks < 0:
            raise InvalidConfiguration("Idle wait countdown cannot be negative.")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElevatorSettings":
        known = {key: data[key] for key in cls.__dataclass_fields__ if key in data}
        return cls(**known)


@dataclass
class BuildingConfig:
    """Parameters needed to construct a building."""

    floors: int = 10
    elevators: int = 2
    capacity: int = 5
    settings: ElevatorSettings = field(default_factory=ElevatorSettings)
    allocator: str = "rendezvous"
    auto_step_interval: float = 0.0

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "BuildingConfig":
        load_dotenv(dotenv_path)
        settings = ElevatorSettings(
            door_open_ticks=int(os.getenv("LIFTBANK_DOOR_OPEN_TICKS", "3")),
            idle_wait_ticks=int(os.getenv("LIFTBANK_IDLE_WAIT_TICKS", "5")),
            out_of_service_grace=_env_flag("LIFTBANK_OUT_OF_SERVICE_GRACE", True),
            park_when_idle=_env_flag("LIFTBANK_PARK_WHEN_IDLE", False),
        )
        return cls(
            floors=int(os.getenv("LIFTBANK_FLOORS", "10")),
            elevators=int(os.getenv("LIFTBANK_ELEVATORS", "2")),
            capacity=int(os.getenv("LIFTBANK_CAPACITY", "5")),
            settings=settings,
            allocator=os.getenv("LIFTBANK_ALLOCATOR", "rendezvous"),
            auto_step_interval=float(os.getenv("LIFTBANK_AUTO_STEP_INTERVAL", "0")),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildingConfig":
        return cls(
            floors=data.get("floors", 10),
            elevators=data.get("elevators", 2),
            capacity=data.get("capacity", 5),
            settings=ElevatorSettings.from_dict(data.get("settings", {})),
            allocator=data.get("allocator", "rendezvous"),
        )

    def build(self) -> "Building":
        from .building import Building

        return Building(
            self.floors,
            self.elevators,
            self.capacity,
            settings=self.settings,
            allocator=self.allocator,
        )


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}
