from __future__ import annotations

from typing import Dict, Type

from .interface import Allocator, CarView
from .queues import DirectionalQueues, RequestQueue
from .rendezvous import GROUND_FLOOR, RendezvousAllocator

__all__ = [
    "Allocator",
    "CarView",
    "DirectionalQueues",
    "GROUND_FLOOR",
    "RendezvousAllocator",
    "RequestQueue",
    "get_allocator",
]


ALLOCATOR_REGISTRY: Dict[str, Type[Allocator]] = {
    "rendezvous": RendezvousAllocator,
}


def get_allocator(name: str, **kwargs) -> Allocator:
    cls = ALLOCATOR_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown allocator '{name}'. Available: {', '.join(ALLOCATOR_REGISTRY)}")
    return cls(**kwargs)
