from .reservoir import (
    DEFAULT_RESERVOIR_SIZE,
    Reservoir,
    SlidingWindowReservoir,
    UniformReservoir,
)
from .snapshot import Number, Snapshot

__all__ = [
    "DEFAULT_RESERVOIR_SIZE",
    "Number",
    "Reservoir",
    "SlidingWindowReservoir",
    "Snapshot",
    "UniformReservoir",
]
