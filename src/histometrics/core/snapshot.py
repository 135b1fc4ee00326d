"""Point-in-time statistical view over reservoir samples."""

from __future__ import annotations

import math
import statistics
from collections.abc import Iterable

from ..contracts.error import BadInputError

Number = int | float


class Snapshot:
    """Immutable, ascending copy of the samples held by a reservoir.

    An empty snapshot reports ``0`` for min/max and ``0.0`` for every other
    statistic so that a histogram which never received an update still yields
    a complete metrics mapping.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[Number]) -> None:
        self._values: tuple[Number, ...] = tuple(sorted(values))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Snapshot(size={len(self._values)})"

    def size(self) -> int:
        return len(self._values)

    def values(self) -> tuple[Number, ...]:
        return self._values

    def min(self) -> Number:
        if not self._values:
            return 0
        return self._values[0]

    def max(self) -> Number:
        if not self._values:
            return 0
        return self._values[-1]

    def mean(self) -> float:
        if not self._values:
            return 0.0
        return statistics.fmean(self._values)

    def stddev(self) -> float:
        """Population standard deviation of the sampled values."""

        if len(self._values) <= 1:
            return 0.0
        return statistics.pstdev(self._values)

    def median(self) -> float:
        return self.get_value(0.5)

    def get_value(self, quantile: float) -> float:
        """Return the value at ``quantile`` (0..1) using rank interpolation.

        The rank is ``quantile * (n + 1)`` over 1-based positions; ranks below
        the first sample clamp to it, ranks at or past the last clamp to it,
        and anything in between is interpolated linearly.
        """

        if math.isnan(quantile) or not 0.0 <= quantile <= 1.0:
            raise BadInputError(f"quantile must be within [0, 1], got {quantile!r}")
        values = self._values
        if not values:
            return 0.0

        pos = quantile * (len(values) + 1)
        index = int(pos)
        if index < 1:
            return float(values[0])
        if index >= len(values):
            return float(values[-1])

        lower = values[index - 1]
        upper = values[index]
        return lower + (pos - math.floor(pos)) * (upper - lower)

    def value_at_percentile(self, percentile: float) -> float:
        return self.get_value(percentile / 100)


__all__ = ["Number", "Snapshot"]
