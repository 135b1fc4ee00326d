"""Metric extractors evaluated against a histogram :class:`Snapshot`."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import cast

from ..core.snapshot import Number, Snapshot

logger = logging.getLogger(__name__)


class MetricKind(Enum):
    MIN = "min"
    MAX = "max"
    MEAN = "mean"
    STDDEV = "stddev"
    PERCENTILE = "percentile"


@dataclass(frozen=True, slots=True)
class MetricExtractor:
    """One named statistic; ``percentile`` is set only for ``PERCENTILE``."""

    kind: MetricKind
    percentile: float | None = None

    def __post_init__(self) -> None:
        if (self.kind is MetricKind.PERCENTILE) != (self.percentile is not None):
            raise ValueError("percentile must be given exactly for MetricKind.PERCENTILE")

    @classmethod
    def at(cls, percentile: float) -> MetricExtractor:
        return cls(MetricKind.PERCENTILE, float(percentile))

    def apply(self, snapshot: Snapshot) -> Number:
        if self.kind is MetricKind.MIN:
            return snapshot.min()
        if self.kind is MetricKind.MAX:
            return snapshot.max()
        if self.kind is MetricKind.MEAN:
            return snapshot.mean()
        if self.kind is MetricKind.STDDEV:
            return snapshot.stddev()
        return snapshot.value_at_percentile(cast(float, self.percentile))

    __call__ = apply


DEFAULT_METRIC_EXTRACTORS: Mapping[str, MetricExtractor] = MappingProxyType(
    {
        "Min": MetricExtractor(MetricKind.MIN),
        "Max": MetricExtractor(MetricKind.MAX),
        "Mean": MetricExtractor(MetricKind.MEAN),
        "StdDev": MetricExtractor(MetricKind.STDDEV),
        "P50": MetricExtractor.at(50.0),
        "P75": MetricExtractor.at(75.0),
        "P95": MetricExtractor.at(95.0),
        "P98": MetricExtractor.at(98.0),
        "P99": MetricExtractor.at(99.0),
        "P99_9": MetricExtractor.at(99.9),
    }
)


def is_valid_percentile(value: float) -> bool:
    return not math.isnan(value) and 0.0 <= value <= 100.0


def format_percentile_name(percentile: float) -> str:
    """Render ``P<value>``: ``11.0 -> P11``, ``10.1 -> P10_1``."""

    value = float(percentile)
    if value == int(value):
        return f"P{int(value)}"
    # fixed point, so 0.00001 is P0_00001 rather than P1e-05
    return "P" + format(Decimal(repr(value)), "f").replace(".", "_")


def percentile_extractors(percentiles: Iterable[float]) -> dict[str, MetricExtractor]:
    """Map valid percentiles to named extractors.

    Non-numeric and out-of-range entries are dropped, as are later entries
    whose name repeats an earlier one.
    """

    out: dict[str, MetricExtractor] = {}
    for raw in percentiles:
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            logger.debug("Ignoring non-numeric percentile: %r", raw)
            continue
        value = float(raw)
        if not is_valid_percentile(value):
            logger.debug("Ignoring percentile outside [0, 100]: %r", raw)
            continue
        out.setdefault(format_percentile_name(value), MetricExtractor.at(value))
    return out


def build_extractor_map(
    percentiles: Iterable[float], skip_default_metrics: bool
) -> dict[str, MetricExtractor]:
    """Assemble the metric-name to extractor table for one histogram.

    Without ``skip_default_metrics`` the defaults come first and user
    percentiles whose name matches a default are dropped.
    """

    custom = percentile_extractors(percentiles)
    if skip_default_metrics:
        return custom

    extractors = dict(DEFAULT_METRIC_EXTRACTORS)
    for name, extractor in custom.items():
        if name in extractors:
            logger.debug("Percentile %s duplicates a default metric; keeping the default", name)
            continue
        extractors[name] = extractor
    return extractors


__all__ = [
    "DEFAULT_METRIC_EXTRACTORS",
    "MetricExtractor",
    "MetricKind",
    "build_extractor_map",
    "format_percentile_name",
    "is_valid_percentile",
    "percentile_extractors",
]
