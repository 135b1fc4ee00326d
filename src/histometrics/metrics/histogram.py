"""Reservoir-backed histogram metric and its construction helpers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ..config import DEFAULT_CONFIG, HistogramDefaults
from ..contracts.error import (
    ConfigurationError,
    InvalidPercentileConfigurationError,
    MissingNameError,
)
from ..core.reservoir import Reservoir, UniformReservoir, check_observation
from ..core.snapshot import Number, Snapshot
from ..log import metric_context
from .base import Metric, MetricsVisitor
from .extractors import DEFAULT_METRIC_EXTRACTORS, MetricExtractor, build_extractor_map

logger = logging.getLogger(__name__)

Extractor = MetricExtractor | Callable[[Snapshot], Any]


class Histogram(Metric):
    """Distribution of observed values, summarised from a sampling reservoir.

    The metric-name to extractor table is fixed when the histogram is built.
    :meth:`compute_metrics` evaluates every extractor against a single
    snapshot, so all values returned by one call describe the same samples.
    Use :meth:`builder` or :func:`build_histogram` to create instances.
    """

    __slots__ = ("_name", "_reservoir", "_extractors")

    def __init__(
        self,
        name: str,
        reservoir: Reservoir,
        extractors: Mapping[str, MetricExtractor],
    ) -> None:
        self._name = name
        self._reservoir = reservoir
        self._extractors: Mapping[str, MetricExtractor] = MappingProxyType(dict(extractors))

    def __repr__(self) -> str:
        return f"Histogram(name={self._name!r}, metrics={list(self._extractors)})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def reservoir(self) -> Reservoir:
        return self._reservoir

    @property
    def extractors(self) -> Mapping[str, MetricExtractor]:
        return self._extractors

    @property
    def count(self) -> int:
        """Observations recorded, when the reservoir tracks them; else samples held."""

        count = getattr(self._reservoir, "count", None)
        return count if isinstance(count, int) else self._reservoir.size()

    def update(self, value: Number) -> None:
        self._reservoir.update(check_observation(value))

    def snapshot(self) -> Snapshot:
        return self._reservoir.snapshot()

    def compute_metrics(self) -> dict[str, Number]:
        snapshot = self._reservoir.snapshot()
        return {name: extractor.apply(snapshot) for name, extractor in self._extractors.items()}

    def get_metric(self, extractor: Extractor) -> Any:
        """Evaluate a single extractor against a fresh snapshot."""

        snapshot = self._reservoir.snapshot()
        if isinstance(extractor, MetricExtractor):
            return extractor.apply(snapshot)
        return extractor(snapshot)

    def metric_names(self) -> frozenset[str]:
        return frozenset(self._extractors)

    @staticmethod
    def default_metric_names() -> frozenset[str]:
        return frozenset(DEFAULT_METRIC_EXTRACTORS)

    def visit(self, visitor: MetricsVisitor) -> None:
        visitor.histogram(self)

    @staticmethod
    def builder(defaults: HistogramDefaults | None = None) -> HistogramBuilder:
        return HistogramBuilder(defaults)


@dataclass(frozen=True)
class HistogramSpec:
    """Everything needed to build a :class:`Histogram`.

    ``reservoir`` defaults to a fresh :class:`UniformReservoir`; ``percentiles``
    default to the configured extra percentiles (none out of the box).
    """

    name: str | None = None
    reservoir: Reservoir | None = None
    percentiles: Sequence[float] | None = None
    skip_default_metrics: bool = False


def build_histogram(spec: HistogramSpec, defaults: HistogramDefaults | None = None) -> Histogram:
    """Validate ``spec`` and return the histogram it describes."""

    defaults = defaults if defaults is not None else DEFAULT_CONFIG.histogram
    if spec.name is not None and not isinstance(spec.name, str):
        raise ConfigurationError(
            f"`name` must be a string, got {type(spec.name).__name__}",
            hint="Histogram names are plain strings such as 'request-latency-ms'",
        )
    if spec.name is None or not spec.name.strip():
        raise MissingNameError(
            "`name` field is required", hint="Set a name before building the histogram"
        )

    percentiles: Iterable[float] = (
        spec.percentiles if spec.percentiles is not None else defaults.percentiles
    )
    extractors = build_extractor_map(percentiles, spec.skip_default_metrics)
    if spec.skip_default_metrics and not extractors:
        raise InvalidPercentileConfigurationError(
            "Histogram requires a non-empty list of percentiles when skip_default_metrics is set",
            hint="Pass percentiles within [0, 100] or keep the default metrics",
        )

    reservoir = spec.reservoir
    if reservoir is None:
        reservoir = UniformReservoir(defaults.reservoir_size, seed=defaults.reservoir_seed)

    logger.debug(
        "Built with metrics %s on %r",
        sorted(extractors),
        reservoir,
        extra=metric_context(spec.name),
    )
    return Histogram(spec.name, reservoir, extractors)


class HistogramBuilder:
    """Fluent front end over :class:`HistogramSpec` and :func:`build_histogram`."""

    def __init__(self, defaults: HistogramDefaults | None = None) -> None:
        self._defaults = defaults
        self._name: str | None = None
        self._reservoir: Reservoir | None = None
        self._percentiles: list[float] | None = None
        self._skip_default_metrics = False

    def name(self, name: str | None) -> HistogramBuilder:
        self._name = name
        return self

    def reservoir(self, reservoir: Reservoir | None) -> HistogramBuilder:
        """Use a custom reservoir instead of a uniform one of the configured size."""

        self._reservoir = reservoir
        return self

    def percentiles(self, percentiles: Iterable[float] | None) -> HistogramBuilder:
        """Report these percentiles (0..100); out-of-range entries are ignored."""

        self._percentiles = None if percentiles is None else list(percentiles)
        return self

    def skip_default_metrics(self, skip: bool = True) -> HistogramBuilder:
        """Report only the custom percentiles, which then must not be empty."""

        self._skip_default_metrics = skip
        return self

    def spec(self) -> HistogramSpec:
        return HistogramSpec(
            name=self._name,
            reservoir=self._reservoir,
            percentiles=None if self._percentiles is None else tuple(self._percentiles),
            skip_default_metrics=self._skip_default_metrics,
        )

    def build(self) -> Histogram:
        return build_histogram(self.spec(), self._defaults)


__all__ = [
    "Extractor",
    "Histogram",
    "HistogramBuilder",
    "HistogramSpec",
    "build_histogram",
]
