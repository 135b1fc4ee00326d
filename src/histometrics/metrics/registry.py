"""Grouped registry of metrics that reporters walk with a visitor."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from ..config import HistogramDefaults
from ..contracts.error import PolicyError
from ..core.reservoir import Reservoir
from ..log import metric_context
from .base import Metric, MetricsVisitor
from .histogram import Histogram, HistogramSpec, build_histogram

logger = logging.getLogger(__name__)


class MetricsRegistry:
    def __init__(self, defaults: HistogramDefaults | None = None) -> None:
        self._defaults = defaults
        self._groups: dict[str, dict[str, Metric]] = {}
        self._lock = threading.Lock()

    def register(self, group: str, metric: Metric) -> Metric:
        with self._lock:
            metrics = self._groups.setdefault(group, {})
            if metric.name in metrics:
                raise PolicyError(f"Metric {metric.name!r} already registered in group {group!r}")
            metrics[metric.name] = metric
        logger.debug("Registered", extra=metric_context(metric.name, group))
        return metric

    def new_histogram(
        self,
        group: str,
        name: str,
        *,
        reservoir: Reservoir | None = None,
        percentiles: Iterable[float] | None = None,
        skip_default_metrics: bool = False,
    ) -> Histogram:
        """Build and register a histogram, or return the one already registered."""

        with self._lock:
            existing = self._groups.get(group, {}).get(name)
        if existing is not None:
            if not isinstance(existing, Histogram):
                raise PolicyError(
                    f"Metric {name!r} in group {group!r} is a {type(existing).__name__}"
                )
            return existing

        spec = HistogramSpec(
            name=name,
            reservoir=reservoir,
            percentiles=None if percentiles is None else tuple(percentiles),
            skip_default_metrics=skip_default_metrics,
        )
        histogram = build_histogram(spec, self._defaults)
        with self._lock:
            metrics = self._groups.setdefault(group, {})
            current = metrics.setdefault(name, histogram)
        if not isinstance(current, Histogram):
            raise PolicyError(f"Metric {name!r} in group {group!r} is a {type(current).__name__}")
        if current is histogram:
            logger.debug("Registered", extra=metric_context(name, group))
        return current

    def groups(self) -> list[str]:
        with self._lock:
            return sorted(self._groups)

    def metrics(self, group: str) -> dict[str, Metric]:
        with self._lock:
            return dict(self._groups.get(group, {}))

    def visit(self, visitor: MetricsVisitor) -> None:
        """Walk every registered metric; visitors run outside the registry lock."""

        with self._lock:
            metrics = [metric for group in self._groups.values() for metric in group.values()]
        for metric in metrics:
            visitor.visit(metric)


__all__ = ["MetricsRegistry"]
