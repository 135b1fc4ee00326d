"""Metric contract and the visitor used by reporting collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .histogram import Histogram


class Metric(ABC):
    __slots__ = ()

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def visit(self, visitor: MetricsVisitor) -> None:
        """Dispatch to the visitor hook matching this metric type."""


class MetricsVisitor:
    """Base visitor; reporters override the hooks for the metric types they export."""

    def visit(self, metric: Metric) -> None:
        metric.visit(self)

    def histogram(self, histogram: Histogram) -> None:
        return None


__all__ = ["Metric", "MetricsVisitor"]
