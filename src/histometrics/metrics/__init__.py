"""Histogram metric, extractors and registry."""

from .base import Metric, MetricsVisitor
from .extractors import (
    DEFAULT_METRIC_EXTRACTORS,
    MetricExtractor,
    MetricKind,
    build_extractor_map,
    format_percentile_name,
)
from .histogram import Histogram, HistogramBuilder, HistogramSpec, build_histogram
from .registry import MetricsRegistry

__all__ = [
    "DEFAULT_METRIC_EXTRACTORS",
    "Histogram",
    "HistogramBuilder",
    "HistogramSpec",
    "Metric",
    "MetricExtractor",
    "MetricKind",
    "MetricsRegistry",
    "MetricsVisitor",
    "build_extractor_map",
    "build_histogram",
    "format_percentile_name",
]
