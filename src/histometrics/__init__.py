"""Reservoir-sampled histogram metrics."""

from . import config, contracts, core, metrics
from .contracts import (
    ConfigurationError,
    InvalidPercentileConfigurationError,
    MissingNameError,
)
from .core import SlidingWindowReservoir, Snapshot, UniformReservoir
from .log import configure_logging
from .metrics import (
    Histogram,
    HistogramBuilder,
    HistogramSpec,
    MetricsRegistry,
    MetricsVisitor,
    build_histogram,
)

__all__ = [
    "ConfigurationError",
    "Histogram",
    "HistogramBuilder",
    "HistogramSpec",
    "InvalidPercentileConfigurationError",
    "MetricsRegistry",
    "MetricsVisitor",
    "MissingNameError",
    "SlidingWindowReservoir",
    "Snapshot",
    "UniformReservoir",
    "build_histogram",
    "config",
    "configure_logging",
    "contracts",
    "core",
    "metrics",
]
