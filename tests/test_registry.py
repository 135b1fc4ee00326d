from __future__ import annotations

import pytest

from histometrics.contracts.error import InvalidPercentileConfigurationError, PolicyError
from histometrics.metrics.base import Metric, MetricsVisitor
from histometrics.metrics.histogram import Histogram
from histometrics.metrics.registry import MetricsRegistry


class _Gauge(Metric):
    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def visit(self, visitor: MetricsVisitor) -> None:
        return None


class _Recorder(MetricsVisitor):
    def __init__(self) -> None:
        self.reports: dict[str, dict[str, float]] = {}

    def histogram(self, histogram: Histogram) -> None:
        self.reports[histogram.name] = histogram.compute_metrics()


def test_new_histogram_registers_once_per_group() -> None:
    registry = MetricsRegistry()
    first = registry.new_histogram("job", "latency-ms", percentiles=[90.0])
    again = registry.new_histogram("job", "latency-ms")
    other = registry.new_histogram("store", "latency-ms")

    assert first is again
    assert first is not other
    assert "P90" in first.metric_names()
    assert registry.groups() == ["job", "store"]
    assert registry.metrics("job") == {"latency-ms": first}
    assert registry.metrics("missing") == {}


def test_register_rejects_duplicates() -> None:
    registry = MetricsRegistry()
    registry.register("job", _Gauge("queue-depth"))
    with pytest.raises(PolicyError):
        registry.register("job", _Gauge("queue-depth"))


def test_new_histogram_refuses_name_taken_by_other_metric() -> None:
    registry = MetricsRegistry()
    registry.register("job", _Gauge("size"))
    with pytest.raises(PolicyError):
        registry.new_histogram("job", "size")


def test_new_histogram_propagates_configuration_errors() -> None:
    registry = MetricsRegistry()
    with pytest.raises(InvalidPercentileConfigurationError):
        registry.new_histogram("job", "empty", skip_default_metrics=True)
    assert registry.metrics("job") == {}


def test_visit_walks_every_histogram() -> None:
    registry = MetricsRegistry()
    registry.register("job", _Gauge("ignored"))
    sizes = registry.new_histogram("job", "batch-size", percentiles=[50.0], skip_default_metrics=True)
    waits = registry.new_histogram("store", "wait-ms")
    for value in (1, 2, 3):
        sizes.update(value)
    waits.update(7.5)

    recorder = _Recorder()
    registry.visit(recorder)

    assert recorder.reports["batch-size"] == {"P50": 2.0}
    assert recorder.reports["wait-ms"]["Max"] == 7.5
    assert set(recorder.reports) == {"batch-size", "wait-ms"}
