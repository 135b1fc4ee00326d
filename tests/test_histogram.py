from __future__ import annotations

import pytest

from histometrics.config import HistogramDefaults
from histometrics.contracts.error import (
    BadInputError,
    ConfigurationError,
    InvalidPercentileConfigurationError,
    MissingNameError,
)
from histometrics.core.reservoir import SlidingWindowReservoir, UniformReservoir
from histometrics.core.snapshot import Snapshot
from histometrics.metrics.base import MetricsVisitor
from histometrics.metrics.extractors import (
    DEFAULT_METRIC_EXTRACTORS,
    MetricExtractor,
    MetricKind,
)
from histometrics.metrics.histogram import Histogram, HistogramSpec, build_histogram

METRIC_NAME = "Metric1"
DEFAULT_NAMES = {"Min", "Max", "Mean", "StdDev", "P50", "P75", "P95", "P98", "P99", "P99_9"}


def test_name_field_required() -> None:
    with pytest.raises(MissingNameError, match="`name` field is required"):
        Histogram.builder().build()


@pytest.mark.parametrize("name", ["", "   "])
def test_blank_name_is_rejected(name: str) -> None:
    with pytest.raises(MissingNameError):
        Histogram.builder().name(name).build()


def test_default_metrics_match_returned_metrics() -> None:
    histogram = Histogram.builder().name(METRIC_NAME).build()
    returned = set(histogram.compute_metrics())
    assert returned == set(histogram.default_metric_names()) == DEFAULT_NAMES
    assert histogram.name == METRIC_NAME


def test_skip_default_metrics_needs_percentiles_set() -> None:
    with pytest.raises(InvalidPercentileConfigurationError, match="non-empty list of percentiles"):
        Histogram.builder().name(METRIC_NAME).skip_default_metrics(True).build()


def test_skip_default_metrics_does_not_allow_empty_percentiles() -> None:
    with pytest.raises(InvalidPercentileConfigurationError):
        Histogram.builder().name(METRIC_NAME).skip_default_metrics(True).percentiles([]).build()


def test_skip_default_metrics_rejects_only_invalid_percentiles() -> None:
    builder = Histogram.builder().name(METRIC_NAME).skip_default_metrics().percentiles([-3.0, 140.0])
    with pytest.raises(ConfigurationError):
        builder.build()


def test_skip_default_metrics() -> None:
    histogram = (
        Histogram.builder()
        .name(METRIC_NAME)
        .skip_default_metrics(True)
        .percentiles([0.0, 10.1, 11.0, 99.9])
        .build()
    )
    assert set(histogram.compute_metrics()) == {"P0", "P10_1", "P11", "P99_9"}


def test_percentiles_are_added_to_defaults() -> None:
    histogram = Histogram.builder().name(METRIC_NAME).percentiles([0.0, 10.1, 11.0, 99.9]).build()
    returned = set(histogram.compute_metrics())
    assert returned == DEFAULT_NAMES | {"P0", "P10_1", "P11", "P99_9"}
    # the user supplied P99_9 collides with the default one; the default stays
    assert histogram.extractors["P99_9"] is DEFAULT_METRIC_EXTRACTORS["P99_9"]
    assert len(returned) == len(DEFAULT_NAMES) + 3


def test_invalid_percentiles_are_filtered() -> None:
    histogram = (
        Histogram.builder()
        .name(METRIC_NAME)
        .skip_default_metrics(True)
        .percentiles([-1.0, 0.05, 10.1, 11.0, 99.99, 101.0])
        .build()
    )
    assert set(histogram.compute_metrics()) == {"P0_05", "P10_1", "P11", "P99_99"}


def test_compute_metrics() -> None:
    histogram = Histogram.builder().name(METRIC_NAME).percentiles([0.01, 1.0, 60.0]).build()

    for value in range(1, 100):
        histogram.update(value)
    metrics = histogram.compute_metrics()

    assert metrics["Min"] == 1
    assert metrics["Max"] == 99
    assert metrics["Mean"] == 50.0
    assert metrics["P50"] == 50.0
    assert metrics["P75"] == 75.0
    assert metrics["P95"] == 95.0
    assert metrics["P98"] == 98.0
    assert metrics["P99"] == 99.0
    assert metrics["P99_9"] == 99.0
    assert metrics["P0_01"] == 1.0
    assert metrics["P1"] == 1.0
    assert metrics["P60"] == 60.0
    assert metrics["StdDev"] == pytest.approx(28.5773803324704)


def test_compute_metrics_is_idempotent() -> None:
    histogram = Histogram.builder().name(METRIC_NAME).reservoir(UniformReservoir(16, seed=3)).build()
    for value in range(500):
        histogram.update(value * 1.5)
    assert histogram.compute_metrics() == histogram.compute_metrics()


def test_empty_histogram_reports_zeroes() -> None:
    histogram = Histogram.builder().name(METRIC_NAME).percentiles([12.5]).build()
    metrics = histogram.compute_metrics()
    assert set(metrics) == DEFAULT_NAMES | {"P12_5"}
    assert all(value == 0 for value in metrics.values())
    assert histogram.count == 0


def test_custom_reservoir_is_used() -> None:
    window = SlidingWindowReservoir(3)
    histogram = Histogram.builder().name(METRIC_NAME).reservoir(window).build()
    for value in (100, 1, 2, 3):
        histogram.update(value)
    assert histogram.reservoir is window
    assert histogram.compute_metrics()["Max"] == 3
    assert histogram.count == 4


def test_default_reservoirs_are_not_shared() -> None:
    first = Histogram.builder().name("a").build()
    second = Histogram.builder().name("b").build()
    first.update(10)
    assert first.reservoir is not second.reservoir
    assert second.compute_metrics()["Max"] == 0


def test_builder_uses_configured_defaults() -> None:
    defaults = HistogramDefaults(reservoir_size=4, reservoir_seed=11, percentiles=[90.0])
    histogram = Histogram.builder(defaults).name(METRIC_NAME).build()
    for value in range(100):
        histogram.update(value)
    assert "P90" in histogram.metric_names()
    assert histogram.snapshot().size() == 4
    assert isinstance(histogram.reservoir, UniformReservoir)
    assert histogram.reservoir.capacity == 4

    explicit = Histogram.builder(defaults).name(METRIC_NAME).percentiles([]).build()
    assert explicit.metric_names() == DEFAULT_NAMES


def test_build_histogram_from_spec() -> None:
    spec = HistogramSpec(name="latency", percentiles=(25.0,), skip_default_metrics=True)
    histogram = build_histogram(spec)
    histogram.update(4)
    assert histogram.compute_metrics() == {"P25": 4.0}


def test_get_metric_accepts_extractors_and_callables() -> None:
    histogram = Histogram.builder().name(METRIC_NAME).build()
    for value in (3, 1, 2):
        histogram.update(value)
    assert histogram.get_metric(MetricExtractor(MetricKind.MAX)) == 3
    assert histogram.get_metric(lambda snapshot: snapshot.size()) == 3
    assert histogram.get_metric(Snapshot.median) == 2.0


def test_visit_dispatches_to_histogram_hook() -> None:
    seen: list[Histogram] = []

    class Collector(MetricsVisitor):
        def histogram(self, histogram: Histogram) -> None:
            seen.append(histogram)

    histogram = Histogram.builder().name(METRIC_NAME).build()
    histogram.visit(Collector())
    Collector().visit(histogram)
    assert seen == [histogram, histogram]


@pytest.mark.parametrize("bad", [None, "7", False, float("nan")])
def test_rejected_update_leaves_metrics_computable(bad: object) -> None:
    window = SlidingWindowReservoir(8)
    histogram = Histogram.builder().name(METRIC_NAME).reservoir(window).build()
    histogram.update(1)
    with pytest.raises(BadInputError):
        histogram.update(bad)  # type: ignore[arg-type]
    histogram.update(3)

    metrics = histogram.compute_metrics()
    assert metrics["Min"] == 1
    assert metrics["Max"] == 3
    assert histogram.count == 2


@pytest.mark.parametrize("name", [123, 4.5, ["latency"]])
def test_non_string_name_is_a_configuration_error(name: object) -> None:
    with pytest.raises(ConfigurationError, match="must be a string"):
        Histogram.builder().name(name).build()  # type: ignore[arg-type]


def test_non_numeric_percentiles_are_filtered() -> None:
    histogram = (
        Histogram.builder()
        .name(METRIC_NAME)
        .skip_default_metrics()
        .percentiles(["p90", None, True, 90.0])  # type: ignore[list-item]
        .build()
    )
    assert histogram.metric_names() == {"P90"}

    with pytest.raises(InvalidPercentileConfigurationError):
        Histogram.builder().name(METRIC_NAME).skip_default_metrics().percentiles(
            ["high", None]  # type: ignore[list-item]
        ).build()
