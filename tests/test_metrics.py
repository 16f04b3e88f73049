"""
Unit tests for metrics collection.
"""

from sportbot.metrics import (
    WINDOW_SIZE,
    Counter,
    Histogram,
    MetricsCollector,
    Timer,
    increment_counter,
    metrics,
    observe_histogram,
)


def test_histogram_truncation_preserves_total_count():
    """Total count and sum reflect all observations, not just the window."""
    hist = Histogram()

    for i in range(2000):
        hist.observe(float(i))

    stats = hist.get_stats()
    assert stats["count"] == 2000
    assert stats["sum"] == sum(range(2000))
    assert len(hist.values) == WINDOW_SIZE
    assert min(hist.values) == 1000.0


def test_histogram_percentiles():
    hist = Histogram()
    for i in range(100):
        hist.observe(float(i))

    stats = hist.get_stats()
    # (n-1) * p: 49.5 -> 49, 94.05 -> 94, 98.01 -> 98
    assert stats["p50"] == 49.0
    assert stats["p95"] == 94.0
    assert stats["p99"] == 98.0
    assert stats["min"] == 0.0
    assert stats["max"] == 99.0


def test_histogram_edge_cases():
    hist = Histogram()
    hist.observe(42.0)
    assert hist.get_stats()["p99"] == 42.0

    hist.reset()
    stats = hist.get_stats()
    assert stats["count"] == 0
    assert stats["sum"] == 0.0
    assert stats["p50"] == 0.0


def test_counter_basic():
    counter = Counter()

    assert counter.get() == 0
    counter.inc()
    counter.inc(5)
    assert counter.get() == 6
    counter.reset()
    assert counter.get() == 0


def test_metrics_collector():
    collector = MetricsCollector()

    collector.counter("test_counter").inc(10)
    collector.histogram("test_hist").observe(1.5)
    collector.histogram("test_hist").observe(2.5)

    all_metrics = collector.get_all_metrics()
    assert all_metrics["counters"]["test_counter"] == 10
    assert all_metrics["histograms"]["test_hist"]["count"] == 2
    assert all_metrics["histograms"]["test_hist"]["sum"] == 4.0


def test_render_prometheus():
    collector = MetricsCollector()
    collector.counter("validation_runs_total").inc(2)
    collector.histogram("http_request_duration_seconds").observe(0.25)

    text = collector.render_prometheus("1.2.3")

    assert 'sportbot_build_info{version="1.2.3"} 1' in text
    assert "# TYPE validation_runs_total counter" in text
    assert "validation_runs_total 2" in text
    assert "# TYPE http_request_duration_seconds summary" in text
    assert "http_request_duration_seconds_count 1" in text
    assert 'http_request_duration_seconds{quantile="0.95"} 0.25' in text
    assert text.endswith("\n")


def test_module_helpers_use_global_registry():
    increment_counter("helper_counter", 3)
    observe_histogram("helper_hist", 1.0)
    with Timer("helper_timer"):
        pass

    snapshot = metrics.get_all_metrics()
    assert snapshot["counters"]["helper_counter"] == 3
    assert snapshot["histograms"]["helper_hist"]["count"] == 1
    assert snapshot["histograms"]["helper_timer"]["count"] == 1
