"""
In-process metrics for the results service.

Counters and rolling-window histograms, rendered in the Prometheus text format
by `/metrics`. The registry is per process; a scraper sees one worker at a time.
"""

import time
from dataclasses import dataclass, field
from threading import Lock

WINDOW_SIZE = 1000


@dataclass
class Counter:
    """Monotonic counter."""
    value: int = 0
    _lock: Lock = field(default_factory=Lock)

    def inc(self, amount: int = 1) -> None:
        with self._lock:
            self.value += amount

    def get(self) -> int:
        with self._lock:
            return self.value

    def reset(self) -> None:
        with self._lock:
            self.value = 0


@dataclass
class Histogram:
    """
    Histogram over the most recent `WINDOW_SIZE` observations.

    `count` and `sum` cover every observation ever made; min/max/avg and the
    percentiles cover the window only.
    """
    values: list[float] = field(default_factory=list)
    _count: int = 0
    _sum: float = 0.0
    _lock: Lock = field(default_factory=Lock)

    def observe(self, value: float) -> None:
        with self._lock:
            self._count += 1
            self._sum += value
            self.values.append(value)
            if len(self.values) > WINDOW_SIZE:
                del self.values[: len(self.values) - WINDOW_SIZE]

    def get_stats(self) -> dict[str, float]:
        with self._lock:
            window = sorted(self.values)
            n = len(window)
            if n == 0:
                return {
                    "count": self._count,
                    "sum": self._sum,
                    "min": 0.0,
                    "max": 0.0,
                    "avg": 0.0,
                    "p50": 0.0,
                    "p95": 0.0,
                    "p99": 0.0,
                }

            def pct(p: float) -> float:
                return window[min(int((n - 1) * p), n - 1)]

            return {
                "count": self._count,
                "sum": self._sum,
                "min": window[0],
                "max": window[-1],
                "avg": sum(window) / n,
                "p50": pct(0.50),
                "p95": pct(0.95),
                "p99": pct(0.99),
            }

    def reset(self) -> None:
        with self._lock:
            self.values.clear()
            self._count = 0
            self._sum = 0.0


class MetricsCollector:
    """Named registry of counters and histograms."""

    def __init__(self):
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}
        self._lock = Lock()

    def counter(self, name: str) -> Counter:
        with self._lock:
            return self._counters.setdefault(name, Counter())

    def histogram(self, name: str) -> Histogram:
        with self._lock:
            return self._histograms.setdefault(name, Histogram())

    def get_all_metrics(self) -> dict:
        with self._lock:
            counters = dict(self._counters)
            histograms = dict(self._histograms)
        return {
            "counters": {name: c.get() for name, c in counters.items()},
            "histograms": {name: h.get_stats() for name, h in histograms.items()},
        }

    def reset_all(self) -> None:
        with self._lock:
            for c in self._counters.values():
                c.reset()
            for h in self._histograms.values():
                h.reset()

    def render_prometheus(self, version: str) -> str:
        """Render every metric in the Prometheus text exposition format."""
        snapshot = self.get_all_metrics()
        lines = [
            "# TYPE sportbot_build_info gauge",
            f'sportbot_build_info{{version="{version}"}} 1',
        ]
        for name, value in sorted(snapshot["counters"].items()):
            lines.append(f"# TYPE {name} counter")
            lines.append(f"{name} {value}")
        for name, stats in sorted(snapshot["histograms"].items()):
            lines.append(f"# TYPE {name} summary")
            lines.append(f"{name}_count {stats['count']}")
            lines.append(f"{name}_sum {stats['sum']}")
            for q in ("p50", "p95", "p99"):
                quantile = "0." + q[1:]
                lines.append(f'{name}{{quantile="{quantile}"}} {stats[q]}')
        return "\n".join(lines) + "\n"


metrics = MetricsCollector()


def increment_counter(name: str, amount: int = 1) -> None:
    metrics.counter(name).inc(amount)


def observe_histogram(name: str, value: float) -> None:
    metrics.histogram(name).observe(value)


class Timer:
    """Context manager that records elapsed seconds into a histogram."""

    def __init__(self, histogram_name: str):
        self.histogram_name = histogram_name
        self.start_time: float | None = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            observe_histogram(self.histogram_name, time.perf_counter() - self.start_time)
