"""In-memory telemetry backend for testing and development.

Simple drop-in replacement for PrometheusTelemetry that supports counters,
gauges, histograms, and timings for testing without a metrics server.
"""

from __future__ import annotations

import threading
from collections import Counter, defaultdict
from dataclasses import dataclass, field

from loguru import logger

from intentbot.telemetry.base import Labels


@dataclass
class InMemoryTelemetry:
    """In-memory telemetry backend for testing and development.

    Stores all metrics in memory for inspection during tests. Zero-valued
    increments still create their series, mirroring Prometheus ``inc(0)``.
    """

    counters: dict[str, Counter] = field(default_factory=lambda: defaultdict(Counter))
    gauges: dict[str, float] = field(default_factory=dict)
    histograms: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))
    timings: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None:
        """Increase a named counter."""
        key = self._make_key(name, labels)
        with self._lock:
            self.counters[key][name] += value
        logger.trace("telemetry {} += {}", key, value)

    def gauge(self, name: str, value: float, labels: Labels = ()) -> None:
        """Set a gauge value."""
        key = self._make_key(name, labels)
        with self._lock:
            self.gauges[key] = value

    def histogram(self, name: str, value: float, labels: Labels = ()) -> None:
        """Observe a histogram value."""
        key = self._make_key(name, labels)
        with self._lock:
            self.histograms[key].append(value)

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        """Record timing in seconds."""
        key = self._make_key(name, labels)
        with self._lock:
            self.timings[key].append(value)

    def _make_key(self, name: str, labels: Labels | None) -> str:
        """Create a unique key for a metric with labels."""
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in labels)
        return f"{name}{{{label_str}}}"

    # ── Test helpers ─────────────────────────────────────────────────────

    def get_counter(self, name: str, labels: Labels = ()) -> int:
        """Get counter value for testing."""
        key = self._make_key(name, labels)
        return int(self.counters.get(key, Counter())[name])

    def has_counter(self, name: str, labels: Labels = ()) -> bool:
        """Whether a counter series exists, even with a zero value."""
        return self._make_key(name, labels) in self.counters

    def counter_total(self, name: str) -> int:
        """Sum a counter across all of its label sets."""
        return sum(int(counter[name]) for counter in self.counters.values())

    def get_gauge(self, name: str, labels: Labels = ()) -> float | None:
        """Get gauge value for testing."""
        key = self._make_key(name, labels)
        return self.gauges.get(key)

    def get_histogram_values(self, name: str, labels: Labels = ()) -> list[float]:
        """Get histogram values for testing."""
        key = self._make_key(name, labels)
        return list(self.histograms.get(key, []))

    def get_timing_values(self, name: str, labels: Labels = ()) -> list[float]:
        """Get timing values for testing."""
        key = self._make_key(name, labels)
        return list(self.timings.get(key, []))

    def reset(self) -> None:
        """Clear all metrics."""
        with self._lock:
            self.counters.clear()
            self.gauges.clear()
            self.histograms.clear()
            self.timings.clear()
