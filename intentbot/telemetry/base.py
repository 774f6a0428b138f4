"""Base telemetry port protocol."""

from __future__ import annotations

from typing import Protocol, TypeAlias, runtime_checkable

Labels: TypeAlias = tuple[tuple[str, str], ...]


@runtime_checkable
class TelemetryPort(Protocol):
    """Protocol for telemetry backends (Prometheus, in-memory, etc.).

    The telemetry port provides a simple interface for recording metrics:
    - Counters: Monotonically increasing values (requests received/executed)
    - Gauges: Point-in-time values (queue size)
    - Histograms: Distribution of values (intent execution time)
    - Timing: Duration measurements
    """

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None:
        """Increase a named counter by ``value`` with optional labels.

        A ``value`` of 0 must still create the labelled series so it is
        exported before first use.

        Args:
            name: Metric name (e.g., "requests_executed")
            value: Amount to increment (default 1)
            labels: Optional label tuples (e.g., (("intent", "SmalltalkIntent"),))
        """

    def gauge(self, name: str, value: float, labels: Labels = ()) -> None:
        """Set a gauge value.

        Args:
            name: Metric name (e.g., "queue_size")
            value: Current value
            labels: Optional label tuples
        """

    def histogram(self, name: str, value: float, labels: Labels = ()) -> None:
        """Observe a histogram value.

        Args:
            name: Metric name
            value: Observed value
            labels: Optional label tuples
        """

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        """Record timing of an operation in seconds.

        Args:
            name: Metric name (e.g., "execution_time")
            value: Duration in seconds
            labels: Optional label tuples
        """
