"""Dispatch metrics recorded at submission, invocation, and completion."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager

from intentbot.telemetry.base import Labels, TelemetryPort

REQUESTS_RECEIVED = "requests_received"
REQUESTS_EXECUTED = "requests_executed"
EXECUTION_TIME = "execution_time"
QUEUE_SIZE = "queue_size"


def intent_labels(intent_name: str) -> Labels:
    return (("intent", intent_name),)


class DispatchMetrics:
    """Named dispatch metrics on top of a telemetry backend."""

    def __init__(self, telemetry: TelemetryPort) -> None:
        self._telemetry = telemetry

    @property
    def telemetry(self) -> TelemetryPort:
        return self._telemetry

    def received(self) -> None:
        self._telemetry.incr(REQUESTS_RECEIVED)

    def init_intent(self, intent_name: str) -> None:
        """Create a zero-valued executed series so dashboards see the intent before first use."""
        self._telemetry.incr(REQUESTS_EXECUTED, 0, intent_labels(intent_name))

    def executed(self, intent_name: str) -> None:
        self._telemetry.incr(REQUESTS_EXECUTED, 1, intent_labels(intent_name))

    def queue_size(self, size: int) -> None:
        self._telemetry.gauge(QUEUE_SIZE, float(size))

    @contextmanager
    def time_execution(self, intent_name: str) -> Iterator[None]:
        """Time one intent invocation; the duration is recorded on every exit path."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self._telemetry.timing(EXECUTION_TIME, time.perf_counter() - start, intent_labels(intent_name))
