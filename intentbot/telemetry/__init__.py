"""Telemetry backends for intentbot observability.

Provides both in-memory (for testing) and Prometheus (for production) backends,
plus the dispatch metrics recorder the dispatcher reports through.
"""

from intentbot.telemetry.base import TelemetryPort
from intentbot.telemetry.inmemory import InMemoryTelemetry
from intentbot.telemetry.prometheus import PrometheusConfig, PrometheusTelemetry
from intentbot.telemetry.recorder import DispatchMetrics

__all__ = [
    "DispatchMetrics",
    "InMemoryTelemetry",
    "PrometheusConfig",
    "PrometheusTelemetry",
    "TelemetryPort",
]
