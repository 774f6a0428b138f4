"""Prometheus metrics backend for intentbot observability.

Provides a Prometheus-compatible metrics endpoint for production monitoring.
Metrics are exposed at /metrics for scraping by Prometheus server.

Usage:
    telemetry = PrometheusTelemetry(PrometheusConfig(port=9464))
    telemetry.start()
    telemetry.incr("requests_executed", labels=(("intent", "SmalltalkIntent"),))
    telemetry.timing("execution_time", 0.25, labels=(("intent", "SmalltalkIntent"),))

    # Metrics available at http://localhost:9464/metrics
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, start_http_server

from intentbot.telemetry.base import Labels

METRIC_PREFIX = "intentbot"


@dataclass
class PrometheusConfig:
    """Configuration for Prometheus telemetry backend."""

    enabled: bool = True
    port: int = 9464
    host: str = "127.0.0.1"  # localhost only by default


class PrometheusTelemetry:
    """Prometheus-backed telemetry with /metrics endpoint.

    This adapter:
    - Registers the standard dispatch metrics
    - Exposes /metrics endpoint on localhost:9464 once started
    - Creates ad-hoc metrics for unknown names on first use

    Binds to localhost only by default. Override with config.host
    if you need external access.
    """

    def __init__(
        self,
        config: PrometheusConfig | None = None,
        *,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self._config = config or PrometheusConfig()
        self._registry = registry if registry is not None else REGISTRY
        self._metrics: dict[str, Counter | Gauge | Histogram] = {}
        self._started = False

        if not self._config.enabled:
            logger.info("Prometheus telemetry disabled")
            return

        self._register_standard_metrics()

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def _register_standard_metrics(self) -> None:
        """Register standard dispatch metrics."""
        self._metrics["requests_received"] = Counter(
            f"{METRIC_PREFIX}_requests_received",
            "Total intelligence requests accepted for processing",
            registry=self._registry,
        )
        self._metrics["requests_executed"] = Counter(
            f"{METRIC_PREFIX}_requests_executed",
            "Total intelligence requests dispatched to an intent",
            labelnames=["intent"],
            registry=self._registry,
        )
        self._metrics["execution_time"] = Histogram(
            f"{METRIC_PREFIX}_execution_time_seconds",
            "Intent execution time in seconds",
            labelnames=["intent"],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=self._registry,
        )
        self._metrics["queue_size"] = Gauge(
            f"{METRIC_PREFIX}_queue_size",
            "Pending requests in the dispatch queue",
            registry=self._registry,
        )

    def start(self) -> None:
        """Start the Prometheus HTTP server."""
        if not self._config.enabled or self._started:
            return

        try:
            start_http_server(
                port=self._config.port,
                addr=self._config.host,
                registry=self._registry,
            )
            self._started = True
            logger.info(
                f"Prometheus metrics server started on "
                f"http://{self._config.host}:{self._config.port}/metrics"
            )
        except OSError as e:
            logger.error(f"Failed to start Prometheus server: {e}")
            self._config.enabled = False

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None:
        """Increase a named counter."""
        if not self._config.enabled:
            return

        metric = self._metrics.get(name)
        if metric is None:
            labelnames = [k for k, _ in labels] if labels else []
            metric = Counter(
                f"{METRIC_PREFIX}_{name}",
                f"Counter: {name}",
                labelnames=labelnames,
                registry=self._registry,
            )
            self._metrics[name] = metric

        if labels:
            metric.labels(**dict(labels)).inc(value)
        else:
            metric.inc(value)

    def gauge(self, name: str, value: float, labels: Labels = ()) -> None:
        """Set a gauge value."""
        if not self._config.enabled:
            return

        metric = self._metrics.get(name)
        if metric is None:
            labelnames = [k for k, _ in labels] if labels else []
            metric = Gauge(
                f"{METRIC_PREFIX}_{name}",
                f"Gauge: {name}",
                labelnames=labelnames,
                registry=self._registry,
            )
            self._metrics[name] = metric

        if labels:
            metric.labels(**dict(labels)).set(value)
        else:
            metric.set(value)

    def histogram(self, name: str, value: float, labels: Labels = ()) -> None:
        """Observe a histogram value."""
        if not self._config.enabled:
            return

        metric = self._metrics.get(name)
        if metric is None:
            labelnames = [k for k, _ in labels] if labels else []
            metric = Histogram(
                f"{METRIC_PREFIX}_{name}",
                f"Histogram: {name}",
                labelnames=labelnames,
                registry=self._registry,
            )
            self._metrics[name] = metric

        if labels:
            metric.labels(**dict(labels)).observe(value)
        else:
            metric.observe(value)

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        """Record timing in seconds (alias for histogram)."""
        self.histogram(name, value, labels)
