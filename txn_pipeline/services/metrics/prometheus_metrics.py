"""Prometheus exporter for router and consumer-service metrics."""

from __future__ import annotations

from typing import Any

from txn_pipeline.services.metrics.interface import MetricsInterface, Tags
from txn_pipeline.services.secrets.interface import SecretsInterface


class PrometheusMetrics(MetricsInterface):
    """Serves ``/metrics`` over HTTP through prometheus_client.

    Config (via secrets):
        METRICS_PROMETHEUS_PORT - exporter port (default: 9091). 0 or empty
                                  registers the collectors without serving them.

    Dashes and dots in names become underscores. Each name keeps the tag keys
    it was first observed with.
    """

    def __init__(self, secrets: SecretsInterface) -> None:
        import prometheus_client

        self._client = prometheus_client
        self._collectors: dict[str, Any] = {}

        port = secrets.get_int("METRICS_PROMETHEUS_PORT", 9091)
        if port:
            prometheus_client.start_http_server(port)

    def _series(self, factory: Any, name: str, tags: Tags | None) -> Any:
        metric_name = name.replace("-", "_").replace(".", "_")
        keys = sorted(tags or {})
        collector = self._collectors.get(metric_name)
        if collector is None:
            collector = self._collectors[metric_name] = factory(metric_name, metric_name, keys)
        return collector.labels(*(tags[k] for k in keys)) if keys else collector

    def counter(self, name: str, value: float = 1, tags: Tags | None = None) -> None:
        self._series(self._client.Counter, name, tags).inc(value)

    def histogram(self, name: str, value: float, tags: Tags | None = None) -> None:
        self._series(self._client.Histogram, name, tags).observe(value)
