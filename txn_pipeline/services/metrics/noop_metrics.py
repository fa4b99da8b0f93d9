from __future__ import annotations

from txn_pipeline.services.metrics.interface import MetricsInterface, Tags


class NoopMetrics(MetricsInterface):
    """Default for runs without ``--metrics``: every observation is dropped."""

    def _drop(self, name: str, value: float = 1, tags: Tags | None = None) -> None:
        return None

    counter = _drop
    histogram = _drop
