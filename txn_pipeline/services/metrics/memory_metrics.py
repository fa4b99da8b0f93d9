from __future__ import annotations

from collections import defaultdict

from txn_pipeline.services.metrics.interface import MetricsInterface, Tags

_Series = tuple[str, tuple[tuple[str, str], ...]]


def _series(name: str, tags: Tags | None) -> _Series:
    return name, tuple(sorted((tags or {}).items()))


class MemoryMetrics(MetricsInterface):
    """Keeps every observation in memory for test assertions.

    ``counters`` and ``histograms`` are summed across tag sets;
    ``counter_value`` reads one exact tag set.
    """

    def __init__(self) -> None:
        self.counters: dict[str, float] = defaultdict(float)
        self.histograms: dict[str, list[float]] = defaultdict(list)
        self._series: dict[_Series, float] = defaultdict(float)

    def counter(self, name: str, value: float = 1, tags: Tags | None = None) -> None:
        self.counters[name] += value
        self._series[_series(name, tags)] += value

    def histogram(self, name: str, value: float, tags: Tags | None = None) -> None:
        self.histograms[name].append(value)

    def counter_value(self, name: str, **tags: str) -> float:
        return self._series.get(_series(name, tags), 0)
