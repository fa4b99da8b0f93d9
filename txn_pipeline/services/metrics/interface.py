from __future__ import annotations

import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Mapping

Tags = Mapping[str, str]


class MetricsInterface(ABC):
    """Counters and histograms emitted by the router and the consumer services.

    Tag values must be low-cardinality (labels, group ids), never user names.
    """

    @abstractmethod
    def counter(self, name: str, value: float = 1, tags: Tags | None = None) -> None: ...

    @abstractmethod
    def histogram(self, name: str, value: float, tags: Tags | None = None) -> None: ...

    @contextmanager
    def timed(self, name: str, tags: Tags | None = None) -> Iterator[None]:
        """Observe the wall time of the block, in seconds, into histogram *name*."""
        started = time.monotonic()
        try:
            yield
        finally:
            self.histogram(name, time.monotonic() - started, tags=tags)
