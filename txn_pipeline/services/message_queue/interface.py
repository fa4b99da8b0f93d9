from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


class MessageQueueError(RuntimeError):
    """A broker publish, poll, or commit failed. Fatal to the current run."""


@dataclass(frozen=True)
class QueueRecord:
    """One record returned by a poll, with its position in the topic log."""

    topic: str
    partition: int
    offset: int
    key: str | None
    value: Any


class MessageQueueInterface(ABC):
    """Topic publish plus consumer-group poll/commit over a broker.

    A single instance is owned by one process: the router only publishes,
    a downstream service only subscribes, polls and commits.
    """

    @abstractmethod
    def publish(self, topic: str, message: Any, key: str | None = None) -> None:
        """Publish and block until the broker acknowledges the message."""
        ...

    @abstractmethod
    def flush(self, timeout: float = 10.0) -> None:
        """Wait for any buffered publishes to be delivered."""
        ...

    @abstractmethod
    def subscribe(self, topics: list[str], group_id: str) -> None:
        """Join *group_id* and subscribe to *topics*, resuming from committed offsets."""
        ...

    @abstractmethod
    def poll(self, timeout: float, max_records: int = 500) -> list[QueueRecord]:
        """Return the next batch of records, waiting at most *timeout* seconds."""
        ...

    @abstractmethod
    def commit(self) -> None:
        """Commit the offsets of everything returned by poll so far (non-blocking)."""
        ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def health_check(self) -> bool: ...
