from __future__ import annotations

import itertools
import json
from typing import Any

from txn_pipeline.services.message_queue.interface import (
    MessageQueueError,
    MessageQueueInterface,
    QueueRecord,
)


class MemoryBroker:
    """In-memory topic logs and committed offsets, shareable between queues.

    Every topic has a single partition (0). Committed offsets are tracked per
    (group_id, topic) and survive the queues that wrote them, which lets tests
    restart a consumer group against the same broker.
    """

    def __init__(self) -> None:
        self._logs: dict[str, list[tuple[int, QueueRecord]]] = {}
        self._committed: dict[tuple[str, str], int] = {}
        self._seq = itertools.count()

    def append(self, topic: str, key: str | None, value: Any) -> QueueRecord:
        log = self._logs.setdefault(topic, [])
        record = QueueRecord(topic=topic, partition=0, offset=len(log), key=key, value=value)
        log.append((next(self._seq), record))
        return record

    def read(self, topic: str, start: int) -> list[tuple[int, QueueRecord]]:
        return self._logs.get(topic, [])[start:]

    def records(self, topic: str) -> list[QueueRecord]:
        """Everything ever published to *topic*, in offset order."""
        return [record for _, record in self._logs.get(topic, [])]

    def committed(self, group_id: str, topic: str) -> int:
        return self._committed.get((group_id, topic), 0)

    def commit(self, group_id: str, topic: str, offset: int) -> None:
        self._committed[(group_id, topic)] = offset


class MemoryQueue(MessageQueueInterface):
    """In-memory message queue for unit testing.

    Messages are JSON round-tripped on publish so consumers always see an
    independent decoded copy, as they would from a real broker.
    """

    def __init__(self) -> None:
        self.broker = MemoryBroker()
        self._group_id: str | None = None
        self._positions: dict[str, int] = {}
        self._closed = False

    @classmethod
    def on_broker(cls, broker: MemoryBroker) -> MemoryQueue:
        """Build a queue that shares *broker* with other queues."""
        mq = cls()
        mq.broker = broker
        return mq

    def publish(self, topic: str, message: Any, key: str | None = None) -> None:
        if self._closed:
            raise MessageQueueError("publish on a closed queue")
        try:
            value = json.loads(json.dumps(message))
        except (TypeError, ValueError) as exc:
            raise MessageQueueError(f"cannot encode message for {topic}: {exc}") from exc
        self.broker.append(topic, key, value)

    def flush(self, timeout: float = 10.0) -> None:
        pass

    def subscribe(self, topics: list[str], group_id: str) -> None:
        self._group_id = group_id
        self._positions = {t: self.broker.committed(group_id, t) for t in topics}

    def poll(self, timeout: float, max_records: int = 500) -> list[QueueRecord]:
        if self._closed:
            raise MessageQueueError("poll on a closed queue")
        if self._group_id is None:
            raise MessageQueueError("poll before subscribe")

        pending: list[tuple[int, QueueRecord]] = []
        for topic, position in self._positions.items():
            pending.extend(self.broker.read(topic, position))
        pending.sort(key=lambda item: item[0])

        batch = [record for _, record in pending[:max_records]]
        for record in batch:
            self._positions[record.topic] = record.offset + 1
        return batch

    def commit(self) -> None:
        if self._group_id is None:
            raise MessageQueueError("commit before subscribe")
        for topic, position in self._positions.items():
            self.broker.commit(self._group_id, topic, position)

    def close(self) -> None:
        self._closed = True

    def health_check(self) -> bool:
        return not self._closed
