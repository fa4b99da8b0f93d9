"""Subscribe / poll / handle / commit engine shared by every downstream service.

Each iteration polls one batch, hands every record to the service handler in
arrival order, and only then commits offsets. A process that dies between a
handler call and the commit gets the same records again on restart, so
delivery is at-least-once and handlers must tolerate repeats.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable, Iterable

from txn_pipeline.pipeline.settings import TopicMap
from txn_pipeline.pipeline.transaction import Transaction
from txn_pipeline.services.lifecycle.lifecycle_manager import LifecycleManager
from txn_pipeline.services.logger.interface import LoggingInterface
from txn_pipeline.services.message_queue.interface import MessageQueueInterface, QueueRecord
from txn_pipeline.services.metrics.interface import MetricsInterface

# (originating label, transaction) -> notice text, or None for no notice
RecordHandler = Callable[[str, Transaction], "str | None"]

DEFAULT_POLL_TIMEOUT = 1.0
DEFAULT_MAX_RECORDS = 500


class LoopState(str, Enum):
    UNSUBSCRIBED = "unsubscribed"
    SUBSCRIBED = "subscribed"
    POLLING = "polling"
    PROCESSING = "processing"
    COMMITTING = "committing"


class ConsumptionLoop:
    def __init__(
        self,
        mq: MessageQueueInterface,
        group_id: str,
        labels: Iterable[str],
        handler: RecordHandler,
        log: LoggingInterface,
        metrics: MetricsInterface,
        topics: TopicMap | None = None,
        poll_timeout: float = DEFAULT_POLL_TIMEOUT,
        max_records: int = DEFAULT_MAX_RECORDS,
    ) -> None:
        self.labels = tuple(labels)
        if not self.labels:
            raise ValueError("a consumption loop needs at least one label")
        if poll_timeout <= 0:
            raise ValueError(f"poll timeout must be positive, got {poll_timeout}")
        if max_records < 1:
            raise ValueError(f"max records must be at least 1, got {max_records}")

        self.mq = mq
        self.group_id = group_id
        self.handler = handler
        self.log = log
        self.metrics = metrics
        self.topics = topics or TopicMap()
        self.poll_timeout = poll_timeout
        self.max_records = max_records
        self.state = LoopState.UNSUBSCRIBED
        self.batches = 0
        self.records = 0
        self._tags = {"group_id": group_id}

    def start(self) -> None:
        topics = self.topics.topics_for(self.labels)
        self.mq.subscribe(topics, self.group_id)
        self.state = LoopState.SUBSCRIBED
        self.log.info("Subscribed", group_id=self.group_id, topics=topics)

    def run_once(self) -> int:
        """Poll, handle and commit one batch. Returns the number of records handled."""
        if self.state is LoopState.UNSUBSCRIBED:
            raise RuntimeError("start() must be called before polling")

        self.state = LoopState.POLLING
        batch = self.mq.poll(self.poll_timeout, self.max_records)

        if batch:
            self.state = LoopState.PROCESSING
            with self.metrics.timed("batch_processing_seconds", tags=self._tags):
                for record in batch:
                    self._dispatch(record)

        self.state = LoopState.COMMITTING
        self.mq.commit()

        self.batches += 1
        self.records += len(batch)
        self.metrics.histogram("poll_batch_size", float(len(batch)), tags=self._tags)
        self.metrics.counter("batches_committed_total", tags=self._tags)
        self.state = LoopState.POLLING
        return len(batch)

    def _dispatch(self, record: QueueRecord) -> None:
        label = self.topics.label_for(record.topic)
        transaction = Transaction.from_dict(record.value)
        notice = self.handler(label, transaction)

        self.metrics.counter("records_consumed_total", tags={**self._tags, "label": label})
        if notice is None:
            self.log.debug("No notice", label=label, user=transaction.user, offset=record.offset)
            return
        self.metrics.counter("notices_emitted_total", tags={**self._tags, "label": label})
        self.log.info(notice, label=label, dedup_key=transaction.dedup_key(label))

    async def run(self, lifecycle: LifecycleManager, max_batches: int | None = None) -> int:
        """Loop until shutdown is requested (or *max_batches* batches are committed).

        Shutdown is only observed between batches, so the batch in hand is
        always handled and committed. Returns the number of batches committed.
        """
        if self.state is LoopState.UNSUBSCRIBED:
            self.start()
        done = 0
        while True:
            self.run_once()
            done += 1
            if lifecycle.is_shutting_down:
                break
            if max_batches is not None and done >= max_batches:
                break
            await asyncio.sleep(0)
        self.log.info(
            "Consumption loop stopped", group_id=self.group_id,
            reason=lifecycle.stop_reason or "batch limit reached",
            batches=self.batches, records=self.records,
        )
        return done
