"""Kafka-backed message queue implementation using confluent-kafka.

Publishing is synchronous: every ``publish`` produces one message and flushes
until the broker acknowledges it, so at most one message is ever in flight.
Consuming uses manual offset management (``enable.auto.commit`` off); offsets
only move when ``commit`` is called after a batch has been handled.
"""

from __future__ import annotations

import json
from typing import Any

from txn_pipeline.services.message_queue.interface import (
    MessageQueueError,
    MessageQueueInterface,
    QueueRecord,
)
from txn_pipeline.services.secrets.interface import SecretsInterface

DEFAULT_BOOTSTRAP_SERVERS = "localhost:9092,localhost:9093,localhost:9094"


class KafkaQueue(MessageQueueInterface):
    def __init__(self, secrets: SecretsInterface) -> None:
        self._bootstrap = secrets.get_or_default(
            "MQ_KAFKA_BOOTSTRAP_SERVERS", DEFAULT_BOOTSTRAP_SERVERS
        )
        self._client_id = secrets.get_or_default("MQ_KAFKA_CLIENT_ID", "banking-api")
        self._offset_reset = secrets.get_or_default(
            "MQ_KAFKA_AUTO_OFFSET_RESET", "earliest"
        )
        self._publish_timeout = secrets.get_float("MQ_KAFKA_PUBLISH_TIMEOUT", 10.0)
        self._producer: Any = None
        self._consumer: Any = None
        self._group_id: str | None = None

    def _connect_producer(self) -> None:
        from confluent_kafka import Producer

        self._producer = Producer({
            "bootstrap.servers": self._bootstrap,
            "client.id": self._client_id,
            "acks": "all",
        })

    def publish(self, topic: str, message: Any, key: str | None = None) -> None:
        from confluent_kafka import KafkaException

        if self._producer is None:
            self._connect_producer()
        payload = json.dumps(message).encode("utf-8")
        key_bytes = key.encode("utf-8") if key else None

        reports: list[Any] = []
        try:
            self._producer.produce(
                topic,
                value=payload,
                key=key_bytes,
                on_delivery=lambda err, msg: reports.append(err),
            )
        except (BufferError, KafkaException) as exc:
            raise MessageQueueError(f"publish to {topic} failed: {exc}") from exc

        self._producer.flush(self._publish_timeout)
        if not reports:
            raise MessageQueueError(
                f"publish to {topic} not acknowledged within {self._publish_timeout}s"
            )
        if reports[0] is not None:
            raise MessageQueueError(f"publish to {topic} failed: {reports[0]}")

    def flush(self, timeout: float = 10.0) -> None:
        if self._producer is None:
            return
        remaining = self._producer.flush(timeout)
        if remaining:
            raise MessageQueueError(f"{remaining} message(s) still undelivered after flush")

    def subscribe(self, topics: list[str], group_id: str) -> None:
        from confluent_kafka import Consumer

        if self._consumer is not None:
            self._consumer.close()
        self._group_id = group_id
        self._consumer = Consumer({
            "bootstrap.servers": self._bootstrap,
            "group.id": group_id,
            "auto.offset.reset": self._offset_reset,
            "enable.auto.commit": False,
        })
        self._consumer.subscribe(list(topics))

    def poll(self, timeout: float, max_records: int = 500) -> list[QueueRecord]:
        from confluent_kafka import KafkaError, KafkaException

        if self._consumer is None:
            raise MessageQueueError("poll before subscribe")
        try:
            messages = self._consumer.consume(num_messages=max_records, timeout=timeout)
        except KafkaException as exc:
            raise MessageQueueError(f"poll failed: {exc}") from exc

        records: list[QueueRecord] = []
        for msg in messages:
            err = msg.error()
            if err is not None:
                if err.code() == KafkaError._PARTITION_EOF:
                    continue
                raise MessageQueueError(f"poll failed: {err}")
            records.append(self._to_record(msg))
        return records

    @staticmethod
    def _to_record(msg: Any) -> QueueRecord:
        raw_key = msg.key()
        try:
            value = json.loads(msg.value().decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise MessageQueueError(
                f"undecodable message at {msg.topic()}[{msg.partition()}]@{msg.offset()}: {exc}"
            ) from exc
        return QueueRecord(
            topic=msg.topic(),
            partition=msg.partition(),
            offset=msg.offset(),
            key=raw_key.decode("utf-8") if raw_key is not None else None,
            value=value,
        )

    def commit(self) -> None:
        from confluent_kafka import KafkaError, KafkaException

        if self._consumer is None:
            raise MessageQueueError("commit before subscribe")
        try:
            self._consumer.commit(asynchronous=True)
        except KafkaException as exc:
            # Nothing consumed since the last commit
            err = exc.args[0] if exc.args else None
            if isinstance(err, KafkaError) and err.code() == KafkaError._NO_OFFSET:
                return
            raise MessageQueueError(f"commit failed for group {self._group_id}: {exc}") from exc

    def close(self) -> None:
        if self._producer is not None:
            self._producer.flush(self._publish_timeout)
            self._producer = None
        if self._consumer is not None:
            self._consumer.close()
            self._consumer = None

    def health_check(self) -> bool:
        client = self._producer or self._consumer
        if client is None:
            return False
        try:
            return client.list_topics(timeout=5) is not None
        except Exception:
            return False
