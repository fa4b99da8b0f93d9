"""KafkaQueue against a real broker (testcontainers)."""

from __future__ import annotations

import uuid

import pytest

from txn_pipeline.services.message_queue.kafka_queue import KafkaQueue
from txn_pipeline.services.secrets.env_secrets import EnvSecrets

pytestmark = pytest.mark.real_infra


def _queue(bootstrap: str) -> KafkaQueue:
    return KafkaQueue(EnvSecrets(overrides={"MQ_KAFKA_BOOTSTRAP_SERVERS": bootstrap}))


def _poll_until(mq: KafkaQueue, count: int, attempts: int = 30) -> list:
    records: list = []
    for _ in range(attempts):
        records.extend(mq.poll(timeout=1.0))
        if len(records) >= count:
            break
    return records


def test_publish_poll_commit(kafka_bootstrap) -> None:
    topic = f"valid-transactions-{uuid.uuid4().hex[:8]}"
    producer = _queue(kafka_bootstrap)
    producer.publish(topic, {"user": "alice", "amount": "1500.00", "transactionLocation": "NYC"}, key="alice")
    producer.publish(topic, {"user": "carol", "amount": "50.00", "transactionLocation": "SF"}, key="carol")
    producer.close()

    consumer = _queue(kafka_bootstrap)
    consumer.subscribe([topic], "account-manager-service")
    records = _poll_until(consumer, 2)
    assert [r.value["user"] for r in records] == ["alice", "carol"]
    assert records[0].key == "alice"
    consumer.commit()
    consumer.close()


def test_uncommitted_records_are_redelivered(kafka_bootstrap) -> None:
    topic = f"suspicious-transactions-{uuid.uuid4().hex[:8]}"
    producer = _queue(kafka_bootstrap)
    producer.publish(topic, {"user": "bob", "amount": "1500.00", "transactionLocation": "LA"}, key="bob")
    producer.close()

    first = _queue(kafka_bootstrap)
    first.subscribe([topic], "reporting-service")
    assert len(_poll_until(first, 1)) == 1
    first.close()

    second = _queue(kafka_bootstrap)
    second.subscribe([topic], "reporting-service")
    assert [r.value["user"] for r in _poll_until(second, 1)] == ["bob"]
    second.close()
