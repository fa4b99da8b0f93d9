"""Root-level pytest fixtures: testcontainer-backed Kafka for real_infra tests."""

from __future__ import annotations

import pytest


@pytest.fixture(scope="session")
def kafka_container():
    """Single Kafka broker for the test session."""
    from testcontainers.kafka import KafkaContainer

    with KafkaContainer("confluentinc/cp-kafka:7.6.0") as kafka:
        yield kafka


@pytest.fixture
def kafka_bootstrap(kafka_container) -> str:
    return kafka_container.get_bootstrap_server()
