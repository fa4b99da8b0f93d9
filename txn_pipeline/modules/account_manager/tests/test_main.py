"""Tests for the Account Manager service."""

from __future__ import annotations

import pytest

from txn_pipeline.config.context import ModuleConfig
from txn_pipeline.modules.account_manager.main import AccountManagerModule
from txn_pipeline.pipeline.topics import SUSPICIOUS_TRANSACTIONS, VALID_TRANSACTIONS
from txn_pipeline.services.lifecycle.lifecycle_manager import LifecycleManager
from txn_pipeline.services.logger.factory import LoggerFactory
from txn_pipeline.services.message_queue.memory_queue import MemoryQueue
from txn_pipeline.services.metrics.memory_metrics import MemoryMetrics


def _make_module(args: dict | None = None) -> AccountManagerModule:
    return AccountManagerModule(
        config=ModuleConfig({"max-batches": 1, **(args or {})}),
        logger=LoggerFactory(default_impl="memory"),
        mq=MemoryQueue(),
        lifecycle=LifecycleManager(),
        metrics=MemoryMetrics(),
    )


@pytest.mark.asyncio
async def test_authorises_valid_transactions() -> None:
    module = _make_module()
    module.mq.publish(VALID_TRANSACTIONS, {"user": "alice", "amount": "1500", "transactionLocation": "NYC"})
    module.mq.publish(VALID_TRANSACTIONS, {"user": "carol", "amount": "50.00", "transactionLocation": "SF"})

    assert await module.run() == 0
    assert module.log.messages[-3:-1] == [
        "Authorising Transaction For: [User: alice, Amount: 1500.00, Location: NYC]",
        "Authorising Transaction For: [User: carol, Amount: 50.00, Location: SF]",
    ]


@pytest.mark.asyncio
async def test_ignores_other_topics() -> None:
    module = _make_module()
    module.mq.publish(SUSPICIOUS_TRANSACTIONS, {"user": "bob", "amount": "5", "transactionLocation": "LA"})
    await module.run()
    assert not any(m.startswith("Authorising") for m in module.log.messages)


@pytest.mark.asyncio
async def test_reports_consumer_group() -> None:
    module = _make_module()
    await module.run()
    assert "Consumer is part of consumer group account-manager-service" in module.log.messages


@pytest.mark.asyncio
async def test_group_id_override_commits_under_that_group() -> None:
    module = _make_module({"group-id": "am-2"})
    module.mq.publish(VALID_TRANSACTIONS, {"user": "carol", "amount": "50", "transactionLocation": "SF"})
    await module.run()
    assert module.mq.broker.committed("am-2", VALID_TRANSACTIONS) == 1
    assert module.mq.broker.committed("account-manager-service", VALID_TRANSACTIONS) == 0


@pytest.mark.asyncio
async def test_malformed_record_stops_service() -> None:
    module = _make_module()
    module.mq.publish(VALID_TRANSACTIONS, {"user": "alice", "amount": "lots", "transactionLocation": "NYC"})
    assert await module.run() == 1
    assert "Consumption stopped" in module.log.messages
    assert module.mq.broker.committed("account-manager-service", VALID_TRANSACTIONS) == 0
    assert not module.mq.health_check()
