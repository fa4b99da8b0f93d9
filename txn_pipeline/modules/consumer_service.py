"""Shared shell for the downstream services.

A service module only declares its name, default consumer group and label
set, and implements ``handle``. Everything else (settings, subscription, the
poll/handle/commit loop, broker failure handling) lives here.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal

from txn_pipeline.config.context import ModuleConfig
from txn_pipeline.modules.base import Module
from txn_pipeline.pipeline.consumer_loop import (
    DEFAULT_MAX_RECORDS,
    DEFAULT_POLL_TIMEOUT,
    ConsumptionLoop,
)
from txn_pipeline.pipeline.settings import PipelineSettings
from txn_pipeline.pipeline.transaction import Transaction, TransactionFormatError
from txn_pipeline.services.lifecycle.lifecycle_manager import LifecycleManager
from txn_pipeline.services.logger.factory import LoggerFactory
from txn_pipeline.services.logger.interface import LoggingInterface
from txn_pipeline.services.message_queue.interface import (
    MessageQueueError,
    MessageQueueInterface,
)
from txn_pipeline.services.metrics.interface import MetricsInterface


class ConsumerServiceModule(Module):
    service_name: str
    default_group_id: str
    labels: tuple[str, ...]

    log: LoggingInterface
    settings: PipelineSettings
    loop: ConsumptionLoop

    def __init__(
        self,
        config: ModuleConfig,
        logger: LoggerFactory,
        mq: MessageQueueInterface,
        lifecycle: LifecycleManager,
        metrics: MetricsInterface,
    ) -> None:
        self.config = config
        self.logger = logger
        self.mq = mq
        self.lifecycle = lifecycle
        self.metrics = metrics

    async def initialize(self) -> None:
        self.log = self.logger.create()
        self.settings = PipelineSettings.from_config(self.config)
        self.group_id: str = self.config.get("group-id") or self.default_group_id
        max_batches = self.config.get_int("max-batches", 0)
        self.max_batches: int | None = max_batches if max_batches > 0 else None
        self.loop = ConsumptionLoop(
            mq=self.mq,
            group_id=self.group_id,
            labels=self.labels,
            handler=self.handle,
            log=self.log,
            metrics=self.metrics,
            topics=self.settings.topics,
            poll_timeout=self.config.get_float("poll-timeout", DEFAULT_POLL_TIMEOUT),
            max_records=self.config.get_int("max-batch", DEFAULT_MAX_RECORDS),
        )
        self.log.info(
            f"Consumer is part of consumer group {self.group_id}",
            module=self.service_name,
            labels=list(self.labels),
        )
        self.lifecycle.on_shutdown(self._report_stop)

    async def execute(self) -> int:
        try:
            await self.loop.run(self.lifecycle, max_batches=self.max_batches)
        except (MessageQueueError, TransactionFormatError) as exc:
            self.log.error(
                "Consumption stopped", module=self.service_name,
                group_id=self.group_id, error=str(exc),
            )
            return 1
        return 0

    async def teardown(self) -> None:
        self.mq.close()

    def _report_stop(self) -> None:
        self.log.info(
            "Service stopped", module=self.service_name, group_id=self.group_id,
            reason=self.lifecycle.stop_reason, batches=self.loop.batches,
            records=self.loop.records,
        )

    @property
    def threshold(self) -> Decimal:
        return self.settings.high_value_threshold

    @abstractmethod
    def handle(self, label: str, transaction: Transaction) -> str | None:
        """Build the notice for one record, or None when nothing is emitted."""
        ...
