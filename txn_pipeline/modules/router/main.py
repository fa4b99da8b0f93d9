"""Transaction Router module.

Drains the incoming transaction feed, classifies every transaction against
the customer's residence and the high-value threshold, and publishes one copy
per matched label:

    valid        -> valid-transactions
    suspicious   -> suspicious-transactions
    high-value   -> high-value-transactions

Each publish waits for the broker acknowledgement before the next one starts.
A broker failure aborts the run (exit code 1) without retrying; whatever was
already buffered is flushed before the producer is closed.
"""

from __future__ import annotations

from pathlib import Path

from txn_pipeline.config.context import ModuleConfig
from txn_pipeline.modules.base import Module
from txn_pipeline.pipeline.classifier import ClassificationResult, classify
from txn_pipeline.pipeline.feeds import JsonLinesFeed, TransactionFeed
from txn_pipeline.pipeline.residence import (
    UNKNOWN_RESIDENCE,
    ResidenceLookup,
    StaticResidenceDirectory,
)
from txn_pipeline.pipeline.settings import PipelineSettings
from txn_pipeline.pipeline.topics import LABELS
from txn_pipeline.pipeline.transaction import Transaction, TransactionFormatError
from txn_pipeline.services.logger.factory import LoggerFactory
from txn_pipeline.services.logger.interface import LoggingInterface
from txn_pipeline.services.message_queue.interface import (
    MessageQueueError,
    MessageQueueInterface,
)
from txn_pipeline.services.metrics.interface import MetricsInterface


class RouterModule(Module):
    log: LoggingInterface
    settings: PipelineSettings
    feed: TransactionFeed
    residences: ResidenceLookup

    def __init__(
        self,
        config: ModuleConfig,
        logger: LoggerFactory,
        mq: MessageQueueInterface,
        metrics: MetricsInterface,
    ) -> None:
        self.config = config
        self.logger = logger
        self.mq = mq
        self.metrics = metrics
        self.routed = 0

    async def initialize(self) -> None:
        self.log = self.logger.create()
        self.settings = PipelineSettings.from_config(self.config)
        self.transactions_file = Path(self.config.require("transactions-file"))
        self.feed = JsonLinesFeed(self.transactions_file)
        self.residences = StaticResidenceDirectory.from_json_file(
            self.config.require("residences-file"),
            unknown=self.config.get("unknown-residence", UNKNOWN_RESIDENCE),
        )
        self.log.info(
            "Router initialized",
            module="router",
            threshold=str(self.settings.high_value_threshold),
            topics=self.settings.topics.topics_for(LABELS),
        )

    async def validate(self) -> None:
        if not self.transactions_file.is_file():
            raise FileNotFoundError(f"transactions file not found: {self.transactions_file}")

    async def execute(self) -> int:
        try:
            self.route_all(self.feed)
        except (MessageQueueError, TransactionFormatError) as exc:
            self.log.error("Routing aborted", module="router", routed=self.routed, error=str(exc))
            return 1
        self.log.info("Transaction feed exhausted", module="router", routed=self.routed)
        return 0

    async def teardown(self) -> None:
        try:
            self.mq.flush()
        except MessageQueueError as exc:
            self.log.warn("Flush on shutdown failed", module="router", error=str(exc))
        finally:
            self.mq.close()

    def route_all(self, feed: TransactionFeed) -> int:
        """Route until *feed* is exhausted. Returns how many transactions were routed."""
        while feed.has_next():
            self.route(feed.next())
        return self.routed

    def route(self, transaction: Transaction) -> ClassificationResult:
        result = classify(transaction, self.residences, self.settings.high_value_threshold)
        message = transaction.to_dict()
        for label in result:
            self.mq.publish(self.settings.topics.topic_for(label), message, key=transaction.user)
            self.metrics.counter("transactions_published_total", tags={"label": label})

        self.routed += 1
        self.metrics.counter("transactions_routed_total")
        self.log.info(
            f"[User: {transaction.user}, Amount: {transaction.amount:.2f}, "
            f"Loc: {transaction.transaction_location}, Home: {result.residence}] "
            f"{', '.join(label.upper() for label in result)}",
            labels=list(result.labels),
        )
        return result


module_class = RouterModule
