"""High Value service.

Consumes ``high-value-transactions`` and writes an audit line with the bank
threshold and how far the amount exceeds it.
"""

from __future__ import annotations

from txn_pipeline.modules.consumer_service import ConsumerServiceModule
from txn_pipeline.pipeline.topics import HIGH_VALUE
from txn_pipeline.pipeline.transaction import Transaction


class HighValueServiceModule(ConsumerServiceModule):
    service_name = "high_value_service"
    default_group_id = "high-value-service"
    labels = (HIGH_VALUE,)

    def handle(self, label: str, transaction: Transaction) -> str | None:
        overage = transaction.amount - self.threshold
        return (
            f"Recording [{self.settings.topics.topic_for(label)}] for "
            f"[User: {transaction.user}, Amount: {transaction.amount:.2f}, "
            f"Location: {transaction.transaction_location}] "
            f"Bank Threshold: [{self.threshold:.2f}], Threshold Difference: [{overage:.2f}]"
        )


module_class = HighValueServiceModule
