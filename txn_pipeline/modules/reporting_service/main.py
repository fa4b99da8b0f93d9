"""Reporting service.

Consumes all three classification topics and records each transaction for
the report matching the topic it arrived on:

    valid       -> monthly statements
    suspicious  -> verification tracking
    high-value  -> spending records

A transaction published under two labels is recorded once per label.
"""

from __future__ import annotations

from txn_pipeline.modules.consumer_service import ConsumerServiceModule
from txn_pipeline.pipeline.topics import HIGH_VALUE, SUSPICIOUS, VALID
from txn_pipeline.pipeline.transaction import Transaction

_PURPOSE = {
    VALID: "print to monthly statements",
    SUSPICIOUS: "verification tracking",
    HIGH_VALUE: "spending records",
}


class ReportingServiceModule(ConsumerServiceModule):
    service_name = "reporting_service"
    default_group_id = "reporting-service"
    labels = (VALID, SUSPICIOUS, HIGH_VALUE)

    def handle(self, label: str, transaction: Transaction) -> str | None:
        topic = self.settings.topics.topic_for(label)
        details = f"User: {transaction.user}, Amount: {transaction.amount:.2f}"
        # Statements don't carry the location
        if label != VALID:
            details += f", Location: {transaction.transaction_location}"
        return f"Recording [{topic}] for [{details}] for {_PURPOSE[label]}."


module_class = ReportingServiceModule
