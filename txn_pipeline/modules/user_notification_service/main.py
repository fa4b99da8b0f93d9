"""User Notification service.

Consumes ``suspicious-transactions`` and ``high-value-transactions``.

* suspicious and above the high-value threshold: the account is frozen and
  the user is told which two labels triggered it.
* suspicious only: the user is asked to verify the transaction.
* arriving on the high-value topic: no notification. The suspicious copy of
  the same transaction (if any) carries the notice, and purely high-value
  transactions are audited by the high-value service instead.
"""

from __future__ import annotations

from txn_pipeline.modules.consumer_service import ConsumerServiceModule
from txn_pipeline.pipeline.classifier import is_high_value
from txn_pipeline.pipeline.topics import HIGH_VALUE, SUSPICIOUS
from txn_pipeline.pipeline.transaction import Transaction


class UserNotificationServiceModule(ConsumerServiceModule):
    service_name = "user_notification_service"
    default_group_id = "user-notification-service"
    labels = (SUSPICIOUS, HIGH_VALUE)

    def handle(self, label: str, transaction: Transaction) -> str | None:
        if label != SUSPICIOUS:
            return None

        details = (
            f"[User: {transaction.user}, Amount: {transaction.amount:.2f}, "
            f"Location: {transaction.transaction_location}]"
        )
        if is_high_value(transaction.amount, self.threshold):
            return (
                f"Account frozen: {details} is both {SUSPICIOUS} and {HIGH_VALUE} "
                f"(over {self.threshold:.2f}). Contact the bank to verify and unfreeze."
            )
        return (
            f"Verification requested: {details} does not match the residence on file. "
            f"Please confirm this transaction."
        )


module_class = UserNotificationServiceModule
