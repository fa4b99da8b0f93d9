"""Account Manager service.

Consumes ``valid-transactions`` and confirms each one as authorised: a
location match with the customer's residence is the only pre-authorisation
rule.
"""

from __future__ import annotations

from txn_pipeline.modules.consumer_service import ConsumerServiceModule
from txn_pipeline.pipeline.topics import VALID
from txn_pipeline.pipeline.transaction import Transaction


class AccountManagerModule(ConsumerServiceModule):
    service_name = "account_manager"
    default_group_id = "account-manager-service"
    labels = (VALID,)

    def handle(self, label: str, transaction: Transaction) -> str | None:
        return (
            f"Authorising Transaction For: [User: {transaction.user}, "
            f"Amount: {transaction.amount:.2f}, Location: {transaction.transaction_location}]"
        )


module_class = AccountManagerModule
