"""The transaction record carried from the feed through every topic.

Wire form is a JSON object::

    {"user": "alice", "amount": "1500.00", "transactionLocation": "NYC",
     "timestamp": "2026-01-15T10:00:00Z"}

``amount`` travels as a decimal string so it round-trips exactly; numeric
amounts are accepted on input. ``timestamp`` is optional and never used by
classification.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any


class TransactionFormatError(ValueError):
    """A feed line or wire message does not describe a transaction."""


def parse_amount(raw: Any) -> Decimal:
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float, Decimal)):
        raise TransactionFormatError(f"amount must be a number, got {raw!r}")
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation:
        raise TransactionFormatError(f"amount must be a number, got {raw!r}") from None
    if not amount.is_finite():
        raise TransactionFormatError(f"amount must be finite, got {raw!r}")
    return amount


def _require_str(data: dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str):
        raise TransactionFormatError(f"'{field}' must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class Transaction:
    user: str
    amount: Decimal
    transaction_location: str
    timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        msg: dict[str, Any] = {
            "user": self.user,
            "amount": str(self.amount),
            "transactionLocation": self.transaction_location,
        }
        if self.timestamp is not None:
            msg["timestamp"] = self.timestamp
        return msg

    @classmethod
    def from_dict(cls, data: Any) -> Transaction:
        if not isinstance(data, dict):
            raise TransactionFormatError(f"transaction must be an object, got {type(data).__name__}")
        if "amount" not in data:
            raise TransactionFormatError("'amount' is missing")
        timestamp = data.get("timestamp")
        return cls(
            user=_require_str(data, "user"),
            amount=parse_amount(data["amount"]),
            transaction_location=_require_str(data, "transactionLocation"),
            timestamp=None if timestamp is None else str(timestamp),
        )

    def dedup_key(self, label: str) -> str:
        """Identity of one delivery of this transaction on one label's topic."""
        return f"{self.user}:{self.amount}:{self.timestamp or ''}:{label}"
