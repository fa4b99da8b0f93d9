"""Bank-policy classification of a transaction into topic labels.

Two independent predicates:

* ``amount > threshold``                      -> ``high-value``
* ``transaction_location == residence(user)`` -> ``valid``, else ``suspicious``

The threshold comparison is strict, so an amount equal to the threshold is
not high-value. An unknown user's residence never equals a location, so such
transactions are always suspicious.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator

from txn_pipeline.pipeline.residence import ResidenceLookup
from txn_pipeline.pipeline.topics import HIGH_VALUE, SUSPICIOUS, VALID
from txn_pipeline.pipeline.transaction import Transaction

DEFAULT_HIGH_VALUE_THRESHOLD = Decimal("1000.00")


@dataclass(frozen=True)
class ClassificationResult:
    labels: tuple[str, ...]
    residence: str | None

    def __contains__(self, label: object) -> bool:
        return label in self.labels

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)


def is_high_value(amount: Decimal, threshold: Decimal = DEFAULT_HIGH_VALUE_THRESHOLD) -> bool:
    return amount > threshold


def classify(
    transaction: Transaction,
    residences: ResidenceLookup,
    threshold: Decimal = DEFAULT_HIGH_VALUE_THRESHOLD,
) -> ClassificationResult:
    labels: list[str] = []
    if is_high_value(transaction.amount, threshold):
        labels.append(HIGH_VALUE)

    residence = residences.residence(transaction.user)
    if residences.is_known(residence) and transaction.transaction_location == residence:
        labels.append(VALID)
    else:
        labels.append(SUSPICIOUS)

    return ClassificationResult(labels=tuple(labels), residence=residence)
