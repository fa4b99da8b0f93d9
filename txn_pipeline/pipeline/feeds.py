"""Transaction feeds: the ``has_next`` / ``next`` source the router drains."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Iterator

from txn_pipeline.pipeline.transaction import Transaction, TransactionFormatError


class TransactionFeed(ABC):
    @abstractmethod
    def has_next(self) -> bool:
        """False once the feed is exhausted. Exhaustion is final."""
        ...

    @abstractmethod
    def next(self) -> Transaction: ...

    def __iter__(self) -> Iterator[Transaction]:
        while self.has_next():
            yield self.next()


class IterableFeed(TransactionFeed):
    """Adapts any iterable of transactions, reading one item ahead."""

    _EMPTY = object()

    def __init__(self, transactions: Iterable[Transaction]) -> None:
        self._it = iter(transactions)
        self._peeked: object = self._EMPTY
        self._done = False

    def has_next(self) -> bool:
        if self._peeked is not self._EMPTY:
            return True
        if self._done:
            return False
        try:
            self._peeked = next(self._it)
        except StopIteration:
            self._done = True
            return False
        return True

    def next(self) -> Transaction:
        if not self.has_next():
            raise StopIteration("transaction feed is exhausted")
        item, self._peeked = self._peeked, self._EMPTY
        return item  # type: ignore[return-value]


class JsonLinesFeed(IterableFeed):
    """One JSON transaction object per line; blank lines are skipped."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(self._read())

    def _read(self) -> Iterator[Transaction]:
        with self.path.open() as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    yield Transaction.from_dict(json.loads(line))
                except json.JSONDecodeError as exc:
                    raise TransactionFormatError(f"{self.path}:{lineno}: invalid JSON: {exc}") from exc
                except TransactionFormatError as exc:
                    raise TransactionFormatError(f"{self.path}:{lineno}: {exc}") from exc
