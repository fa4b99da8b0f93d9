"""Startup configuration shared by the router and the downstream services."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from txn_pipeline.config.context import ModuleConfig
from txn_pipeline.pipeline.classifier import DEFAULT_HIGH_VALUE_THRESHOLD
from txn_pipeline.pipeline.topics import (
    HIGH_VALUE,
    HIGH_VALUE_TRANSACTIONS,
    SUSPICIOUS,
    SUSPICIOUS_TRANSACTIONS,
    VALID,
    VALID_TRANSACTIONS,
)
from txn_pipeline.pipeline.transaction import parse_amount


@dataclass(frozen=True)
class TopicMap:
    """Two-way mapping between classification labels and topic names."""

    valid: str = VALID_TRANSACTIONS
    suspicious: str = SUSPICIOUS_TRANSACTIONS
    high_value: str = HIGH_VALUE_TRANSACTIONS

    def __post_init__(self) -> None:
        names = [self.valid, self.suspicious, self.high_value]
        if any(not n for n in names):
            raise ValueError("topic names must not be empty")
        if len(set(names)) != len(names):
            raise ValueError(f"each label needs its own topic, got {names}")

    @property
    def _by_label(self) -> dict[str, str]:
        return {VALID: self.valid, SUSPICIOUS: self.suspicious, HIGH_VALUE: self.high_value}

    def topic_for(self, label: str) -> str:
        try:
            return self._by_label[label]
        except KeyError:
            raise ValueError(f"unknown label: {label!r}") from None

    def topics_for(self, labels: Iterable[str]) -> list[str]:
        return [self.topic_for(label) for label in labels]

    def label_for(self, topic: str) -> str:
        for label, name in self._by_label.items():
            if name == topic:
                return label
        raise ValueError(f"topic {topic!r} is not mapped to a label")


@dataclass(frozen=True)
class PipelineSettings:
    topics: TopicMap = field(default_factory=TopicMap)
    high_value_threshold: Decimal = DEFAULT_HIGH_VALUE_THRESHOLD

    @classmethod
    def from_config(cls, config: ModuleConfig) -> PipelineSettings:
        topics = TopicMap(
            valid=config.get("valid-topic", VALID_TRANSACTIONS),
            suspicious=config.get("suspicious-topic", SUSPICIOUS_TRANSACTIONS),
            high_value=config.get("high-value-topic", HIGH_VALUE_TRANSACTIONS),
        )
        raw_threshold = config.get("high-value-threshold", DEFAULT_HIGH_VALUE_THRESHOLD)
        try:
            threshold = parse_amount(raw_threshold)
        except ValueError:
            raise ValueError(f"Invalid value for --high-value-threshold: {raw_threshold!r}") from None
        return cls(topics=topics, high_value_threshold=threshold)
