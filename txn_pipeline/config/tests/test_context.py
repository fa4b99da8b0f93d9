from decimal import Decimal

import pytest

from txn_pipeline.config.context import ModuleConfig


def test_typed_getters_accept_cast_and_raw_values():
    config = ModuleConfig({"max-batch": 50, "poll-timeout": "0.25", "high-value-threshold": "250.5"})
    assert config.get_int("max-batch", 500) == 50
    assert config.get_float("poll-timeout", 1.0) == 0.25
    assert config.get_decimal("high-value-threshold", Decimal("1000")) == Decimal("250.5")


def test_typed_getters_fall_back_to_default():
    config = ModuleConfig({})
    assert config.get_int("max-batches", 0) == 0
    assert config.get_decimal("high-value-threshold", Decimal("1000.00")) == Decimal("1000.00")


def test_typed_getter_names_the_argument():
    with pytest.raises(ValueError, match="Invalid value for --max-batch: 'many'"):
        ModuleConfig({"max-batch": "many"}).get_int("max-batch", 500)


def test_require():
    config = ModuleConfig({"transactions-file": "in.jsonl"})
    assert config.require("transactions-file") == "in.jsonl"
    assert "transactions-file" in config
    with pytest.raises(ValueError, match="Missing required argument: --residences-file"):
        config.require("residences-file")
