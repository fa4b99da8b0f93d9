import io

import pytest

from txn_pipeline.services.logger.factory import LoggerFactory
from txn_pipeline.services.logger.memory_logger import MemoryLogger
from txn_pipeline.services.logger.pretty_logger import PrettyLogger


def test_factory_caches_instances():
    factory = LoggerFactory(default_impl="memory")
    assert factory.create() is factory.create()
    assert isinstance(factory.create(), MemoryLogger)


def test_factory_rejects_unknown_default():
    with pytest.raises(ValueError, match="Unknown logger implementation"):
        LoggerFactory(default_impl="syslog")


def test_factory_rejects_unknown_impl():
    with pytest.raises(ValueError, match="available: pretty, memory"):
        LoggerFactory().create("syslog")


def test_memory_logger_keeps_level_and_context():
    log = MemoryLogger()
    log.info("Routed", user="alice")
    log.error("Broker failure", error="down")
    log.debug("No notice")
    assert log.messages == ["Routed", "Broker failure", "No notice"]
    assert log.at_level("ERROR")[0].ctx == {"error": "down"}


def test_pretty_logger_renders_context_inline():
    out = io.StringIO()
    PrettyLogger(stream=out).warn(
        "Flush failed", pending=2, topics=["valid-transactions", "high-value-transactions"]
    )
    line = out.getvalue()
    assert "[WARN]" in line
    assert "Flush failed" in line
    assert "pending=2 topics=valid-transactions,high-value-transactions" in line


def test_pretty_logger_hides_debug_by_default():
    out = io.StringIO()
    log = PrettyLogger(stream=out)
    log.debug("No notice", label="high-value")
    assert out.getvalue() == ""
    PrettyLogger(stream=out, level="DEBUG").debug("No notice")
    assert "[DEBUG]" in out.getvalue()


def test_pretty_logger_rejects_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        PrettyLogger(level="TRACE")
