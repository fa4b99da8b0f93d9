from __future__ import annotations

from txn_pipeline.services.logger.interface import LoggingInterface
from txn_pipeline.services.logger.memory_logger import MemoryLogger
from txn_pipeline.services.logger.pretty_logger import PrettyLogger

LOGGERS: dict[str, type[LoggingInterface]] = {
    "pretty": PrettyLogger,
    "memory": MemoryLogger,
}


class LoggerFactory:
    """Hands every module the same logger for a given ``--log`` choice.

    Sharing one instance per implementation lets the consumption loop and the
    module it runs in write to the same memory logger in tests.
    """

    def __init__(self, default_impl: str = "pretty") -> None:
        self._default_impl = self._known(default_impl)
        self._loggers: dict[str, LoggingInterface] = {}

    @staticmethod
    def _known(name: str) -> str:
        if name not in LOGGERS:
            raise ValueError(
                f"Unknown logger implementation: '{name}' (available: {', '.join(LOGGERS)})"
            )
        return name

    def create(self, impl_name: str | None = None) -> LoggingInterface:
        name = self._known(impl_name or self._default_impl)
        if name not in self._loggers:
            self._loggers[name] = LOGGERS[name]()
        return self._loggers[name]
