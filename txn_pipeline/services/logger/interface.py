from abc import ABC, abstractmethod
from typing import Any

LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


class LoggingInterface(ABC):
    """A message plus keyword context, e.g. ``log.info("Subscribed", group_id=g)``."""

    @abstractmethod
    def log(self, level: str, msg: str, ctx: dict[str, Any]) -> None: ...

    def debug(self, msg: str, **ctx: Any) -> None:
        self.log("DEBUG", msg, ctx)

    def info(self, msg: str, **ctx: Any) -> None:
        self.log("INFO", msg, ctx)

    def warn(self, msg: str, **ctx: Any) -> None:
        self.log("WARN", msg, ctx)

    def error(self, msg: str, **ctx: Any) -> None:
        self.log("ERROR", msg, ctx)
