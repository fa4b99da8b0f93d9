from dataclasses import dataclass
from typing import Any

from txn_pipeline.services.logger.interface import LoggingInterface


@dataclass
class LogEntry:
    level: str
    msg: str
    ctx: dict[str, Any]


class MemoryLogger(LoggingInterface):
    """Captures every entry, at every level, for assertions in tests."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def log(self, level: str, msg: str, ctx: dict[str, Any]) -> None:
        self.entries.append(LogEntry(level, msg, dict(ctx)))

    @property
    def messages(self) -> list[str]:
        return [e.msg for e in self.entries]

    def at_level(self, level: str) -> list[LogEntry]:
        return [e for e in self.entries if e.level == level]
