import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from txn_pipeline.services.logger.interface import LEVELS, LoggingInterface

_LEVEL_COLOR = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARN": "\033[33m",
    "ERROR": "\033[31m",
}
_RESET = "\033[0m"


def _render(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class PrettyLogger(LoggingInterface):
    """One coloured line per entry on stderr, context appended as ``key=value``.

    Entries below *level* are dropped; console runs hide DEBUG by default.
    """

    def __init__(self, stream: TextIO | None = None, level: str = "INFO") -> None:
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: '{level}' (available: {', '.join(LEVELS)})")
        self._stream = stream
        self._threshold = LEVELS.index(level)

    def log(self, level: str, msg: str, ctx: dict[str, Any]) -> None:
        if LEVELS.index(level) < self._threshold:
            return
        ts = datetime.now(timezone.utc).strftime("%H:%M:%S")
        line = f"{_LEVEL_COLOR[level]}{ts} [{level}]{_RESET} {msg}"
        if ctx:
            line += "  " + " ".join(f"{k}={_render(v)}" for k, v in ctx.items())
        print(line, file=self._stream or sys.stderr)
