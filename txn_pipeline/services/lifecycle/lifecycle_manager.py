"""Graceful stop for worker services.

SIGTERM and SIGINT only raise a flag. Consumption loops look at it between
batches, so a batch that has been polled is always handled and committed
before the process exits. Cleanup hooks run once, newest first, after the
module's own teardown.
"""

from __future__ import annotations

import asyncio
import inspect
import signal
from typing import Awaitable, Callable, Union

ShutdownHook = Union[Callable[[], None], Callable[[], Awaitable[None]]]

_STOP_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class LifecycleManager:
    def __init__(self) -> None:
        self._hooks: list[ShutdownHook] = []
        self._stop_reason: str | None = None
        self._hooks_ran = False
        self.hook_errors: list[Exception] = []

    @property
    def is_shutting_down(self) -> bool:
        return self._stop_reason is not None

    @property
    def stop_reason(self) -> str | None:
        """What asked the process to stop (a signal name, or a caller-given reason)."""
        return self._stop_reason

    def request_shutdown(self, reason: str = "requested") -> None:
        """Raise the stop flag. The first reason given is kept."""
        if self._stop_reason is None:
            self._stop_reason = reason

    def on_shutdown(self, hook: ShutdownHook) -> None:
        self._hooks.append(hook)

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in _STOP_SIGNALS:
            loop.add_signal_handler(sig, self.request_shutdown, signal.Signals(sig).name)

    def remove_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in _STOP_SIGNALS:
            loop.remove_signal_handler(sig)

    async def shutdown(self) -> None:
        """Run the registered hooks, newest first, at most once.

        Hook failures are collected in ``hook_errors``; the remaining hooks
        still run.
        """
        self.request_shutdown("shutdown")
        if self._hooks_ran:
            return
        self._hooks_ran = True

        for hook in reversed(self._hooks):
            try:
                outcome = hook()
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as exc:
                self.hook_errors.append(exc)
