"""Tests for LifecycleManager."""

from __future__ import annotations

import asyncio
import os
import signal

import pytest

from txn_pipeline.services.lifecycle.lifecycle_manager import LifecycleManager


@pytest.mark.asyncio
async def test_hooks_execute_in_reverse_order() -> None:
    lm = LifecycleManager()
    order: list[str] = []
    lm.on_shutdown(lambda: order.append("close consumer"))
    lm.on_shutdown(lambda: order.append("flush producer"))
    await lm.shutdown()
    assert order == ["flush producer", "close consumer"]


@pytest.mark.asyncio
async def test_hook_failure_is_recorded_and_others_run() -> None:
    lm = LifecycleManager()
    calls: list[str] = []
    lm.on_shutdown(lambda: calls.append("first"))

    def failing_hook() -> None:
        raise RuntimeError("boom")

    lm.on_shutdown(failing_hook)
    lm.on_shutdown(lambda: calls.append("last"))
    await lm.shutdown()
    assert calls == ["last", "first"]
    assert [str(e) for e in lm.hook_errors] == ["boom"]


@pytest.mark.asyncio
async def test_async_hooks_awaited() -> None:
    lm = LifecycleManager()
    result: list[str] = []

    async def async_hook() -> None:
        result.append("async_done")

    lm.on_shutdown(async_hook)
    await lm.shutdown()
    assert result == ["async_done"]


def test_first_stop_reason_wins() -> None:
    lm = LifecycleManager()
    assert not lm.is_shutting_down
    lm.request_shutdown("SIGTERM")
    lm.request_shutdown("SIGINT")
    assert lm.is_shutting_down
    assert lm.stop_reason == "SIGTERM"


@pytest.mark.asyncio
async def test_hooks_run_once() -> None:
    lm = LifecycleManager()
    count = 0

    def hook() -> None:
        nonlocal count
        count += 1

    lm.on_shutdown(hook)
    await lm.shutdown()
    await lm.shutdown()
    assert count == 1
    assert lm.stop_reason == "shutdown"


@pytest.mark.asyncio
async def test_sigterm_raises_stop_flag() -> None:
    lm = LifecycleManager()
    loop = asyncio.get_running_loop()
    lm.install_signal_handlers(loop)
    try:
        os.kill(os.getpid(), signal.SIGTERM)
        for _ in range(50):
            if lm.is_shutting_down:
                break
            await asyncio.sleep(0.01)
    finally:
        lm.remove_signal_handlers(loop)
    assert lm.stop_reason == "SIGTERM"
