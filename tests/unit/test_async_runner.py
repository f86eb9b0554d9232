from __future__ import annotations

import asyncio
import threading
import time

import pytest

from extractpoints.async_runner import bounded_to_thread, gather_ordered, run_async
from extractpoints.exceptions import AsyncExecutionError


async def _identity(value: int) -> int:
    await asyncio.sleep(0)
    return value


async def _fail() -> int:
    await asyncio.sleep(0)
    raise ValueError("boom")


def test_run_async_from_sync_context() -> None:
    assert run_async(_identity(7)) == 7


def test_run_async_with_running_loop() -> None:
    async def _nested() -> int:
        await asyncio.sleep(0)
        return run_async(_identity(11))

    assert asyncio.run(_nested()) == 11


def test_run_async_propagates_errors_from_sync_context() -> None:
    with pytest.raises(ValueError, match="boom"):
        run_async(_fail())


def test_run_async_wraps_errors_with_running_loop() -> None:
    async def _nested() -> int:
        return run_async(_fail())

    with pytest.raises(AsyncExecutionError, match="boom"):
        asyncio.run(_nested())


def test_gather_ordered_keeps_submission_order() -> None:
    async def _delayed(value: int, delay: float) -> int:
        await asyncio.sleep(delay)
        return value

    async def _main() -> list[int]:
        return await gather_ordered([_delayed(1, 0.03), _delayed(2, 0.0), _delayed(3, 0.01)])

    assert asyncio.run(_main()) == [1, 2, 3]


def test_gather_ordered_cancels_remaining_tasks_on_failure() -> None:
    async def _main() -> bool:
        started = asyncio.Event()
        was_cancelled = {"value": False}

        async def _slow() -> int:
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                was_cancelled["value"] = True
                raise
            return 0

        async def _failing() -> int:
            await started.wait()
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await gather_ordered([_slow(), _failing()])
        await asyncio.sleep(0.01)
        return was_cancelled["value"]

    assert asyncio.run(_main()) is True


def test_bounded_to_thread_limits_concurrency() -> None:
    lock = threading.Lock()
    active = {"now": 0, "peak": 0}

    def _work(value: int) -> int:
        with lock:
            active["now"] += 1
            active["peak"] = max(active["peak"], active["now"])
        time.sleep(0.02)
        with lock:
            active["now"] -= 1
        return value * 2

    async def _main() -> list[int]:
        semaphore = asyncio.Semaphore(2)
        return await gather_ordered(bounded_to_thread(semaphore, _work, value) for value in range(6))

    assert asyncio.run(_main()) == [0, 2, 4, 6, 8, 10]
    assert active["peak"] <= 2
