"""Helpers to run resolver work from sync or async contexts."""

from __future__ import annotations

import asyncio
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any

from extractpoints.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine, Iterable


def _run_in_background_thread[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine in a dedicated thread with its own event loop.

    Args:
        coro: The coroutine to run.

    Raises:
        AsyncExecutionError: If the coroutine raises an exception.

    Returns:
        The result of the coroutine.
    """
    output: Queue[T | BaseException] = Queue(maxsize=1)

    def _runner() -> None:
        try:
            output.put(asyncio.run(coro))
        except BaseException as exc:
            output.put(exc)

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()

    result = output.get()
    if isinstance(result, BaseException):
        raise AsyncExecutionError(result=result) from result
    return result


def run_async[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run an async coroutine from both sync and async contexts.

    From a sync context the coroutine runs on a fresh event loop. From inside a
    running loop it runs on a dedicated thread with its own loop, and its
    failures are wrapped in `AsyncExecutionError`.

    Args:
        coro: The coroutine to run.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    return _run_in_background_thread(coro)


def bounded_to_thread[T](
    semaphore: asyncio.Semaphore,
    func: Callable[..., T],
    *args: Any,
) -> Awaitable[T]:
    """Run a blocking callable in a worker thread once a semaphore slot is free.

    Args:
        semaphore: Concurrency limiter shared by a batch of calls.
        func: Blocking callable, typically `Resolver.resolve`.
        *args: Positional arguments for ``func``.

    Returns:
        Awaitable[T]: Awaitable producing the callable's result.
    """

    async def _call() -> T:
        async with semaphore:
            return await asyncio.to_thread(func, *args)

    return _call()


async def gather_ordered[T](awaitables: Iterable[Awaitable[T]]) -> list[T]:
    """Await all awaitables and return their results in submission order.

    The first exception raised cancels the remaining tasks and propagates.

    Args:
        awaitables: Awaitables to run concurrently.

    Returns:
        list[T]: Results, in the same order as ``awaitables``.
    """
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
