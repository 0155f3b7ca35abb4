"""Helpers for driving the async controller layer from synchronous code."""

from __future__ import annotations

import asyncio
import concurrent.futures
from collections.abc import Coroutine
from typing import Any, TypeVar

T = TypeVar("T")


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion from a blocking caller.

    The installer is strictly sequential, so every controller call goes
    through here. When an event loop is already running in this thread
    (e.g. under an async test harness) the coroutine is executed on a
    fresh loop in a worker thread instead.

    Args:
        coro: The coroutine to execute

    Returns:
        The coroutine's result

    Example:
        from tierctl.infra.k8s import KubectlController, run_sync

        pods = run_sync(KubectlController().get_pods("falco"))
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    if loop.is_running():
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()
    return loop.run_until_complete(coro)
