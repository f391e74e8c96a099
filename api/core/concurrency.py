"""
Small asyncio helpers shared by features.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def bounded_gather(
    func: Callable[[T], Awaitable[R]],
    items: Iterable[T],
    *,
    limit: int,
) -> list[R]:
    """
    Run `func(item)` for every item with at most `limit` calls in flight.

    Results come back in input order. The first failure cancels whatever is
    still pending and is re-raised once those tasks have settled.
    """
    if limit <= 0:
        raise ValueError("limit must be positive.")

    semaphore = asyncio.Semaphore(limit)

    async def _run(item: T) -> R:
        async with semaphore:
            return await func(item)

    tasks = [asyncio.create_task(_run(item)) for item in items]
    if not tasks:
        return []

    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
