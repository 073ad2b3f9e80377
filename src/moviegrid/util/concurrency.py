from __future__ import annotations

import asyncio
from typing import Awaitable, Iterable, TypeVar

T = TypeVar("T")


async def gather_all(awaitables: Iterable[Awaitable[T]]) -> list[T]:
    """Run all awaitables concurrently and return results in input order.

    The first failure cancels the others and is re-raised as-is.
    """
    items = list(awaitables)
    if not items:
        return []
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(_as_coroutine(item)) for item in items]
    except BaseExceptionGroup as exc_group:
        raise _first_leaf(exc_group) from None
    return [task.result() for task in tasks]


async def _as_coroutine(awaitable: Awaitable[T]) -> T:
    return await awaitable


def _first_leaf(exc_group: BaseExceptionGroup) -> BaseException:
    first = exc_group.exceptions[0]
    if isinstance(first, BaseExceptionGroup):
        return _first_leaf(first)
    return first
