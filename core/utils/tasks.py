# core/utils/tasks.py
import asyncio
from typing import Awaitable, Iterable, List, TypeVar

T = TypeVar('T')


async def gather_or_cancel(awaitables: Iterable[Awaitable[T]]) -> List[T]:
    """
    Run awaitables concurrently and return their results in input order.

    The first exception is re-raised as is, after the tasks that are still
    running have been cancelled.
    """
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Let the cancelled tasks unwind before the error leaves this scope
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
