"""
Bounded async worker pool for fanning out write operations.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from configuration import PROGRESS_INTERVAL

logger = logging.getLogger(__name__)


class WorkerPool:
    """Runs an async callable over many items with at most max_workers in flight.

    Items are pulled lazily from the iterable, so generating millions of keys
    does not materialize millions of pending tasks.
    """

    def __init__(self, max_workers: int, name: str = "pool", progress_interval: Optional[int] = None):
        if max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.max_workers = max_workers
        self.name = name
        self.progress_interval = progress_interval or PROGRESS_INTERVAL
        self.completed = 0
        self.failed = 0

    async def map(self, func: Callable[[Any], Awaitable[Any]], items: Iterable[Any]) -> List[Any]:
        """Apply func to every item and return the results in completion order.

        Exceptions raised by func are logged and counted as failures; their
        result is omitted.
        """
        iterator = iter(items)
        results: List[Any] = []

        async def worker():
            while True:
                try:
                    item = next(iterator)
                except StopIteration:
                    return
                try:
                    result = await func(item)
                except Exception as e:
                    self.failed += 1
                    logger.error(f"[{self.name}] task failed for {item!r}: {e}")
                    continue
                results.append(result)
                self.completed += 1
                if self.completed % self.progress_interval == 0:
                    logger.debug(f"[{self.name}] {self.completed} tasks completed")

        workers = [asyncio.create_task(worker()) for _ in range(self.max_workers)]
        try:
            await asyncio.gather(*workers)
        finally:
            for task in workers:
                if not task.done():
                    task.cancel()

        return results
