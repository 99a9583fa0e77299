# src/fetch/worker_pool.py — v1
"""Bounded-concurrency worker with paced starts and cooperative cancellation.

The fetch pipeline runs it with concurrency=1: each item (including its own
retries and backoff) completes before the next item starts, and a fixed
delay separates successive starts. Raising the concurrency is a
configuration change only.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

SleepFn = Callable[[float], Awaitable[None]]


@dataclass
class PoolRun(Generic[R]):
    """Results in input order; None for items skipped after cancellation."""

    results: list[R | None] = field(default_factory=list)
    completed: int = 0
    cancelled: bool = False


class BoundedWorkerPool:
    """Run an async worker over items with bounded concurrency.

    Args:
        concurrency: Maximum items in flight at once (>= 1).
        start_delay_s: Delay inserted before every start except the first.
        sleep: Awaitable sleep function (injectable for tests).
    """

    def __init__(
        self,
        concurrency: int = 1,
        start_delay_s: float = 0.0,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._concurrency = concurrency
        self._start_delay_s = start_delay_s
        self._sleep = sleep

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def run(
        self,
        items: Sequence[T],
        worker: Callable[[T], Awaitable[R]],
        cancel_event: asyncio.Event | None = None,
        on_done: Callable[[int, R], None] | None = None,
    ) -> PoolRun[R]:
        """Process `items`; stop starting new items once `cancel_event` is set."""
        run: PoolRun[R] = PoolRun(results=[None] * len(items))
        if not items:
            return run

        if self._concurrency == 1:
            await self._run_sequential(items, worker, run, cancel_event, on_done)
        else:
            await self._run_bounded(items, worker, run, cancel_event, on_done)
        return run

    async def _run_sequential(self, items, worker, run, cancel_event, on_done) -> None:
        for index, item in enumerate(items):
            if index > 0 and self._start_delay_s > 0:
                await self._sleep(self._start_delay_s)
            if _is_cancelled(cancel_event):
                run.cancelled = True
                logger.info("Worker run cancelled after %d/%d items", index, len(items))
                return
            result = await worker(item)
            run.results[index] = result
            run.completed += 1
            if on_done is not None:
                on_done(index, result)

    async def _run_bounded(self, items, worker, run, cancel_event, on_done) -> None:
        semaphore = asyncio.Semaphore(self._concurrency)
        pacing = asyncio.Lock()
        started = 0

        async def _one(index: int, item: T) -> None:
            nonlocal started
            async with semaphore:
                async with pacing:
                    if started > 0 and self._start_delay_s > 0:
                        await self._sleep(self._start_delay_s)
                    if _is_cancelled(cancel_event):
                        run.cancelled = True
                        return
                    started += 1
                result = await worker(item)
                run.results[index] = result
                run.completed += 1
                if on_done is not None:
                    on_done(index, result)

        await asyncio.gather(*(_one(i, item) for i, item in enumerate(items)))


def _is_cancelled(cancel_event: asyncio.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()
