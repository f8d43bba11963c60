"""Bounded-concurrency scheduler for fanning work out over a fixed number of slots."""
import asyncio
from typing import (
    Awaitable,
    Callable,
    Generic,
    Iterable,
    List,
    Optional,
    TypeVar,
)

from ..config import settings
from ..utils.logger import logger

T = TypeVar("T")
R = TypeVar("R")


class ScheduleReport(Generic[R]):
    """Results of one scheduler run, one per submitted item, in submission order."""

    def __init__(
        self,
        results: List[R],
        completed: int,
        cancelled: bool = False,
        timed_out: bool = False,
    ):
        self.results = results
        self.completed = completed
        self.cancelled = cancelled
        self.timed_out = timed_out

    @property
    def interrupted(self) -> bool:
        """True if the run stopped before every item finished on its own."""
        return self.cancelled or self.timed_out

    def __len__(self) -> int:
        return len(self.results)


class BoundedScheduler:
    """Runs async work over a list of items with at most ``limit`` in flight.

    Items are admitted first-come in list order through a semaphore. Every item
    is attempted exactly once and produces exactly one result: either what
    ``work`` returned or, if it raised or was cancelled, what ``fallback``
    builds for it.
    """

    def __init__(self, limit: Optional[int] = None):
        """Initialize the scheduler.

        Args:
            limit: Maximum concurrent work invocations. Defaults to settings
                max_concurrency
        """
        if limit is None:
            limit = settings.max_concurrency
        if limit < 1:
            raise ValueError(f"Concurrency limit must be positive, got {limit}")
        self.limit = limit

    async def run(
        self,
        items: Iterable[T],
        work: Callable[[T], Awaitable[R]],
        fallback: Callable[[T, Optional[BaseException]], R],
        cancel_event: Optional[asyncio.Event] = None,
        timeout: Optional[float] = None,
    ) -> ScheduleReport[R]:
        """Run ``work`` for every item and wait for all of them.

        Args:
            items: Inputs, one work invocation each
            work: Coroutine function processing one item
            fallback: Builds a result for an item whose work raised (exception
                passed) or was cancelled (None passed)
            cancel_event: When set, unfinished work is cancelled
            timeout: Seconds before unfinished work is cancelled

        Returns:
            ScheduleReport with one result per item
        """
        items = list(items)
        if not items:
            return ScheduleReport([], completed=0)

        semaphore = asyncio.Semaphore(self.limit)

        async def admit(item: T) -> R:
            async with semaphore:
                return await work(item)

        tasks = [asyncio.create_task(admit(item)) for item in items]
        stopper = (
            asyncio.create_task(cancel_event.wait()) if cancel_event is not None else None
        )
        cancelled = False
        timed_out = False

        try:
            loop = asyncio.get_running_loop()
            deadline = loop.time() + timeout if timeout is not None else None
            pending = set(tasks)

            while pending:
                remaining = None
                if deadline is not None:
                    remaining = deadline - loop.time()
                    if remaining <= 0:
                        timed_out = True
                        break

                waiting_on = pending | {stopper} if stopper is not None else pending
                done, _ = await asyncio.wait(
                    waiting_on, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
                )
                pending -= done
                if pending and stopper is not None and stopper in done:
                    cancelled = True
                    break
        finally:
            if stopper is not None:
                stopper.cancel()
            for task in tasks:
                if not task.done():
                    task.cancel()
            # Cancelled work still gets to run its cleanup before we return
            await asyncio.gather(*tasks, return_exceptions=True)

        if timed_out:
            logger.warning(f"Scheduler timed out after {timeout}s")
        elif cancelled:
            logger.warning("Scheduler run cancelled")

        results: List[R] = []
        completed = 0
        for item, task in zip(items, tasks):
            if task.cancelled():
                results.append(fallback(item, None))
            elif task.exception() is not None:
                error = task.exception()
                logger.error(f"Unhandled error in scheduled work: {error!r}")
                results.append(fallback(item, error))
            else:
                results.append(task.result())
                completed += 1

        return ScheduleReport(
            results, completed=completed, cancelled=cancelled, timed_out=timed_out
        )
