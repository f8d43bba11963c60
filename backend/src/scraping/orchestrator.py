"""Orchestrator for scraping a batch of listing URLs with one browser session."""
import asyncio
import time
from collections import Counter
from contextlib import AsyncExitStack
from functools import partial
from typing import Callable, List, Optional, Sequence
from urllib.parse import urlencode

from ..config import settings
from ..exceptions import (
    BatchCancelledError,
    BatchTimeoutError,
    BrowserSessionError,
    NoURLsConfiguredError,
)
from ..models import (
    ScrapeBatchRequest,
    ScrapeOutcome,
    ScrapeTask,
    TaskResult,
    TaskStage,
)
from ..services import (
    BoundedScheduler,
    BrowserClient,
    PriceExtractor,
    ResourceFilterPolicy,
)
from ..utils.logger import logger


class ScrapeOrchestrator:
    """Scrapes prices for a batch of listing URLs.

    A batch borrows pages from a single browser session. The session factory
    must return an async context manager yielding an object with
    ``install_resource_filter(policy)`` and ``open_page(url)``, the latter an
    async context manager yielding a page that supports
    ``wait_for_load_state("load")`` and ``query_selector_all(selector)``.
    """

    def __init__(
        self,
        default_urls: Sequence[str] = (),
        session_factory: Optional[Callable] = None,
        scheduler: Optional[BoundedScheduler] = None,
        resource_filter: Optional[ResourceFilterPolicy] = None,
        extractor: Optional[PriceExtractor] = None,
        encode_query_dates: Optional[bool] = None,
        batch_timeout: Optional[float] = None,
    ):
        """Initialize the orchestrator.

        Args:
            default_urls: URLs scraped when a request names none
            session_factory: Callable returning a browser session context manager.
                Defaults to BrowserClient
            scheduler: Scheduler bounding concurrent page loads
            resource_filter: Policy installed on every session
            extractor: Price extractor applied to each loaded page
            encode_query_dates: Percent-encode the date query parameters.
                Defaults to settings encode_query_dates
            batch_timeout: Seconds before an unfinished batch is abandoned, 0 to
                disable. Defaults to settings batch_timeout
        """
        self.default_urls = tuple(default_urls)
        self.session_factory = session_factory or BrowserClient
        self.scheduler = scheduler or BoundedScheduler()
        self.resource_filter = resource_filter or ResourceFilterPolicy()
        self.extractor = extractor or PriceExtractor()
        self.encode_query_dates = (
            settings.encode_query_dates if encode_query_dates is None else encode_query_dates
        )
        if batch_timeout is None:
            self.batch_timeout = settings.batch_deadline
        else:
            self.batch_timeout = batch_timeout or None

    def resolve_urls(self, request: ScrapeBatchRequest) -> List[str]:
        """Return the request's URLs, or the default list if it has none."""
        if request.urls:
            return list(request.urls)
        if self.default_urls:
            return list(self.default_urls)
        raise NoURLsConfiguredError()

    def build_full_url(self, base_url: str, arrival_date: str, departure_date: str) -> str:
        """Append the stay dates to a listing URL as checkin/checkout parameters."""
        if not self.encode_query_dates:
            return f"{base_url}?checkin={arrival_date}&checkout={departure_date}"

        query = urlencode({"checkin": arrival_date, "checkout": departure_date})
        separator = "&" if "?" in base_url else "?"
        return f"{base_url}{separator}{query}"

    def build_tasks(self, request: ScrapeBatchRequest) -> List[ScrapeTask]:
        """Create one task per effective URL."""
        return [
            ScrapeTask(
                base_url=url,
                full_url=self.build_full_url(url, request.arrival_date, request.departure_date),
            )
            for url in self.resolve_urls(request)
        ]

    async def handle_batch(
        self,
        request: ScrapeBatchRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[ScrapeOutcome]:
        """Scrape every URL of a request and return one outcome per URL.

        Args:
            request: Batch request with stay dates and optional URLs
            cancel_event: Setting it abandons the batch

        Returns:
            Outcomes in no guaranteed order; price is "N/A" where none was found

        Raises:
            NoURLsConfiguredError: If there is nothing to scrape
            BrowserSessionError: If the browser session cannot be started
            BatchTimeoutError: If the batch deadline passes
            BatchCancelledError: If cancel_event is set mid-batch
        """
        results = await self.run_batch(request, cancel_event=cancel_event)
        return [result.to_outcome() for result in results]

    async def run_batch(
        self,
        request: ScrapeBatchRequest,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[TaskResult]:
        """Like handle_batch, but returns the detailed per-task results."""
        tasks = self.build_tasks(request)
        logger.info(
            f"Starting batch of {len(tasks)} URLs "
            f"({request.arrival_date} to {request.departure_date}), "
            f"concurrency {self.scheduler.limit}"
        )
        started = time.monotonic()

        async with AsyncExitStack() as stack:
            session = await self._open_session(stack)
            report = await self.scheduler.run(
                tasks,
                work=partial(self._scrape_one, session),
                fallback=self._fallback,
                cancel_event=cancel_event,
                timeout=self.batch_timeout,
            )

        elapsed = time.monotonic() - started
        if report.timed_out:
            raise BatchTimeoutError(
                f"Batch timed out after {self.batch_timeout}s "
                f"with {report.completed}/{len(tasks)} URLs done",
                completed=report.completed,
                total=len(tasks),
            )
        if report.cancelled:
            raise BatchCancelledError(
                f"Batch cancelled with {report.completed}/{len(tasks)} URLs done",
                completed=report.completed,
                total=len(tasks),
            )

        counts = Counter(result.status.value for result in report.results)
        logger.info(f"Batch finished in {elapsed:.1f}s: {dict(counts)}")
        return report.results

    async def _open_session(self, stack: AsyncExitStack):
        try:
            session = await stack.enter_async_context(self.session_factory())
            await session.install_resource_filter(self.resource_filter)
        except BrowserSessionError:
            raise
        except Exception as e:
            raise BrowserSessionError(f"Failed to prepare browser session: {e}") from e
        return session

    async def _scrape_one(self, session, task: ScrapeTask) -> TaskResult:
        stage = TaskStage.PAGE_OPENING
        try:
            async with session.open_page(task.full_url) as page:
                await page.wait_for_load_state("load")
                stage = TaskStage.PAGE_LOADED
                logger.debug(f"Loaded {task.full_url}")

                stage = TaskStage.EXTRACTING
                price = await self.extractor.find_price(page)
        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.warning(f"Failed to scrape {task.full_url} while {stage.value}: {reason}")
            return TaskResult.failed(task.full_url, stage, reason)

        if price is None:
            logger.info(f"No price found on {task.full_url}")
            return TaskResult.not_found(task.full_url)

        logger.info(f"Found price {price} on {task.full_url}")
        return TaskResult.found(task.full_url, price)

    @staticmethod
    def _fallback(task: ScrapeTask, error: Optional[BaseException]) -> TaskResult:
        if error is None:
            return TaskResult.cancelled(task.full_url)
        return TaskResult.failed(task.full_url, TaskStage.CREATED, repr(error))
