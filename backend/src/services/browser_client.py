"""Browser client service for loading listing pages with a headless Chromium."""
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)

from ..config import settings
from ..exceptions import BrowserSessionError, TaskError
from ..utils.logger import logger


class BrowserClient:
    """One headless browser session shared by every page of a scrape batch.

    Use as an async context manager. Pages are opened with :meth:`open_page`,
    each in its own tab of a single browser context, so any number of tasks
    may open pages concurrently.
    """

    def __init__(
        self,
        timeout: Optional[int] = None,
        executable_path: Optional[str] = None,
        headless: Optional[bool] = None,
        no_sandbox: Optional[bool] = None,
    ):
        """Initialize the browser client.

        Args:
            timeout: Page load timeout in seconds. Defaults to settings page_timeout
            executable_path: Chromium binary. Defaults to settings browser_executable,
                falling back to the Playwright-managed build
            headless: Run without a window. Defaults to settings browser_headless
            no_sandbox: Pass --no-sandbox. Defaults to settings browser_no_sandbox
        """
        self.timeout = (timeout or settings.page_timeout) * 1000  # Convert to ms
        self.executable_path = executable_path or settings.browser_executable
        self.headless = settings.browser_headless if headless is None else headless
        self.no_sandbox = settings.browser_no_sandbox if no_sandbox is None else no_sandbox

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def __aenter__(self):
        """Start Playwright and launch the browser."""
        args: List[str] = ["--no-sandbox"] if self.no_sandbox else []
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                executable_path=self.executable_path,
                args=args,
            )
            self._context = await self._browser.new_context()
        except Exception as e:
            await self._shutdown()
            raise BrowserSessionError(f"Failed to start browser session: {e}") from e

        logger.info("Browser session started")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Close the browser and stop Playwright."""
        await self._shutdown()
        logger.info("Browser session closed")

    async def _shutdown(self) -> None:
        if self._context:
            try:
                await self._context.close()
            except Exception as e:
                logger.warning(f"Failed to close browser context: {e}")
            self._context = None
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Failed to close browser: {e}")
            self._browser = None
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Failed to stop Playwright: {e}")
            self._playwright = None

    async def install_resource_filter(self, policy) -> None:
        """Route every request of every page through ``policy.handle_route``.

        Args:
            policy: ResourceFilterPolicy deciding which requests to abort
        """
        if not self._context:
            raise BrowserSessionError("Browser not initialized. Use as async context manager.")
        await self._context.route("**/*", policy.handle_route)

    @asynccontextmanager
    async def open_page(self, url: str) -> AsyncIterator[Page]:
        """Open a new tab, navigate to ``url`` and wait for the load event.

        The page is closed when the block exits, whatever the outcome.

        Args:
            url: URL to load

        Yields:
            The loaded Playwright page
        """
        if not self._context:
            raise TaskError("Browser not initialized. Use as async context manager.")

        page = await self._context.new_page()
        page.set_default_timeout(self.timeout)
        try:
            await page.goto(url, wait_until="load", timeout=self.timeout)
            yield page
        finally:
            try:
                await page.close()
            except Exception as e:
                logger.warning(f"Failed to close page {url}: {e}")
