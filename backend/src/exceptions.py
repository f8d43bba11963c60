"""Exception hierarchy for the price scraper.

Batch-level errors propagate to the caller as a single failure. Task-level
errors never leave the task boundary; they are folded into an ``"N/A"``
outcome by the orchestrator.
"""


class ScraperError(Exception):
    """Base class for all price scraper errors."""


class ConfigurationError(ScraperError):
    """A batch cannot start because something it depends on is missing."""


class NoURLsConfiguredError(ConfigurationError):
    """Neither the request nor the default list supplied any URL."""

    def __init__(self, message: str = "No URLs supplied and no default URL list configured"):
        super().__init__(message)


class BrowserSessionError(ConfigurationError):
    """The browser session for a batch could not be established."""


class URLListError(ConfigurationError):
    """The default URL list file could not be loaded."""


class BatchCancelledError(ScraperError):
    """The batch was cancelled before every task produced an outcome."""

    def __init__(self, message: str = "Scrape batch was cancelled", completed: int = 0, total: int = 0):
        super().__init__(message)
        self.completed = completed
        self.total = total


class BatchTimeoutError(BatchCancelledError):
    """The batch exceeded its overall deadline."""


class TaskError(ScraperError):
    """A single scrape task failed. Always recovered inside the task."""
