"""Backend package for price-scraper."""
from .src import (
    settings,
    ScrapeBatchRequest,
    ScrapeOutcome,
    TaskResult,
    PriceStatus,
    BoundedScheduler,
    BrowserClient,
    PriceExtractor,
    ResourceFilterPolicy,
    ScrapeOrchestrator,
)

__all__ = [
    "settings",
    "ScrapeBatchRequest",
    "ScrapeOutcome",
    "TaskResult",
    "PriceStatus",
    "BoundedScheduler",
    "BrowserClient",
    "PriceExtractor",
    "ResourceFilterPolicy",
    "ScrapeOrchestrator",
]
