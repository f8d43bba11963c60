"""Price scraper backend."""
from .config import settings
from .models import ScrapeBatchRequest, ScrapeOutcome, TaskResult, PriceStatus
from .services import BoundedScheduler, BrowserClient, PriceExtractor, ResourceFilterPolicy
from .scraping import ScrapeOrchestrator

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
