"""Data models for the application."""
from .requests import ScrapeBatchRequest
from .responses import NOT_AVAILABLE, ScrapeOutcome
from .scrape import (
    FilterDecision,
    PriceStatus,
    ResourceType,
    ScrapeTask,
    TaskResult,
    TaskStage,
)

__all__ = [
    "ScrapeBatchRequest",
    "ScrapeOutcome",
    "NOT_AVAILABLE",
    "FilterDecision",
    "PriceStatus",
    "ResourceType",
    "ScrapeTask",
    "TaskResult",
    "TaskStage",
]
