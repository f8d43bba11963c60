"""Scrape task and result models."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .responses import NOT_AVAILABLE, ScrapeOutcome


class ResourceType(str, Enum):
    """Sub-resource categories reported by the browser for each request."""

    DOCUMENT = "document"
    STYLESHEET = "stylesheet"
    IMAGE = "image"
    MEDIA = "media"
    FONT = "font"
    SCRIPT = "script"
    XHR = "xhr"
    FETCH = "fetch"
    OTHER = "other"


class FilterDecision(str, Enum):
    """What to do with an outbound sub-resource request."""

    ALLOW = "allow"
    ABORT = "abort"


class PriceStatus(str, Enum):
    """How a scrape task ended."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TaskStage(str, Enum):
    """Lifecycle of a single scrape task."""

    CREATED = "created"
    PAGE_OPENING = "page_opening"
    PAGE_LOADED = "page_loaded"
    EXTRACTING = "extracting"
    COMPLETED = "completed"


class ScrapeTask(BaseModel):
    """One listing URL to scrape within a batch."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    full_url: str


class TaskResult(BaseModel):
    """Outcome of a scrape task, before it is collapsed for the wire."""

    url: str
    status: PriceStatus
    price: Optional[str] = None
    stage: TaskStage = TaskStage.COMPLETED
    reason: Optional[str] = None

    @classmethod
    def found(cls, url: str, price: str) -> "TaskResult":
        return cls(url=url, status=PriceStatus.FOUND, price=price)

    @classmethod
    def not_found(cls, url: str) -> "TaskResult":
        return cls(url=url, status=PriceStatus.NOT_FOUND)

    @classmethod
    def failed(cls, url: str, stage: TaskStage, reason: str) -> "TaskResult":
        return cls(url=url, status=PriceStatus.FAILED, stage=stage, reason=reason)

    @classmethod
    def cancelled(cls, url: str) -> "TaskResult":
        return cls(
            url=url,
            status=PriceStatus.CANCELLED,
            stage=TaskStage.CREATED,
            reason="cancelled",
        )

    def to_outcome(self) -> ScrapeOutcome:
        """Collapse to the public record: anything but a found price is N/A."""
        if self.status == PriceStatus.FOUND and self.price:
            return ScrapeOutcome(url=self.url, price=self.price)
        return ScrapeOutcome(url=self.url, price=NOT_AVAILABLE)
