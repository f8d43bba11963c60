"""Services for the application."""
from .browser_client import BrowserClient
from .price_extractor import PriceExtractor
from .resource_filter import ResourceFilterPolicy
from .scheduler import BoundedScheduler, ScheduleReport
from .url_list import load_url_list, parse_url_list

__all__ = [
    "BrowserClient",
    "PriceExtractor",
    "ResourceFilterPolicy",
    "BoundedScheduler",
    "ScheduleReport",
    "load_url_list",
    "parse_url_list",
]
