"""Batch price scraping."""
from .orchestrator import ScrapeOrchestrator

__all__ = ["ScrapeOrchestrator"]
