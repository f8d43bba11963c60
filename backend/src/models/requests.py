"""Request models for API endpoints."""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ScrapeBatchRequest(BaseModel):
    """Request model for the price scraping endpoint."""

    arrival_date: str = Field(
        ..., alias="arrivalDate", description="Check-in date, e.g. 2024-06-01"
    )
    departure_date: str = Field(
        ..., alias="departureDate", description="Check-out date, e.g. 2024-06-05"
    )
    urls: List[str] = Field(
        default_factory=list,
        description="Listing URLs to scrape. Empty means use the default URL list.",
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "arrivalDate": "2024-06-01",
                "departureDate": "2024-06-05",
                "urls": ["https://example.com/listing/a"],
            }
        }

    @field_validator("urls", mode="before")
    @classmethod
    def _null_urls_to_empty(cls, value: Optional[List[str]]) -> List[str]:
        return [] if value is None else value
