"""Response models for API endpoints."""
from pydantic import BaseModel, Field

NOT_AVAILABLE = "N/A"


class ScrapeOutcome(BaseModel):
    """Price scraped from one listing page."""

    url: str = Field(..., description="Listing URL including the date query string")
    price: str = Field(..., description=f"Price text, or '{NOT_AVAILABLE}' when none was found")

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://example.com/listing/a?checkin=2024-06-01&checkout=2024-06-05",
                "price": "$1,250",
            }
        }
