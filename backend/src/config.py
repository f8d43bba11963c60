"""Application configuration management."""
from typing import Annotated, List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False

    # CORS - a single frontend origin is allowed
    cors_origin: str = "https://realjoy-1.vercel.app"

    # Default listing URLs, one per line, loaded once at startup
    url_list_path: str = "list.txt"

    # Scraper Configuration
    max_concurrency: int = 6
    # Comma-separated in the environment, e.g. BLOCKED_RESOURCE_TYPES=image,font
    blocked_resource_types: Annotated[List[str], NoDecode] = [
        "image", "font", "stylesheet", "script"
    ]
    price_selector: str = ".pdp-quote-total span"
    currency_prefix: str = "$"
    encode_query_dates: bool = True

    # Timeouts in seconds. batch_timeout of 0 disables the batch deadline.
    page_timeout: int = 60
    batch_timeout: int = 300

    # Browser Configuration
    browser_executable: Optional[str] = None  # e.g. /usr/bin/chromium
    browser_headless: bool = True
    browser_no_sandbox: bool = True

    # Model Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("max_concurrency")
    @classmethod
    def _positive_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_concurrency must be a positive integer")
        return value

    @field_validator("blocked_resource_types", mode="before")
    @classmethod
    def _split_resource_types(cls, value: Union[str, List[str]]) -> List[str]:
        if isinstance(value, str):
            value = value.split(",")
        return [item.strip().lower() for item in value if item.strip()]

    @property
    def batch_deadline(self) -> Optional[float]:
        """Batch timeout in seconds, or None when disabled."""
        return float(self.batch_timeout) if self.batch_timeout > 0 else None


# Global settings instance
settings = Settings()
