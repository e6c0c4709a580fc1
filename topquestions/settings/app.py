"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from topquestions.collector.constants import (
    DEFAULT_BUCKET_CAPACITY,
    DEFAULT_REFILL_PER_SECOND,
)
from topquestions.fetch.config import FetchConfig
from topquestions.fetch.constants import SEARCH_API_BASE_URL, SEARCH_SITE


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TOPQ_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_base_url: str = Field(default=SEARCH_API_BASE_URL, min_length=1)
    site: str = Field(default=SEARCH_SITE, min_length=1)
    timeout_seconds: float = Field(default=30.0, ge=1.0, le=300.0)
    rate_limit_capacity: float = Field(default=DEFAULT_BUCKET_CAPACITY, ge=1.0)
    rate_limit_refill_per_second: float = Field(
        default=DEFAULT_REFILL_PER_SECOND, gt=0.0
    )

    def to_fetch_config(self) -> FetchConfig:
        """Build the fetch configuration from these settings."""
        return FetchConfig(
            base_url=self.api_base_url,
            site=self.site,
            timeout_seconds=self.timeout_seconds,
        )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
