"""Configuration model for the search fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from topquestions.fetch.constants import (
    DEFAULT_MAX_RESPONSE_SIZE_BYTES,
    SEARCH_API_BASE_URL,
    SEARCH_SITE,
)


class FetchConfig(BaseModel):
    """Configuration for page fetches."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: Annotated[str, Field(min_length=1)] = SEARCH_API_BASE_URL
    site: Annotated[str, Field(min_length=1)] = SEARCH_SITE
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        "topquestions/0.1"
    )
    timeout_seconds: Annotated[float, Field(ge=1.0, le=300.0)] = 30.0
    max_response_size_bytes: Annotated[int, Field(ge=1024, le=100 * 1024 * 1024)] = (
        DEFAULT_MAX_RESPONSE_SIZE_BYTES
    )
