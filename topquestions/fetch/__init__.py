"""Search API fetch layer.

This module provides single-page fetches against the search endpoint with:
- Immutable per-request query construction
- gzip-aware body decoding
- Typed transport and decode errors
- Maximum response size enforcement
"""

from topquestions.fetch.client import PageFetcher
from topquestions.fetch.config import FetchConfig
from topquestions.fetch.constants import (
    DATE_WINDOW_DAYS,
    PAGE_SIZE,
    SEARCH_API_BASE_URL,
    SEARCH_SITE,
)
from topquestions.fetch.models import Item, Page, SearchParameters


__all__ = [
    # Client
    "PageFetcher",
    # Config
    "FetchConfig",
    # Models
    "Item",
    "Page",
    "SearchParameters",
    # Constants
    "DATE_WINDOW_DAYS",
    "PAGE_SIZE",
    "SEARCH_API_BASE_URL",
    "SEARCH_SITE",
]
