"""Data models for search pages and request parameters."""

from datetime import datetime, timedelta
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from topquestions.fetch.constants import (
    DATE_WINDOW_DAYS,
    PAGE_SIZE,
    PARAM_FROMDATE,
    PARAM_INTITLE,
    PARAM_ORDER,
    PARAM_PAGE,
    PARAM_PAGESIZE,
    PARAM_SITE,
    PARAM_SORT,
    PARAM_TAGGED,
    PARAM_TODATE,
    SEARCH_ORDER,
    SEARCH_SITE,
    SEARCH_SORT,
)


class Item(BaseModel):
    """A single search result.

    Unknown fields returned by the API are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    question_id: int = Field(description="Question identifier")
    view_count: Annotated[int, Field(ge=0, description="Popularity score")]
    creation_date: int = Field(description="Creation time, epoch seconds")
    link: Annotated[str, Field(min_length=1, description="Question URL")]
    is_answered: bool = Field(default=False, description="Already resolved flag")

    def to_output(self) -> dict[str, bool | int | str]:
        """Serialize for the final result, omitting is_answered when false.

        Returns:
            Dictionary with output field order.
        """
        output: dict[str, bool | int | str] = {}
        if self.is_answered:
            output["is_answered"] = True
        output["view_count"] = self.view_count
        output["creation_date"] = self.creation_date
        output["question_id"] = self.question_id
        output["link"] = self.link
        return output


class Page(BaseModel):
    """One decoded page of search results."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    items: tuple[Item, ...] = Field(description="Results in API order")
    has_more: bool = Field(description="Continuation flag")
    quota_max: int | None = Field(default=None, description="Informational only")
    quota_remaining: int | None = Field(
        default=None, description="Informational only"
    )


class SearchParameters(BaseModel):
    """Caller-supplied search filters plus the fixed date window.

    Immutable; every request gets its own query mapping from to_query().
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    intitle: str = Field(description="Title substring to match")
    tagged: str | None = Field(default=None, description="Optional tag filter")
    fromdate: int = Field(description="Window start, epoch seconds")
    todate: int = Field(description="Window end, epoch seconds")
    site: str = SEARCH_SITE

    @classmethod
    def for_window(
        cls,
        intitle: str,
        tagged: str | None,
        now: datetime,
        site: str = SEARCH_SITE,
    ) -> "SearchParameters":
        """Build parameters covering the trailing date window ending at now.

        Args:
            intitle: Title substring to match.
            tagged: Optional tag; empty string is treated as no tag.
            now: End of the window.
            site: Stack Exchange site identifier.

        Returns:
            SearchParameters instance.
        """
        start = now - timedelta(days=DATE_WINDOW_DAYS)
        return cls(
            intitle=intitle,
            tagged=tagged or None,
            fromdate=int(start.timestamp()),
            todate=int(now.timestamp()),
            site=site,
        )

    def to_query(self, page: int) -> dict[str, str]:
        """Build the query parameters for one page request.

        Args:
            page: 1-based page number.

        Returns:
            New query mapping.
        """
        query = {
            PARAM_ORDER: SEARCH_ORDER,
            PARAM_SORT: SEARCH_SORT,
            PARAM_SITE: self.site,
            PARAM_INTITLE: self.intitle,
        }
        if self.tagged:
            query[PARAM_TAGGED] = self.tagged
        query[PARAM_PAGESIZE] = str(PAGE_SIZE)
        query[PARAM_FROMDATE] = str(self.fromdate)
        query[PARAM_TODATE] = str(self.todate)
        query[PARAM_PAGE] = str(page)
        return query
