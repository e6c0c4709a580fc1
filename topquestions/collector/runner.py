"""Rate-limited pagination loop with incremental top-K merge."""

import threading
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

import structlog

from topquestions.collector.constants import COMPONENT_COLLECTOR
from topquestions.collector.filter import UnansweredFilter
from topquestions.collector.metrics import RunMetrics
from topquestions.collector.rate_limiter import (
    RateLimiterProtocol,
    TokenBucketRateLimiter,
)
from topquestions.collector.state_machine import RunStateMachine
from topquestions.errors import TopQuestionsError
from topquestions.fetch.constants import FIRST_PAGE
from topquestions.fetch.models import Item, Page, SearchParameters
from topquestions.ranker.merger import TopKMerger


logger = structlog.get_logger()


class PageFetcherProtocol(Protocol):
    """Protocol for page fetchers.

    Allows dependency injection of the fetcher for testing.
    """

    def fetch(self, params: SearchParameters, page: int) -> Page:
        """Fetch one page of results."""
        ...


@dataclass
class RunResult:
    """Result of a completed run."""

    run_id: str
    items: tuple[Item, ...]
    pages_fetched: int
    started_at: datetime
    finished_at: datetime
    quota_remaining: int | None = None
    items_seen: int = 0
    items_kept: int = 0

    @property
    def duration_ms(self) -> float:
        """Get the wall-clock duration of the run in milliseconds."""
        return (self.finished_at - self.started_at).total_seconds() * 1000


class TopQuestionsRunner:
    """Drives acquire, fetch, filter, merge and decide until the last page.

    The loop is iterative and bounded only by the API's has_more flag.
    Any error aborts the run and is re-raised; no partial result is
    returned.
    """

    def __init__(
        self,
        fetcher: PageFetcherProtocol,
        rate_limiter: RateLimiterProtocol | None = None,
        item_filter: UnansweredFilter | None = None,
        merger: TopKMerger | None = None,
        run_id: str | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            fetcher: Page fetcher.
            rate_limiter: Optional rate limiter; a default bucket is created
                per runner when omitted.
            item_filter: Inclusion predicate.
            merger: Top-K merger.
            run_id: Run identifier for logging; generated when omitted.
        """
        self._fetcher = fetcher
        self._rate_limiter = rate_limiter or TokenBucketRateLimiter()
        self._filter = item_filter or UnansweredFilter()
        self._merger = merger or TopKMerger()
        self._run_id = run_id or str(uuid.uuid4())
        self._metrics = RunMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_COLLECTOR, run_id=self._run_id)

    @property
    def run_id(self) -> str:
        """Get the run identifier."""
        return self._run_id

    def run(
        self,
        params: SearchParameters,
        cancel_event: threading.Event | None = None,
    ) -> RunResult:
        """Execute the run to completion.

        Args:
            params: Search parameters for every page.
            cancel_event: Cooperative cancellation signal for rate-limit waits.

        Returns:
            RunResult holding the final top-K set.

        Raises:
            RateLimitCancelled: If a rate-limit wait was cancelled.
            TransportError: If a page request failed.
            DecodeError: If a page body could not be decoded.
        """
        started_at = datetime.now(UTC)
        state_machine = RunStateMachine(run_id=self._run_id)
        top_k: tuple[Item, ...] = ()
        page = FIRST_PAGE
        items_seen = 0
        items_kept = 0
        quota_remaining: int | None = None

        self._log.info(
            "run_started",
            intitle=params.intitle,
            tagged=params.tagged,
            fromdate=params.fromdate,
            todate=params.todate,
        )

        try:
            while True:
                state_machine.to_fetching()
                self._acquire(page, cancel_event)
                self._metrics.record_api_call()
                result = self._fetcher.fetch(params, page)

                state_machine.to_filtering()
                kept = self._filter.apply(result.items)

                state_machine.to_merging()
                top_k = self._merger.merge(top_k, kept)

                items_seen += len(result.items)
                items_kept += len(kept)
                quota_remaining = result.quota_remaining
                self._metrics.record_page(
                    len(result.items), len(kept), result.quota_remaining
                )

                state_machine.to_deciding()
                if not result.has_more:
                    break
                page += 1

        except TopQuestionsError as e:
            state_machine.to_failed()
            self._metrics.record_failure(e.error_class.value)
            self._log.warning(
                "run_failed",
                failed_page=page,
                error_class=e.error_class.value,
                error_message=e.message,
                details=e.details,
            )
            raise

        state_machine.to_done()
        self._metrics.record_success()
        finished_at = datetime.now(UTC)

        run_result = RunResult(
            run_id=self._run_id,
            items=top_k,
            pages_fetched=page,
            started_at=started_at,
            finished_at=finished_at,
            quota_remaining=quota_remaining,
            items_seen=items_seen,
            items_kept=items_kept,
        )

        self._log.info(
            "run_complete",
            pages_fetched=page,
            items_seen=items_seen,
            items_kept=items_kept,
            top_k=len(top_k),
            quota_remaining=quota_remaining,
            duration_ms=round(run_result.duration_ms, 2),
        )

        return run_result

    def _acquire(self, page: int, cancel_event: threading.Event | None) -> None:
        """Block on the rate limiter before a page request.

        Waits are read from the limiter's own counter.

        Args:
            page: Page about to be fetched.
            cancel_event: Cooperative cancellation signal.
        """
        waits_before = self._rate_limiter.rate_limited_count
        self._rate_limiter.acquire(cancel_event)
        waits = self._rate_limiter.rate_limited_count - waits_before

        if waits > 0:
            self._metrics.record_rate_limit_waits(waits)
            self._log.info("rate_limited", page=page, waits=waits)
