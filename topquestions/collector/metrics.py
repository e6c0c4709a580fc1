"""Metrics collection for top-questions runs."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock


# Module-level singleton state
_metrics_instance: "RunMetrics | None" = None
_metrics_lock: Lock = Lock()


@dataclass
class RunMetrics:
    """Thread-safe metrics for run operations.

    Tracks API calls, items seen and kept, rate limit waits, failures and
    the last reported API quota. Use get_instance() for singleton access.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    api_calls: int = 0
    pages_fetched: int = 0
    items_seen: int = 0
    items_kept: int = 0
    rate_limit_waits: int = 0
    runs_succeeded: int = 0
    failures_by_error_class: Counter[str] = field(default_factory=Counter)
    last_quota_remaining: int | None = None

    @classmethod
    def get_instance(cls) -> "RunMetrics":
        """Get the singleton instance (thread-safe).

        Returns:
            The shared RunMetrics instance.
        """
        global _metrics_instance  # noqa: PLW0603
        if _metrics_instance is None:
            with _metrics_lock:
                if _metrics_instance is None:
                    _metrics_instance = cls()
        return _metrics_instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        global _metrics_instance  # noqa: PLW0603
        with _metrics_lock:
            _metrics_instance = None

    def record_api_call(self) -> None:
        """Record an outbound page request."""
        with self._lock:
            self.api_calls += 1

    def record_page(
        self,
        items_seen: int,
        items_kept: int,
        quota_remaining: int | None,
    ) -> None:
        """Record a successfully decoded page.

        Args:
            items_seen: Items on the page.
            items_kept: Items that passed the filter.
            quota_remaining: Quota reported by the API, if any.
        """
        with self._lock:
            self.pages_fetched += 1
            self.items_seen += items_seen
            self.items_kept += items_kept
            if quota_remaining is not None:
                self.last_quota_remaining = quota_remaining

    def record_rate_limit_waits(self, count: int) -> None:
        """Record acquires that had to wait for a token.

        Args:
            count: Number of waits.
        """
        with self._lock:
            self.rate_limit_waits += count

    def record_success(self) -> None:
        """Record a completed run."""
        with self._lock:
            self.runs_succeeded += 1

    def record_failure(self, error_class: str) -> None:
        """Record a failed run.

        Args:
            error_class: Error classification value.
        """
        with self._lock:
            self.failures_by_error_class[error_class] += 1

    def to_prometheus_format(self) -> str:
        """Export metrics in Prometheus text format.

        Returns:
            Prometheus-formatted metrics string.
        """
        lines: list[str] = []

        with self._lock:
            lines.append("# HELP search_api_calls_total Total search API calls")
            lines.append("# TYPE search_api_calls_total counter")
            lines.append(f"search_api_calls_total {self.api_calls}")

            lines.append("# HELP search_items_seen_total Items returned by the API")
            lines.append("# TYPE search_items_seen_total counter")
            lines.append(f"search_items_seen_total {self.items_seen}")

            lines.append("# HELP search_items_kept_total Items passing the filter")
            lines.append("# TYPE search_items_kept_total counter")
            lines.append(f"search_items_kept_total {self.items_kept}")

            lines.append(
                "# HELP search_rate_limit_waits_total Acquires that waited for a token"
            )
            lines.append("# TYPE search_rate_limit_waits_total counter")
            lines.append(f"search_rate_limit_waits_total {self.rate_limit_waits}")

            lines.append("# HELP search_run_failures_total Failed runs by error class")
            lines.append("# TYPE search_run_failures_total counter")
            for error_class, count in sorted(self.failures_by_error_class.items()):
                lines.append(
                    f'search_run_failures_total{{error_class="{error_class}"}} {count}'
                )

        return "\n".join(lines)

    def to_dict(self) -> dict[str, object]:
        """Export metrics as dictionary.

        Returns:
            Dictionary representation of all metrics.
        """
        with self._lock:
            return {
                "api_calls": self.api_calls,
                "pages_fetched": self.pages_fetched,
                "items_seen": self.items_seen,
                "items_kept": self.items_kept,
                "rate_limit_waits": self.rate_limit_waits,
                "runs_succeeded": self.runs_succeeded,
                "failures_by_error_class": dict(self.failures_by_error_class),
                "last_quota_remaining": self.last_quota_remaining,
            }
