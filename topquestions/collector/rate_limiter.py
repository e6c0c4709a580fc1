"""Token-bucket rate limiter for search API calls."""

import threading
import time
from dataclasses import dataclass, field
from typing import Protocol

from topquestions.collector.constants import (
    DEFAULT_BUCKET_CAPACITY,
    DEFAULT_REFILL_PER_SECOND,
)
from topquestions.errors import RateLimitCancelled


class RateLimiterProtocol(Protocol):
    """Protocol for rate limiters.

    Allows dependency injection of rate limiter for testing.
    """

    def acquire(self, cancel_event: threading.Event | None = None) -> bool:
        """Acquire one token, blocking until available.

        Args:
            cancel_event: Event that aborts the wait when set.

        Returns:
            True once a token was acquired.

        Raises:
            RateLimitCancelled: If cancel_event was set before a token was taken.
        """
        ...

    @property
    def rate_limited_count(self) -> int:
        """Get the number of acquires that had to wait for a token."""
        ...


@dataclass
class TokenBucketRateLimiter:
    """Token bucket rate limiter for API call control.

    Up to bucket_capacity calls may proceed in a burst; afterwards tokens
    are replenished continuously at refill_per_second.

    Thread-safe; one instance may be shared across runs.

    Attributes:
        refill_per_second: Tokens added per second.
        bucket_capacity: Maximum tokens in the bucket (burst capacity).
    """

    refill_per_second: float = DEFAULT_REFILL_PER_SECOND
    bucket_capacity: float = DEFAULT_BUCKET_CAPACITY

    _tokens: float = field(init=False, default=0.0)
    _last_refill: float = field(init=False, default=0.0)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _rate_limited_count: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        """Initialize the rate limiter state."""
        if self.refill_per_second <= 0:
            msg = f"refill_per_second must be positive, got {self.refill_per_second}"
            raise ValueError(msg)
        if self.bucket_capacity < 1:
            msg = f"bucket_capacity must be at least 1, got {self.bucket_capacity}"
            raise ValueError(msg)
        self._tokens = self.bucket_capacity
        self._last_refill = time.monotonic()

    def _refill(self) -> None:
        """Refill tokens based on elapsed time.

        Must be called while holding the lock.
        """
        now = time.monotonic()
        elapsed = now - self._last_refill
        tokens_to_add = elapsed * self.refill_per_second
        self._tokens = min(self.bucket_capacity, self._tokens + tokens_to_add)
        self._last_refill = now

    def acquire(self, cancel_event: threading.Event | None = None) -> bool:
        """Acquire one token, blocking until available.

        Args:
            cancel_event: Event that aborts the wait when set.

        Returns:
            True once a token was acquired.

        Raises:
            RateLimitCancelled: If cancel_event was set before a token was taken.
        """
        waited = False
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise RateLimitCancelled

            with self._lock:
                self._refill()
                if self._tokens >= 1:
                    self._tokens -= 1
                    return True
                wait_time = (1 - self._tokens) / self.refill_per_second
                if not waited:
                    self._rate_limited_count += 1
                    waited = True

            # Release lock before sleeping
            if cancel_event is None:
                time.sleep(wait_time)
            elif cancel_event.wait(wait_time):
                raise RateLimitCancelled

    @property
    def rate_limited_count(self) -> int:
        """Get the number of acquires that had to wait for a token."""
        with self._lock:
            return self._rate_limited_count

    def get_available_tokens(self) -> float:
        """Get the current number of available tokens.

        Returns:
            Current token count.
        """
        with self._lock:
            self._refill()
            return self._tokens
