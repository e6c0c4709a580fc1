"""Rate-limited collection loop for top search results."""

from topquestions.collector.filter import UnansweredFilter
from topquestions.collector.metrics import RunMetrics
from topquestions.collector.rate_limiter import (
    RateLimiterProtocol,
    TokenBucketRateLimiter,
)
from topquestions.collector.runner import (
    PageFetcherProtocol,
    RunResult,
    TopQuestionsRunner,
)
from topquestions.collector.state_machine import (
    RunState,
    RunStateMachine,
    RunStateTransitionError,
)


__all__ = [
    "PageFetcherProtocol",
    "RateLimiterProtocol",
    "RunMetrics",
    "RunResult",
    "RunState",
    "RunStateMachine",
    "RunStateTransitionError",
    "TokenBucketRateLimiter",
    "TopQuestionsRunner",
    "UnansweredFilter",
]
