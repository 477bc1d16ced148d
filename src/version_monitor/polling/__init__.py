"""
Polling system for Version Monitor.

This package contains the release reconciler, the rate limit gate and the
scheduler that drives periodic checks.
"""

from .metrics import PollingCycleMetrics, PollingMetricsCollector
from .rate_limiter import RateLimiter, RateLimitState
from .reconciler import diff
from .scheduler import PollingScheduler

__all__ = [
    "PollingScheduler",
    "PollingCycleMetrics",
    "PollingMetricsCollector",
    "RateLimiter",
    "RateLimitState",
    "diff",
]
