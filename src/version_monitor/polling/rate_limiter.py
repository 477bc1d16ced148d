"""
Rate limit gate for budgeted hosts.

The remote budget is queried immediately before every decision. Decisions for
one host are serialized so concurrent workers never act on the same stale
reading.
"""

import asyncio
from datetime import datetime

import structlog

from ..clients.base import RemoteHostClient

logger = structlog.get_logger(__name__)


class RateLimitState:
    """Rate limit state of one host at the time of a decision."""

    def __init__(
        self,
        remaining: int,
        limit: int,
        buffer: int,
        reset_time: datetime | None = None,
    ):
        self.remaining = remaining
        self.limit = limit
        self.buffer = buffer
        self.reset_time = reset_time

    @property
    def calls_left(self) -> int:
        return self.limit - (self.remaining - self.buffer)

    @property
    def exhausted(self) -> bool:
        return self.calls_left <= 0


class RateLimiter:
    """
    Decides whether a host may be polled right now.

    Fails closed: if the budget cannot be read the answer is no.
    """

    def __init__(self, host: str, client: RemoteHostClient, buffer: int = 0):
        """
        Initialize the rate limiter.

        Args:
            host: Host identifier, used for logging
            client: Client able to report the host's rate limit
            buffer: Safety buffer applied to the remaining call count
        """
        self.host = host
        self.client = client
        self.buffer = buffer
        self._lock = asyncio.Lock()
        self._last_state: RateLimitState | None = None

    @property
    def last_state(self) -> RateLimitState | None:
        return self._last_state

    async def should_proceed(self) -> bool:
        """
        Check whether remote calls are currently allowed.

        Returns:
            True if the host's budget allows another check
        """
        async with self._lock:
            try:
                snapshot = await self.client.fetch_rate_limit()
            except Exception as e:
                logger.warning(
                    "Rate limit probe failed, cancelling calls",
                    host=self.host,
                    error=str(e),
                )
                return False

            if snapshot is None:
                logger.warning(
                    "Could not get rate limit information, cancelling calls",
                    host=self.host,
                )
                return False

            state = RateLimitState(
                remaining=snapshot.remaining,
                limit=snapshot.limit,
                buffer=self.buffer,
                reset_time=snapshot.reset_time,
            )
            self._last_state = state

            logger.debug(
                "Rate limit status",
                host=self.host,
                remaining=state.remaining,
                limit=state.limit,
                calls_left=state.calls_left,
                reset_time=state.reset_time.isoformat() if state.reset_time else None,
            )

            if state.exhausted:
                logger.info(
                    "No calls remaining, checks paused until reset",
                    host=self.host,
                    reset_time=(
                        state.reset_time.isoformat() if state.reset_time else None
                    ),
                )
                return False

            return True
