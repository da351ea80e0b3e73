"""Token bucket rate limiter for outgoing API calls.

Each limiter bounds one class of operation (template creation, deletion) for
the lifetime of the process. Callers await ``acquire()`` before each send;
the limiter sleeps until a token is available.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass


@dataclass
class TokenBucket:
    """Token bucket state."""

    tokens: float
    last_updated: float


class RateLimiter:
    """Async token bucket shared by every caller of one operation class."""

    def __init__(
        self,
        interval_seconds: float,
        burst: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the limiter.

        Args:
            interval_seconds: Seconds between tokens. Zero disables limiting.
            burst: Maximum number of tokens held at once.
            clock: Monotonic clock, injectable for tests.
            sleep: Async sleep, injectable for tests.
        """
        if interval_seconds < 0:
            raise ValueError("interval_seconds must not be negative")

        self.interval_seconds = interval_seconds
        self.capacity = max(1.0, burst)
        self._clock = clock
        self._sleep = sleep
        self._bucket = TokenBucket(tokens=self.capacity, last_updated=clock())
        self._lock = asyncio.Lock()

    def _refill(self, now: float) -> None:
        elapsed = now - self._bucket.last_updated
        self._bucket.tokens = min(
            self.capacity, self._bucket.tokens + elapsed / self.interval_seconds
        )
        self._bucket.last_updated = now

    def try_consume(self) -> tuple[bool, float]:
        """Attempt to take a token without waiting.

        Returns:
            A tuple of (is_allowed, wait_seconds until the next token).
        """
        if self.interval_seconds == 0:
            return True, 0.0

        self._refill(self._clock())

        if self._bucket.tokens >= 1.0:
            self._bucket.tokens -= 1.0
            return True, 0.0

        return False, (1.0 - self._bucket.tokens) * self.interval_seconds

    async def acquire(self) -> None:
        """Wait until a token is available and take it."""
        async with self._lock:
            while True:
                allowed, wait_seconds = self.try_consume()
                if allowed:
                    return
                await self._sleep(wait_seconds)


@dataclass(frozen=True)
class RateLimits:
    """Process-scoped limiters, one per operation class.

    Version writes share the delete bucket.
    """

    create: RateLimiter
    delete: RateLimiter

    @classmethod
    def from_intervals(cls, create_seconds: float, delete_seconds: float) -> "RateLimits":
        return cls(create=RateLimiter(create_seconds), delete=RateLimiter(delete_seconds))

    @classmethod
    def unlimited(cls) -> "RateLimits":
        return cls.from_intervals(0.0, 0.0)
