"""Request pacing for remote API calls."""

import asyncio
import time


class RateLimiter:
    """Token bucket that spaces out requests to one remote instance.

    The limiter only delays calls. A request that fails is never replayed.
    """

    def __init__(self, requests_per_second: float = 10.0):
        """Initialize rate limiter.

        Args:
            requests_per_second: Maximum requests per second allowed
        """
        self.requests_per_second = requests_per_second
        self.tokens = requests_per_second
        self.last_update = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> float:
        now = time.monotonic()
        elapsed = now - self.last_update
        self.tokens = min(
            self.requests_per_second,
            self.tokens + elapsed * self.requests_per_second,
        )
        self.last_update = now

        if self.tokens >= 1:
            self.tokens -= 1
            return 0.0

        wait = (1 - self.tokens) / self.requests_per_second
        self.tokens = 0
        return wait

    async def acquire(self) -> None:
        """Wait until a request may be sent (async version)."""
        async with self._lock:
            wait = self._refill()
            if wait:
                await asyncio.sleep(wait)

    def acquire_sync(self) -> None:
        """Wait until a request may be sent (blocking version)."""
        wait = self._refill()
        if wait:
            time.sleep(wait)

    def time_until_next_request(self) -> float:
        """Get time until next request can be made.

        Returns:
            Seconds until next request is allowed
        """
        elapsed = time.monotonic() - self.last_update
        tokens = min(
            self.requests_per_second,
            self.tokens + elapsed * self.requests_per_second,
        )
        if tokens >= 1:
            return 0.0
        return (1 - tokens) / self.requests_per_second
