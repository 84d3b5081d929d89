"""RetryPolicy: attempt cap with optional exponential backoff."""

from __future__ import annotations

import asyncio
import random


class RetryPolicy:
    """Bounded retry shared by the stream and HTTP pushers."""

    def __init__(
        self,
        *,
        max_attempts: int = 5,
        base_delay: float = 0.0,
        max_delay: float = 60.0,
        jitter: bool = False,
    ) -> None:
        """Configure retry behavior.

        Args:
            max_attempts: Maximum number of attempts per unit of work (including first).
            base_delay: Delay in seconds before the first retry; 0 retries immediately.
            max_delay: Cap on delay in seconds.
            jitter: If True, scale each delay by a random factor in [0.5, 1.5].
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if base_delay < 0 or max_delay < 0:
            raise ValueError("base_delay and max_delay must be >= 0")
        if base_delay > max_delay:
            raise ValueError("base_delay must be <= max_delay")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter

    def should_retry(self, attempt: int) -> bool:
        """Return True if another attempt is allowed after ``attempt`` failures."""
        return 1 <= attempt < self.max_attempts

    def delay_for_attempt(self, attempt: int) -> float:
        """Return the delay in seconds after the given 1-based failed attempt."""
        if attempt < 1 or self.base_delay == 0:
            return 0.0
        delay = min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay = delay * (0.5 + random.random())  # noqa: S311
        return float(delay)

    async def wait_before_retry(self, attempt: int, minimum: float | None = None) -> None:
        """Sleep before the next attempt; ``minimum`` honours a server Retry-After."""
        delay = self.delay_for_attempt(attempt)
        if minimum is not None:
            delay = max(delay, minimum)
        if delay > 0:
            await asyncio.sleep(delay)
