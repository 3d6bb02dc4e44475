"""
Client-side pacing driven by GitHub's ``x-ratelimit-*`` response headers.
"""

import asyncio
import random
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from .logger import logger


EXHAUSTION_THRESHOLD = 10


@dataclass
class RateLimitInfo:
    """Last known state of the primary rate limit."""

    limit: int = 5000
    remaining: int = 5000
    used: int = 0
    reset_time: Optional[datetime] = None

    @property
    def is_exhausted(self) -> bool:
        return self.remaining <= EXHAUSTION_THRESHOLD

    @property
    def reset_in_seconds(self) -> float:
        if not self.reset_time:
            return 0.0
        return max(0.0, (self.reset_time - datetime.now()).total_seconds())


class RateLimiter:
    """
    Paces outgoing requests.

    ``acquire()`` blocks until the primary limit resets when it is nearly
    exhausted, and otherwise keeps at least ``default_delay`` seconds
    between consecutive requests. With ``adaptive`` the spacing grows with
    the number of consecutive near-exhausted responses.
    """

    def __init__(
        self,
        default_delay: float = 0.1,
        max_delay: float = 60.0,
        adaptive: bool = True,
    ):
        self.default_delay = default_delay
        self.max_delay = max_delay
        self.adaptive = adaptive
        self.rate_limit_info = RateLimitInfo()
        self._last_request = 0.0
        self._consecutive_limits = 0
        self._lock = asyncio.Lock()

    async def update_rate_limit_info(self, headers: Mapping[str, str]) -> None:
        """Refresh the limit state from response headers."""

        async with self._lock:
            info = self.rate_limit_info
            if "x-ratelimit-limit" in headers:
                info.limit = int(headers["x-ratelimit-limit"])
            if "x-ratelimit-remaining" in headers:
                info.remaining = int(headers["x-ratelimit-remaining"])
            if "x-ratelimit-used" in headers:
                info.used = int(headers["x-ratelimit-used"])
            if "x-ratelimit-reset" in headers:
                info.reset_time = datetime.fromtimestamp(int(headers["x-ratelimit-reset"]))

            if info.is_exhausted:
                self._consecutive_limits += 1
            else:
                self._consecutive_limits = 0

    def _calculate_delay(self) -> float:
        delay = self.default_delay
        if self.adaptive and self._consecutive_limits:
            delay *= 2 ** self._consecutive_limits
            delay *= random.uniform(0.9, 1.1)
        return min(delay, self.max_delay)

    async def acquire(self) -> None:
        """
        Wait until the next request may be sent.

        Callers are served one at a time so concurrent requests keep the
        configured spacing between them.
        """
        async with self._lock:
            if self.rate_limit_info.is_exhausted:
                wait = min(self.rate_limit_info.reset_in_seconds, self.max_delay)
                if wait > 0:
                    logger.warning(f"Rate limit nearly exhausted, waiting {wait:.1f}s for reset")
                    await asyncio.sleep(wait)

            elapsed = time.time() - self._last_request
            delay = self._calculate_delay() - elapsed
            if delay > 0:
                await asyncio.sleep(delay)

            self._last_request = time.time()


__all__ = [
    "RateLimitInfo",
    "RateLimiter",
]
