"""
Retry with exponential backoff for transient transport failures.
"""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

import httpx

from .logger import logger


@dataclass
class RetryConfig:
    """Default retry parameters."""

    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    backoff_factor: float = 2.0
    retryable_errors: Tuple[Type[BaseException], ...] = field(
        default_factory=lambda: (httpx.TransportError,)
    )


class RetryManager:
    """
    Runs an async callable, retrying on a set of exception types.

    The delay before retry ``n`` (0-based) is
    ``base_delay * exponential_base ** n`` capped at ``max_delay``, with
    +/-20% jitter when enabled.
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
    ):
        defaults = RetryConfig()
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.retryable_errors = defaults.retryable_errors

    @classmethod
    def from_config(cls, config: RetryConfig, jitter: bool = True) -> "RetryManager":
        manager = cls(
            max_retries=config.max_retries,
            base_delay=config.initial_delay,
            max_delay=config.max_delay,
            exponential_base=config.backoff_factor,
            jitter=jitter,
        )
        manager.retryable_errors = config.retryable_errors
        return manager

    def _calculate_delay(self, attempt: int) -> float:
        delay = min(self.base_delay * (self.exponential_base ** attempt), self.max_delay)
        if self.jitter:
            delay *= random.uniform(0.8, 1.2)
        return delay

    async def execute(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        exceptions: Optional[Tuple[Type[BaseException], ...]] = None,
        max_retries: Optional[int] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Await ``func(*args, **kwargs)``, retrying on ``exceptions``.

        Args:
            func: Coroutine function to call
            exceptions: Exception types worth retrying (defaults to transport errors)
            max_retries: Per-call override of the manager's retry count

        Returns:
            Whatever ``func`` returns

        Raises:
            The last exception once every attempt failed, or any
            non-retryable exception immediately.
        """
        retryable = exceptions or self.retryable_errors
        retries = self.max_retries if max_retries is None else max_retries
        attempts = retries + 1

        for attempt in range(attempts):
            try:
                return await func(*args, **kwargs)
            except retryable as e:
                if attempt + 1 >= attempts:
                    logger.error(f"All {attempts} attempts failed, giving up: {e}")
                    raise

                delay = self._calculate_delay(attempt)
                logger.warning(
                    f"Attempt {attempt + 1} failed: {e}. Retrying in {delay:.2f}s"
                )
                await asyncio.sleep(delay)


__all__ = [
    "RetryConfig",
    "RetryManager",
]
