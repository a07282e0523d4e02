"""Retry policy with exponential backoff for Coinbase calls.

Only the retryable failure classes are retried: rate limiting (HTTP 429) and
connectivity failures where no response arrived. Every other error propagates
on the first attempt.

Example:
    >>> from coinbase_advanced.execution.retry import ExponentialBackoff
    >>>
    >>> strategy = ExponentialBackoff(max_retries=3, base_delay=2.0, jitter=False)
    >>> [strategy.next_delay(n) for n in range(3)]
    [2.0, 4.0, 8.0]
"""

import asyncio
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar

from ..core.errors import is_retryable

T = TypeVar("T")


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class RetryStrategy(ABC):
    """Abstract base for retry strategies."""

    @abstractmethod
    def next_delay(self, attempt: int) -> float:
        """Calculate delay before next retry attempt.

        Args:
            attempt: Zero-based retry number (0 = first retry)

        Returns:
            Delay in seconds before next attempt
        """
        ...

    @abstractmethod
    def should_retry(self, attempt: int, error: BaseException | None = None) -> bool:
        """Determine if another retry should be attempted.

        Args:
            attempt: Zero-based number of the retry about to be made
            error: The exception that caused the failure

        Returns:
            True if should retry, False otherwise
        """
        ...


@dataclass
class ExponentialBackoff(RetryStrategy):
    """Exponential backoff with optional jitter.

    Delay = min(base_delay * (multiplier ** attempt), max_delay) + jitter

    With the defaults the retries wait 2s, 4s and 8s, i.e. ``2 ** n`` seconds
    for the n-th retry.

    Attributes:
        max_retries: Maximum number of retries (attempts = max_retries + 1)
        base_delay: Delay before the first retry in seconds
        max_delay: Maximum delay cap in seconds
        multiplier: Exponential multiplier
        jitter: Add randomness to prevent thundering herd
        jitter_range: Range of jitter as fraction of delay (0.0-1.0)
        retry_on: Predicate selecting retryable errors (default: 429 / connectivity)
    """

    max_retries: int = 3
    base_delay: float = 2.0
    max_delay: float = 60.0
    multiplier: float = 2.0
    jitter: bool = False
    jitter_range: float = 0.25
    retry_on: Callable[[BaseException], bool] = is_retryable

    def next_delay(self, attempt: int) -> float:
        """Calculate exponential backoff delay."""
        delay = min(
            self.base_delay * (self.multiplier ** attempt),
            self.max_delay,
        )

        if self.jitter:
            jitter_amount = delay * self.jitter_range
            delay += random.uniform(-jitter_amount, jitter_amount)
            delay = max(0, delay)

        return delay

    def should_retry(self, attempt: int, error: BaseException | None = None) -> bool:
        """Check if retry should be attempted."""
        if attempt >= self.max_retries:
            return False

        if error is not None:
            return self.retry_on(error)

        return True


@dataclass
class RetryContext:
    """Retry state for one top-level call.

    A fresh context is built per call; nothing here is shared between calls.

    Example:
        >>> ctx = RetryContext(ExponentialBackoff(max_retries=3))
        >>> accounts = await ctx.run_async(api.list_accounts)
    """

    strategy: RetryStrategy
    on_retry: Callable[[int, BaseException, float], None] | None = None
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    attempt: int = field(default=0, init=False)
    last_error: BaseException | None = field(default=None, init=False)
    errors: list[tuple[int, BaseException, datetime]] = field(default_factory=list, init=False)

    @property
    def attempts(self) -> int:
        """Number of attempts made."""
        return self.attempt

    async def run_async(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Execute async function with retry logic.

        Args:
            func: Async function to execute
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            Result from successful function call

        Raises:
            Last exception if it is not retryable or all retries are exhausted.
            Cancellation is never retried.
        """
        while True:
            self.attempt += 1
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                self.last_error = e
                self.errors.append((self.attempt, e, utcnow()))

                retry_number = self.attempt - 1
                if not self.strategy.should_retry(retry_number, e):
                    raise

                delay = self.strategy.next_delay(retry_number)

                if self.on_retry:
                    self.on_retry(self.attempt, e, delay)

                await self.sleep(delay)


__all__ = [
    "RetryStrategy",
    "ExponentialBackoff",
    "RetryContext",
]
