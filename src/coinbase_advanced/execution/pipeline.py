"""Resilience pipeline: retry inside, circuit breaker outside.

::

    execute(func)
      │
      ▼
    CircuitBreaker.call_async        one outcome per top-level call
      │   OPEN  → CircuitOpenError (nothing below runs)
      ▼
    RetryContext.run_async           fresh per call
      │   429 / connectivity → sleep 2s, 4s, 8s and retry
      ▼
    func(*args, **kwargs)            typed API call → httpx → wire

One pipeline belongs to one client instance; its breaker is the only mutable
state shared between that client's concurrent calls.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

from ..core.logging import get_logger
from .circuit_breaker import CircuitBreaker, CircuitState
from .retry import ExponentialBackoff, RetryContext, RetryStrategy

if TYPE_CHECKING:
    from ..core.settings import CoinbaseSettings

T = TypeVar("T")

logger = get_logger(__name__)


def _log_retry(attempt: int, error: BaseException, delay: float) -> None:
    logger.warning(
        "retrying_coinbase_call",
        delay_seconds=delay,
        attempt=attempt,
        error=str(error),
        error_type=type(error).__name__,
    )


def _log_break(error: BaseException | None, open_seconds: float) -> None:
    logger.error(
        "circuit_breaker_opened",
        open_seconds=open_seconds,
        error=str(error) if error is not None else None,
    )


def _log_reset() -> None:
    logger.info("circuit_breaker_reset")


def _log_half_open() -> None:
    logger.info("circuit_breaker_half_open")


class ResiliencePipeline:
    """Retry policy wrapped in a circuit breaker."""

    def __init__(
        self,
        retry_strategy: RetryStrategy | None = None,
        breaker: CircuitBreaker | None = None,
        *,
        name: str = "coinbase",
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.retry_strategy = retry_strategy or ExponentialBackoff()
        self.breaker = breaker or CircuitBreaker(
            name=name,
            on_break=_log_break,
            on_reset=_log_reset,
            on_half_open=_log_half_open,
        )
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: CoinbaseSettings, **kwargs: Any) -> ResiliencePipeline:
        """Build the pipeline from the resilience fields of ``settings``."""
        retry_strategy = ExponentialBackoff(
            max_retries=settings.max_retries,
            base_delay=settings.retry_base_delay,
        )
        breaker = CircuitBreaker(
            name=kwargs.pop("name", "coinbase"),
            failure_threshold=settings.circuit_failure_threshold,
            recovery_timeout=settings.circuit_open_seconds,
            on_break=_log_break,
            on_reset=_log_reset,
            on_half_open=_log_half_open,
        )
        return cls(retry_strategy, breaker, **kwargs)

    @property
    def state(self) -> CircuitState:
        return self.breaker.state

    async def execute(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Run ``func`` through the breaker and the retry policy."""
        retry = RetryContext(
            strategy=self.retry_strategy,
            on_retry=_log_retry,
            sleep=self._sleep,
        )
        return await self.breaker.call_async(retry.run_async, func, *args, **kwargs)


__all__ = ["ResiliencePipeline"]
