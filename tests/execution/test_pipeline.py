"""Tests for ResiliencePipeline (breaker outside, retry inside)."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from coinbase_advanced.core.errors import CircuitOpenError, HttpStatusError, RateLimitError
from coinbase_advanced.core.settings import CoinbaseSettings
from coinbase_advanced.execution.circuit_breaker import CircuitState
from coinbase_advanced.execution.pipeline import ResiliencePipeline


class TestResiliencePipeline:
    @pytest.mark.asyncio
    async def test_exhausted_retries_count_once(self, pipeline, no_sleep):
        func = AsyncMock(side_effect=RateLimitError())

        with pytest.raises(RateLimitError):
            await pipeline.execute(func)

        assert func.await_count == 4
        assert no_sleep.await_count == 3
        assert pipeline.breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_retried_success_counts_as_success(self, pipeline):
        func = AsyncMock(side_effect=[RateLimitError(), "ok"])
        assert await pipeline.execute(func) == "ok"
        assert pipeline.breaker.failure_count == 0

    @pytest.mark.asyncio
    async def test_open_breaker_skips_retry_and_call(self, pipeline, no_sleep):
        for _ in range(5):
            with pytest.raises(HttpStatusError):
                await pipeline.execute(AsyncMock(side_effect=HttpStatusError(500)))
        assert pipeline.state == CircuitState.OPEN

        func = AsyncMock()
        with pytest.raises(CircuitOpenError):
            await pipeline.execute(func)

        func.assert_not_awaited()
        no_sleep.assert_not_awaited()

    def test_from_settings(self):
        settings = CoinbaseSettings(
            max_retries=1,
            retry_base_delay=0.5,
            circuit_failure_threshold=2,
            circuit_open_seconds=10,
        )
        pipeline = ResiliencePipeline.from_settings(settings)

        assert pipeline.retry_strategy.max_retries == 1
        assert pipeline.retry_strategy.base_delay == 0.5
        assert pipeline.breaker.failure_threshold == 2
        assert pipeline.breaker.recovery_timeout == 10

    def test_pipelines_do_not_share_breakers(self):
        assert ResiliencePipeline().breaker is not ResiliencePipeline().breaker
