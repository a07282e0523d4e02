"""
Tests for the logging module.

Tests verify:
- JSON lines carry event, level, logger and service fields
- DEBUG logs are suppressed at INFO level
- Level and format can come from CoinbaseSettings
- LogContext binds and unbinds contextvars
"""

import json
import logging

import pytest
import structlog

from coinbase_advanced.core.logging import (
    LogContext,
    bind_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    unbind_context,
)
from coinbase_advanced.core.settings import CoinbaseSettings


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    def test_json_output(self, caplog):
        caplog.set_level(logging.INFO)
        configure_logging(level="INFO", json_format=True, service="test-service")

        get_logger("tests.json").info("placing_order", product_id="BTC-USD")

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "placing_order"
        assert payload["product_id"] == "BTC-USD"
        assert payload["level"] == "info"
        assert payload["logger"] == "tests.json"
        assert payload["service.name"] == "test-service"
        assert "timestamp" in payload

    def test_debug_suppressed_at_info(self, caplog):
        caplog.set_level(logging.DEBUG)
        configure_logging(level="INFO", json_format=True)

        get_logger("tests.level").debug("coinbase_request_rejected")

        assert not [r for r in caplog.records if "coinbase_request_rejected" in r.getMessage()]

    def test_from_settings(self, caplog):
        caplog.set_level(logging.DEBUG)
        configure_logging_from_settings(CoinbaseSettings(log_level="DEBUG", log_format="json"))

        get_logger("tests.settings").debug("coinbase_request_signed", method="GET")

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "coinbase_request_signed"
        assert payload["level"] == "debug"

    def test_from_settings_level_filters(self, caplog):
        caplog.set_level(logging.DEBUG)
        configure_logging_from_settings(CoinbaseSettings(log_level="WARNING", log_format="json"))

        get_logger("tests.settings.level").info("retrieving_accounts")

        assert not [r for r in caplog.records if "retrieving_accounts" in r.getMessage()]


class TestContext:
    def test_bind_and_unbind(self):
        bind_context(client_order_id="c-1")
        assert structlog.contextvars.get_contextvars()["client_order_id"] == "c-1"

        unbind_context("client_order_id")
        assert "client_order_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_log_context_async(self):
        async with LogContext(product_id="BTC-USD"):
            assert structlog.contextvars.get_contextvars()["product_id"] == "BTC-USD"
        assert "product_id" not in structlog.contextvars.get_contextvars()
