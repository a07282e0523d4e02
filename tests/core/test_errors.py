"""Tests for ``coinbase_advanced.core.errors``."""

from __future__ import annotations

import httpx

from coinbase_advanced.core.errors import (
    ApplicationError,
    CircuitOpenError,
    CoinbaseError,
    ConnectivityError,
    CredentialError,
    ErrorCategory,
    HttpStatusError,
    InvalidCredentialError,
    MissingConfigError,
    OrderRejectedError,
    RateLimitError,
    TransportError,
    get_status_code,
    http_status_error,
    is_retryable,
    is_transport_failure,
)


class TestHierarchy:
    def test_transport_errors(self):
        assert issubclass(HttpStatusError, TransportError)
        assert issubclass(RateLimitError, HttpStatusError)
        assert issubclass(ConnectivityError, TransportError)

    def test_everything_is_a_coinbase_error(self):
        for cls in (CredentialError, TransportError, CircuitOpenError, ApplicationError, MissingConfigError):
            assert issubclass(cls, CoinbaseError)

    def test_order_rejection_is_application_error(self):
        error = OrderRejectedError("Insufficient funds", payload={"success": False})
        assert isinstance(error, ApplicationError)
        assert error.reason == "Insufficient funds"
        assert error.payload == {"success": False}
        assert error.category == ErrorCategory.APPLICATION


class TestHttpStatusError:
    def test_default_message_includes_status_and_body(self):
        error = HttpStatusError(500, '{"error":"INTERNAL"}')
        assert error.status_code == 500
        assert error.body == '{"error":"INTERNAL"}'
        assert str(error) == 'Coinbase API request failed: 500 - {"error":"INTERNAL"}'
        assert error.context.http_status == 500

    def test_rate_limit_is_429_and_retryable(self):
        error = RateLimitError("slow down")
        assert error.status_code == 429
        assert error.retryable is True
        assert error.category == ErrorCategory.RATE_LIMIT

    def test_factory_picks_subclass(self):
        assert type(http_status_error(429, "")) is RateLimitError
        assert type(http_status_error(503, "")) is HttpStatusError
        assert http_status_error(401, "nope").status_code == 401

    def test_to_dict(self):
        data = HttpStatusError(404, "missing").with_context(method="GET").to_dict()
        assert data["error_type"] == "HttpStatusError"
        assert data["status_code"] == 404
        assert data["context"] == {"method": "GET", "http_status": 404}


class TestPredicates:
    def test_retry_triggers(self):
        assert is_retryable(RateLimitError())
        assert is_retryable(ConnectivityError("timed out"))

    def test_non_retryable(self):
        assert not is_retryable(HttpStatusError(503))
        assert not is_retryable(HttpStatusError(401))
        assert not is_retryable(InvalidCredentialError("bad key"))
        assert not is_retryable(OrderRejectedError("rejected"))
        assert not is_retryable(ValueError("boom"))

    def test_transport_failures_trip_breaker(self):
        assert is_transport_failure(HttpStatusError(400))
        assert is_transport_failure(RateLimitError())
        assert is_transport_failure(ConnectivityError("refused"))
        assert not is_transport_failure(CredentialError("bad"))
        assert not is_transport_failure(OrderRejectedError("rejected"))
        assert not is_transport_failure(CircuitOpenError())

    def test_get_status_code(self):
        assert get_status_code(HttpStatusError(403)) == 403
        assert get_status_code(ConnectivityError("x")) is None
        assert get_status_code(RuntimeError()) is None


class TestContext:
    def test_with_context_known_and_extra_fields(self):
        error = CircuitOpenError().with_context(operation="retrieving accounts", circuit="coinbase")
        assert error.context.operation == "retrieving accounts"
        assert error.context.metadata == {"circuit": "coinbase"}

    def test_cause_is_chained(self):
        cause = httpx.ConnectError("refused")
        error = ConnectivityError("no response", cause=cause)
        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "refused"

    def test_missing_config_message(self):
        error = MissingConfigError("COINBASE_API_KEY")
        assert error.key == "COINBASE_API_KEY"
        assert "COINBASE_API_KEY" in str(error)
