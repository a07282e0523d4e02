"""Tests for CredentialValidator."""

from __future__ import annotations

import httpx
import pytest

from coinbase_advanced.core.errors import CredentialError, InvalidCredentialError
from coinbase_advanced.core.settings import CoinbaseSettings
from coinbase_advanced.validation import CredentialValidator, ValidationResult

KEY_ID = "organizations/test-org/apiKeys/test-key"


def _validator(handler, calls: list | None = None) -> CredentialValidator:
    def recording(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return handler(request)

    return CredentialValidator(CoinbaseSettings(_env_file=None), transport=httpx.MockTransport(recording))


class TestValidationResult:
    def test_success(self):
        result = ValidationResult.success()
        assert result.is_valid
        assert result.error_message is None

    def test_failure(self):
        error = ValueError("x")
        result = ValidationResult.failure("bad", error)
        assert not result.is_valid
        assert result.error is error


class TestCredentialValidator:
    @pytest.mark.asyncio
    async def test_valid(self, key_secret_pem):
        calls: list[httpx.Request] = []
        validator = _validator(lambda r: httpx.Response(200, json={"accounts": []}), calls)

        result = await validator.validate(KEY_ID, key_secret_pem)

        assert result.is_valid
        assert len(calls) == 1
        assert calls[0].url.path == "/api/v3/brokerage/accounts"
        assert calls[0].headers["Authorization"].startswith("Bearer ")

    @pytest.mark.asyncio
    async def test_empty_key(self, key_secret_pem):
        result = await _validator(lambda r: httpx.Response(200)).validate("", key_secret_pem)
        assert result.error_message == "API Key is required"

    @pytest.mark.asyncio
    async def test_empty_secret(self):
        result = await _validator(lambda r: httpx.Response(200)).validate(KEY_ID, None)
        assert result.error_message == "API Secret is required"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,message",
        [
            (401, "Invalid API credentials. Please check your API key and secret."),
            (403, "API credentials do not have sufficient permissions."),
            (429, "Rate limit exceeded during validation."),
            (500, "API validation failed: 500 - boom"),
        ],
    )
    async def test_status_messages(self, key_secret_pem, status, message):
        calls: list[httpx.Request] = []
        validator = _validator(lambda r: httpx.Response(status, text="boom"), calls)

        result = await validator.validate(KEY_ID, key_secret_pem)

        assert not result.is_valid
        assert result.error_message == message
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_malformed_secret(self):
        result = await _validator(lambda r: httpx.Response(200)).validate(KEY_ID, "not-a-key")

        assert result.error_message.startswith("Validation error:")
        assert isinstance(result.error, InvalidCredentialError)

    @pytest.mark.asyncio
    async def test_connectivity_failure(self, key_secret_pem):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = await _validator(handler).validate(KEY_ID, key_secret_pem)

        assert result.error_message.startswith("Validation error:")

    @pytest.mark.asyncio
    async def test_validate_or_raise(self, key_secret_pem):
        validator = _validator(lambda r: httpx.Response(401))

        with pytest.raises(CredentialError, match="Invalid API credentials"):
            await validator.validate_or_raise(KEY_ID, key_secret_pem)

    @pytest.mark.asyncio
    async def test_validate_or_raise_passes(self, key_secret_pem):
        await _validator(lambda r: httpx.Response(200, json={})).validate_or_raise(KEY_ID, key_secret_pem)
