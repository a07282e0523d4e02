"""
Credential validation against the live API.

``CredentialValidator.validate`` checks a key pair up front (for example
before saving user-supplied keys) by making one unretried ``GET /accounts``
call. The result is a ``ValidationResult``; ``validate_or_raise`` raises
``CredentialError`` instead.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from .core.errors import CredentialError, HttpStatusError
from .core.logging import get_logger
from .core.secrets import Credentials
from .core.settings import CoinbaseSettings
from .factory import create_authenticated_http_client

logger = get_logger(__name__)

_STATUS_MESSAGES = {
    401: "Invalid API credentials. Please check your API key and secret.",
    403: "API credentials do not have sufficient permissions.",
    429: "Rate limit exceeded during validation.",
}


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error_message: str | None = None
    error: BaseException | None = None

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(True)

    @classmethod
    def failure(cls, error_message: str, error: BaseException | None = None) -> ValidationResult:
        return cls(False, error_message, error)


class CredentialValidator:
    """Validates key pairs with a single authenticated request."""

    def __init__(
        self,
        settings: CoinbaseSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or CoinbaseSettings()
        self._transport = transport

    async def validate(self, api_key: str | None, api_secret: str | None) -> ValidationResult:
        if not api_key:
            return ValidationResult.failure("API Key is required")
        if not api_secret:
            return ValidationResult.failure("API Secret is required")

        try:
            credentials = Credentials.from_strings(api_key, api_secret)
            async with create_authenticated_http_client(
                self._settings.active_base_url,
                credentials,
                transport=self._transport,
                timeout=self._settings.timeout,
            ) as http:
                await http.get("/accounts")
        except HttpStatusError as e:
            logger.warning(
                "credential_validation_failed",
                status_code=e.status_code,
                body=e.body,
            )
            message = _STATUS_MESSAGES.get(
                e.status_code,
                f"API validation failed: {e.status_code} - {e.body}",
            )
            return ValidationResult.failure(message, e)
        except Exception as e:
            logger.error("credential_validation_error", error=str(e), exc_info=True)
            return ValidationResult.failure(f"Validation error: {e}", e)

        logger.info("credentials_validated")
        return ValidationResult.success()

    async def validate_or_raise(self, api_key: str | None, api_secret: str | None) -> None:
        """Raise ``CredentialError`` when the key pair is not usable."""
        result = await self.validate(api_key, api_secret)
        if not result.is_valid:
            raise CredentialError(
                f"Credential validation failed: {result.error_message}",
                cause=result.error if isinstance(result.error, Exception) else None,
            )


__all__ = ["CredentialValidator", "ValidationResult"]
