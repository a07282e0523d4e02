"""Coinbase client core -- errors, result envelope, settings, logging, secrets.

Architecture::

    errors.py      Typed error hierarchy (CoinbaseError, TransportError, ...)
    result.py      ApiResponse[T] uniform envelope
    settings.py    CoinbaseSettings (pydantic-settings, COINBASE_ prefix)
    logging.py     structlog configuration (direct or from settings) + get_logger
    secrets.py     Credentials + SecretValue redaction
    enums.py       Wire-string enums (OrderSide, CandleGranularity, ...)
"""

from .errors import (
    ApplicationError,
    CircuitOpenError,
    CoinbaseError,
    ConfigError,
    ConnectivityError,
    CredentialError,
    ErrorCategory,
    ErrorContext,
    HttpStatusError,
    InvalidCredentialError,
    MissingConfigError,
    OrderRejectedError,
    RateLimitError,
    TransportError,
    get_status_code,
    is_retryable,
    is_transport_failure,
)
from .result import ApiResponse
from .secrets import Credentials, SecretValue
from .settings import CoinbaseSettings

__all__ = [
    "ApiResponse",
    "ApplicationError",
    "CircuitOpenError",
    "CoinbaseError",
    "CoinbaseSettings",
    "ConfigError",
    "ConnectivityError",
    "CredentialError",
    "Credentials",
    "ErrorCategory",
    "ErrorContext",
    "HttpStatusError",
    "InvalidCredentialError",
    "MissingConfigError",
    "OrderRejectedError",
    "RateLimitError",
    "SecretValue",
    "TransportError",
    "get_status_code",
    "is_retryable",
    "is_transport_failure",
]
