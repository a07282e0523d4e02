"""
coinbase_advanced -- resilient async client for the Coinbase Advanced Trade API.

Every request is signed with a short-lived ES256 token, every call runs
through a retry policy wrapped in a circuit breaker, and every operation
returns an ``ApiResponse`` envelope.

MODULE MAP
──────────
  core/        errors, ApiResponse, settings, logging, credentials, enums
  auth/        token signer + authenticating httpx transport
  execution/   retry, circuit breaker, resilience pipeline
  api/         CoinbaseApi endpoint binding + pydantic request models
  client.py    CoinbaseAdvancedTradeClient facade
  validation.py  CredentialValidator
  factory.py   create_client / create_authenticated_http_client

Quick start::

    from coinbase_advanced import create_client

    async with create_client() as client:       # reads COINBASE_* env vars
        products = await client.list_products()
"""

from .api import (
    ClosePositionRequest,
    CoinbaseApi,
    OrderConfiguration,
    OrderInformation,
    OrderRequest,
    OrderSearchRequest,
)
from .client import CoinbaseAdvancedTradeClient, classify_error
from .core import (
    ApiResponse,
    CircuitOpenError,
    CoinbaseError,
    CoinbaseSettings,
    ConnectivityError,
    CredentialError,
    Credentials,
    HttpStatusError,
    InvalidCredentialError,
    MissingConfigError,
    OrderRejectedError,
    RateLimitError,
    TransportError,
)
from .core.enums import (
    CandleGranularity,
    MarginType,
    OrderSide,
    OrderStatus,
    ProductType,
    StopDirection,
)
from .core.logging import configure_logging, configure_logging_from_settings, get_logger
from .execution import CircuitBreaker, CircuitState, ExponentialBackoff, ResiliencePipeline
from .factory import create_api, create_authenticated_http_client, create_client
from .validation import CredentialValidator, ValidationResult

__version__ = "0.1.0"

__all__ = [
    "ApiResponse",
    "CandleGranularity",
    "CircuitBreaker",
    "CircuitOpenError",
    "CircuitState",
    "ClosePositionRequest",
    "CoinbaseAdvancedTradeClient",
    "CoinbaseApi",
    "CoinbaseError",
    "CoinbaseSettings",
    "ConnectivityError",
    "CredentialError",
    "CredentialValidator",
    "Credentials",
    "ExponentialBackoff",
    "HttpStatusError",
    "InvalidCredentialError",
    "MarginType",
    "MissingConfigError",
    "OrderConfiguration",
    "OrderInformation",
    "OrderRejectedError",
    "OrderRequest",
    "OrderSearchRequest",
    "OrderSide",
    "OrderStatus",
    "ProductType",
    "RateLimitError",
    "ResiliencePipeline",
    "StopDirection",
    "TransportError",
    "ValidationResult",
    "classify_error",
    "configure_logging",
    "configure_logging_from_settings",
    "create_api",
    "create_authenticated_http_client",
    "create_client",
    "get_logger",
]
