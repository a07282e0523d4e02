"""
Structured error types for the Coinbase Advanced Trade client.

Every failure the client can produce below the facade is raised as a
``CoinbaseError`` subclass. Each error carries a category, an explicit
retryable flag, structured context (URL, HTTP status, operation) and the
chained underlying exception, so the resilience layer can make retry and
circuit-breaker decisions from the type alone and the facade can turn any of
them into a user-facing message.

Manifesto:
    - **Typed taxonomy:** Credential, transport, circuit and application
      failures are different types, not different strings
    - **Explicit retry semantics:** Only rate limiting (429) and connectivity
      failures are retryable
    - **Rich context:** Errors carry metadata for structured logging
    - **Error chaining:** The original httpx/cryptography exception is kept as
      ``cause`` and ``__cause__``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                        CoinbaseError                             │
        │  (category, retryable, retry_after, context, cause)              │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  CredentialError       TransportError        CircuitOpenError    │
        │  (AUTH)                (NETWORK / HTTP)      (CIRCUIT)           │
        │       │                    │                                     │
        │  InvalidCredential    HttpStatusError       ApplicationError     │
        │                       │      │              (APPLICATION)        │
        │                       │  RateLimitError          │               │
        │                       │  (429, retryable)   OrderRejectedError   │
        │                  ConnectivityError                               │
        │                  (retryable)                                     │
        │                                                                  │
        │  ConfigError ── MissingConfigError                               │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = HttpStatusError(503, "upstream unavailable")
    >>> error.status_code
    503
    >>> error.retryable
    False
    >>> RateLimitError("slow down").retryable
    True
    >>> is_transport_failure(ConnectivityError("DNS failure"))
    True

Tags:
    error-handling, exception-hierarchy, retry-logic, circuit-breaker,
    coinbase, observability
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories for classification, routing and logging.

    Attributes:
        NETWORK: No response received (DNS, connect, timeout)
        HTTP: Exchange answered with a non-2xx status
        RATE_LIMIT: Exchange answered 429
        AUTH: Credentials missing or malformed
        CONFIG: Missing or invalid settings
        CIRCUIT: Circuit breaker rejected the call
        APPLICATION: Exchange accepted the request but rejected the operation
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    NETWORK = "NETWORK"
    HTTP = "HTTP"
    RATE_LIMIT = "RATE_LIMIT"
    AUTH = "AUTH"
    CONFIG = "CONFIG"
    CIRCUIT = "CIRCUIT"
    APPLICATION = "APPLICATION"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only non-None fields are serialized by ``to_dict()``. Never store tokens or
    key material here; the context ends up in log lines.

    Attributes:
        operation: Human-readable operation label ("placing order")
        method: HTTP method of the failed request
        url: URL that was being accessed
        http_status: HTTP status code if a response was received
        metadata: Additional key-value pairs
    """

    operation: str | None = None
    method: str | None = None
    url: str | None = None
    http_status: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "method", "url", "http_status"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CoinbaseError(Exception):
    """
    Base exception for all client errors.

    Subclasses set ``default_category`` and ``default_retryable``; callers can
    override either per instance.

    Examples:
        >>> error = CoinbaseError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(operation="retrieving accounts").context.operation
        'retrieving accounts'
    """

    # Default category for this error type
    default_category: ErrorCategory = ErrorCategory.INTERNAL

    # Default retryable setting
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        retry_after: int | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.retry_after = retry_after
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CoinbaseError:
        """
        Add context to this error (fluent API).

        Usage:
            raise HttpStatusError(404, body).with_context(
                method="GET",
                url="https://api.coinbase.com/api/v3/brokerage/accounts/x",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.retry_after is not None:
            result["retry_after"] = self.retry_after
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CREDENTIAL ERRORS (Never Retryable)
# =============================================================================


class CredentialError(CoinbaseError):
    """Credentials are missing, malformed or rejected. Never retried."""

    default_category = ErrorCategory.AUTH
    default_retryable = False


class InvalidCredentialError(CredentialError):
    """The key id or secret cannot be used to sign a request."""

    pass


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(CoinbaseError):
    """Configuration error. Never retryable - configuration must be fixed."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


# =============================================================================
# TRANSPORT ERRORS
# =============================================================================


class TransportError(CoinbaseError):
    """
    A request did not produce a 2xx response.

    Every TransportError is observed by the circuit breaker. Only the
    subclasses flagged retryable (429 and connectivity) are retried.
    """

    default_category = ErrorCategory.NETWORK
    default_retryable = False


class HttpStatusError(TransportError):
    """The exchange answered with a non-2xx status code."""

    default_category = ErrorCategory.HTTP

    def __init__(self, status_code: int, body: str = "", message: str | None = None, **kwargs: Any):
        self.status_code = status_code
        self.body = body
        kwargs.setdefault("context", ErrorContext(http_status=status_code))
        super().__init__(
            message or f"Coinbase API request failed: {status_code} - {body}",
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["status_code"] = self.status_code
        return result


class RateLimitError(HttpStatusError):
    """The exchange answered 429 Too Many Requests."""

    default_category = ErrorCategory.RATE_LIMIT
    default_retryable = True

    def __init__(self, body: str = "", *, retry_after: int | None = None, **kwargs: Any):
        super().__init__(429, body, retry_after=retry_after, **kwargs)


class ConnectivityError(TransportError):
    """No response was received at all (DNS, connection refused, timeout)."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


def http_status_error(status_code: int, body: str = "") -> HttpStatusError:
    """Build the HttpStatusError subclass matching ``status_code``."""
    if status_code == 429:
        return RateLimitError(body)
    return HttpStatusError(status_code, body)


# =============================================================================
# CIRCUIT / APPLICATION ERRORS
# =============================================================================


class CircuitOpenError(CoinbaseError):
    """Raised by the circuit breaker itself; the transport is never reached."""

    default_category = ErrorCategory.CIRCUIT
    default_retryable = False

    def __init__(self, message: str = "Circuit breaker is open", **kwargs: Any):
        super().__init__(message, **kwargs)


class ApplicationError(CoinbaseError):
    """
    A structurally successful response whose payload rejects the operation.

    Never retried and never counted by the circuit breaker.
    """

    default_category = ErrorCategory.APPLICATION
    default_retryable = False


class OrderRejectedError(ApplicationError):
    """Order placement or position close came back with ``success: false``."""

    def __init__(self, reason: str, *, payload: dict[str, Any] | None = None, **kwargs: Any):
        self.reason = reason
        self.payload = payload or {}
        super().__init__(reason, **kwargs)


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_retryable(error: BaseException) -> bool:
    """Check if an error belongs to the retry trigger set (429, connectivity)."""
    if isinstance(error, CoinbaseError):
        return error.retryable
    return False


def is_transport_failure(error: BaseException) -> bool:
    """Check if an error is counted by the circuit breaker."""
    return isinstance(error, TransportError)


def get_status_code(error: BaseException) -> int | None:
    """HTTP status carried by an error, if a response was received."""
    if isinstance(error, HttpStatusError):
        return error.status_code
    return None


__all__ = [
    # Category enum
    "ErrorCategory",
    # Context
    "ErrorContext",
    # Base
    "CoinbaseError",
    # Credentials
    "CredentialError",
    "InvalidCredentialError",
    # Config
    "ConfigError",
    "MissingConfigError",
    # Transport
    "TransportError",
    "HttpStatusError",
    "RateLimitError",
    "ConnectivityError",
    "http_status_error",
    # Circuit / application
    "CircuitOpenError",
    "ApplicationError",
    "OrderRejectedError",
    # Utilities
    "is_retryable",
    "is_transport_failure",
    "get_status_code",
]
