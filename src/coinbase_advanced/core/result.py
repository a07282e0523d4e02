"""
Uniform response envelope returned by every client operation.

``ApiResponse[T]`` is how callers learn whether a call worked: they check
``is_success`` rather than catching exceptions. Exactly one of ``data`` (on
success) or ``error_message`` (on failure) is populated; ``error`` keeps the
underlying exception for callers that want to inspect it.

Manifesto:
    - **No control-flow signals:** Callers branch on a boolean, never on try/except
    - **One envelope per call:** Built once, consumed, discarded
    - **Cause preserved:** The originating exception travels with the failure

Examples:
    >>> ok = ApiResponse.success({"accounts": []})
    >>> ok.is_success, ok.error_message
    (True, None)
    >>> failed = ApiResponse.failure("Rate limit exceeded. Please try again later.")
    >>> failed.unwrap_or({})
    {}
    >>> ApiResponse.success(2).map(lambda x: x * 10).data
    20

Tags:
    result-pattern, envelope, error-handling, coinbase
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class ApiResponse(Generic[T]):
    """
    Success-or-failure envelope for a single client call.

    Build instances through ``success()`` / ``failure()`` so the
    data-xor-error-message invariant always holds.
    """

    is_success: bool
    data: T | None = None
    error_message: str | None = None
    error: BaseException | None = None

    @classmethod
    def success(cls, data: T) -> ApiResponse[T]:
        return cls(is_success=True, data=data)

    @classmethod
    def failure(cls, error_message: str, error: BaseException | None = None) -> ApiResponse[T]:
        return cls(is_success=False, error_message=error_message, error=error)

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    def unwrap(self) -> T:
        """Get the data, raising the stored error (or ValueError) on failure."""
        if self.is_success:
            return self.data  # type: ignore[return-value]
        if self.error is not None:
            raise self.error
        raise ValueError(self.error_message)

    def unwrap_or(self, default: T) -> T:
        """Get the data or ``default`` on failure."""
        if self.is_success:
            return self.data  # type: ignore[return-value]
        return default

    def map(self, f: Callable[[T], U]) -> ApiResponse[U]:
        """Transform the data if successful; failures pass through unchanged."""
        if self.is_success:
            return ApiResponse.success(f(self.data))  # type: ignore[arg-type]
        return ApiResponse.failure(self.error_message or "", self.error)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        if self.is_success:
            return {"is_success": True, "data": self.data}
        result: dict[str, Any] = {"is_success": False, "error_message": self.error_message}
        if self.error is not None:
            result["error_type"] = type(self.error).__name__
        return result

    def __repr__(self) -> str:
        if self.is_success:
            return f"ApiResponse.success({self.data!r})"
        return f"ApiResponse.failure({self.error_message!r})"


__all__ = ["ApiResponse"]
