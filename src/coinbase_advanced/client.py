"""
Coinbase Advanced Trade client facade.

``CoinbaseAdvancedTradeClient`` is the one public surface for trading code.
Every operation runs through the client's ``ResiliencePipeline`` and returns
an ``ApiResponse``: callers branch on ``is_success`` instead of catching
exceptions.

Manifesto:
    - **Envelopes, not exceptions:** Every ``Exception`` below the facade is
      converted into ``ApiResponse.failure`` with a user-facing message
    - **Cancellation is not a failure:** ``asyncio.CancelledError`` propagates
      untouched and never becomes an envelope
    - **Application rejections are data:** ``success: false`` on order
      placement is a failed envelope, never retried, never counted by the
      circuit breaker
    - **One breaker per client:** The pipeline (and its breaker) belongs to
      this instance only

Architecture:
    ::

        client.place_order(order)
          │  log intent
          ▼
        pipeline.execute(api.place_order, order)   breaker ∘ retry
          │  log coinbase_operation_succeeded / coinbase_operation_failed
          ├── OrderInformation(success=True)   → ApiResponse.success
          ├── OrderInformation(success=False)  → ApiResponse.failure("Failed to place order: ...")
          └── Exception                        → classify_error → ApiResponse.failure

Examples:
    >>> async with create_client() as client:
    ...     accounts = await client.list_accounts()
    ...     if accounts.is_success:
    ...         print(accounts.data["accounts"])
    ...     else:
    ...         print(accounts.error_message)

Tags:
    coinbase, facade, api-response, circuit-breaker, retry, asyncio
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Awaitable, Callable, Sequence, TypeVar

from .api.endpoints import CoinbaseApi, JsonObject
from .api.models import ClosePositionRequest, OrderInformation, OrderRequest, OrderSearchRequest
from .core.enums import CandleGranularity
from .core.errors import CircuitOpenError, OrderRejectedError, get_status_code
from .core.logging import get_logger
from .core.result import ApiResponse
from .execution.pipeline import ResiliencePipeline

T = TypeVar("T")

logger = get_logger(__name__)

UNAVAILABLE_MESSAGE = "Coinbase API is currently unavailable. Please try again later."

_STATUS_MESSAGES: dict[int, str] = {
    401: "Authentication failed. Please check your API credentials.",
    403: "Your API key does not have permission for this operation.",
    404: "The requested resource was not found.",
    429: "Rate limit exceeded. Please try again later.",
    502: UNAVAILABLE_MESSAGE,
    503: UNAVAILABLE_MESSAGE,
    504: UNAVAILABLE_MESSAGE,
}


def classify_error(error: BaseException, operation: str) -> str:
    """User-facing message for a failure that occurred while ``operation``.

    Examples:
        >>> classify_error(HttpStatusError(401, ""), "retrieving accounts")
        'Authentication failed. Please check your API credentials.'
        >>> classify_error(ValueError("boom"), "retrieving accounts")
        'An unexpected error occurred when retrieving accounts: boom'
    """
    if isinstance(error, CircuitOpenError):
        return UNAVAILABLE_MESSAGE

    status = get_status_code(error)
    if status is not None:
        return _STATUS_MESSAGES.get(status, f"Error when {operation}: {error}")

    return f"An unexpected error occurred when {operation}: {error}"


class CoinbaseAdvancedTradeClient:
    """Typed, resilient facade over ``CoinbaseApi``.

    Use as an async context manager, or call ``aclose()`` when done.
    """

    def __init__(self, api: CoinbaseApi, pipeline: ResiliencePipeline | None = None):
        self._api = api
        self._pipeline = pipeline or ResiliencePipeline()

    @property
    def pipeline(self) -> ResiliencePipeline:
        return self._pipeline

    async def __aenter__(self) -> CoinbaseAdvancedTradeClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._api.aclose()

    async def _call(
        self,
        operation: str,
        func: Callable[..., Awaitable[T]],
        *args: Any,
    ) -> ApiResponse[T]:
        # Exception, not BaseException: cancellation must propagate.
        try:
            data = await self._pipeline.execute(func, *args)
        except Exception as e:
            message = classify_error(e, operation)
            logger.error(
                "coinbase_operation_failed",
                operation=operation,
                error_type=type(e).__name__,
                error_message=message,
                exc_info=True,
            )
            return ApiResponse.failure(message, e)
        logger.info("coinbase_operation_succeeded", operation=operation)
        return ApiResponse.success(data)

    def _order_outcome(
        self,
        result: ApiResponse[OrderInformation],
        failure_prefix: str,
        product_id: str,
    ) -> ApiResponse[OrderInformation]:
        if result.is_failure:
            return result

        info = result.data
        if info.success:
            logger.info("order_accepted", product_id=product_id, order_id=info.order_id)
            return result

        reason = info.failure_reason()
        logger.warning("order_rejected", product_id=product_id, reason=reason)
        return ApiResponse.failure(
            f"{failure_prefix}: {reason}",
            OrderRejectedError(reason, payload=info.model_dump(mode="json")),
        )

    # ── Orders ───────────────────────────────────────────────────────

    async def place_order(self, order: OrderRequest) -> ApiResponse[OrderInformation]:
        """Place an order; ``success: false`` payloads become failed envelopes."""
        logger.info(
            "placing_order",
            product_id=order.product_id,
            side=order.side,
            client_order_id=order.client_order_id,
        )
        result = await self._call("placing order", self._api.place_order, order)
        return self._order_outcome(result, "Failed to place order", order.product_id)

    async def close_position(self, request: ClosePositionRequest) -> ApiResponse[OrderInformation]:
        logger.info("closing_position", product_id=request.product_id, size=request.size)
        result = await self._call("closing position", self._api.close_position, request)
        return self._order_outcome(result, "Failed to close position", request.product_id)

    async def get_orders(self, search: OrderSearchRequest | None = None) -> ApiResponse[JsonObject]:
        logger.info("retrieving_orders", filtered=search is not None)
        return await self._call("retrieving orders", self._api.get_orders, search)

    async def get_order(self, order_id: str) -> ApiResponse[JsonObject]:
        logger.info("retrieving_order", order_id=order_id)
        return await self._call(f"retrieving order {order_id}", self._api.get_order, order_id)

    # ── Products ─────────────────────────────────────────────────────

    async def list_products(self) -> ApiResponse[JsonObject]:
        logger.info("retrieving_products")
        return await self._call("retrieving products", self._api.list_products)

    async def get_product(self, product_id: str) -> ApiResponse[JsonObject]:
        logger.info("retrieving_product", product_id=product_id)
        return await self._call(f"retrieving product {product_id}", self._api.get_product, product_id)

    async def get_product_candles(
        self,
        product_id: str,
        start: int | datetime,
        end: int | datetime,
        granularity: CandleGranularity | str,
    ) -> ApiResponse[JsonObject]:
        logger.info(
            "retrieving_product_candles",
            product_id=product_id,
            start=str(start),
            end=str(end),
            granularity=str(granularity),
        )
        return await self._call(
            f"retrieving historical rates for {product_id}",
            self._api.get_product_candles,
            product_id,
            start,
            end,
            granularity,
        )

    async def get_best_bid_ask(
        self, product_ids: Sequence[str] | None = None
    ) -> ApiResponse[JsonObject]:
        logger.info("retrieving_best_bid_ask", product_ids=list(product_ids or ()))
        return await self._call(
            "retrieving best bid/ask prices", self._api.get_best_bid_ask, product_ids
        )

    # ── Accounts ─────────────────────────────────────────────────────

    async def list_accounts(self) -> ApiResponse[JsonObject]:
        logger.info("retrieving_accounts")
        return await self._call("retrieving accounts", self._api.list_accounts)

    async def get_account(self, account_id: str) -> ApiResponse[JsonObject]:
        logger.info("retrieving_account", account_id=account_id)
        return await self._call(f"retrieving account {account_id}", self._api.get_account, account_id)

    # ── Portfolios ───────────────────────────────────────────────────

    async def get_portfolios(self) -> ApiResponse[JsonObject]:
        logger.info("retrieving_portfolios")
        return await self._call("retrieving portfolios", self._api.get_portfolios)

    async def get_portfolio_breakdown(self, portfolio_uuid: str) -> ApiResponse[JsonObject]:
        logger.info("retrieving_portfolio_breakdown", portfolio_uuid=portfolio_uuid)
        return await self._call(
            f"retrieving portfolio breakdown for {portfolio_uuid}",
            self._api.get_portfolio_breakdown,
            portfolio_uuid,
        )


__all__ = [
    "CoinbaseAdvancedTradeClient",
    "UNAVAILABLE_MESSAGE",
    "classify_error",
]
