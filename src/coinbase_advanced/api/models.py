"""
Request and order-response models for the Advanced Trade API.

Only the fields the client reads or sends are declared. Every model allows
extra fields, so payload keys added by the exchange survive a round trip
instead of failing validation.

Doc-Types:
    api-reference
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import MarginType, OrderSide, OrderStatus, ProductType, StopDirection


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, use_enum_values=True)

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the wire: enum values, ``None`` fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


# ── Order configuration ─────────────────────────────────────────────────


class MarketMarketIoc(_ApiModel):
    """Market order filled immediately at the best available price."""

    quote_size: str | None = None
    base_size: str | None = None


class SorLimitIoc(_ApiModel):
    """Smart-order-routed limit order, immediate-or-cancel."""

    base_size: str
    limit_price: str


class LimitLimitGtc(_ApiModel):
    """Limit order, good till cancelled."""

    base_size: str
    limit_price: str
    post_only: bool = False


class LimitLimitGtd(_ApiModel):
    """Limit order, good till ``end_time``."""

    base_size: str
    limit_price: str
    end_time: datetime
    post_only: bool = False


class StopLimitStopLimitGtc(_ApiModel):
    base_size: str
    limit_price: str
    stop_price: str
    stop_direction: StopDirection | None = None


class OrderConfiguration(_ApiModel):
    """Exactly one member is expected to be set."""

    market_market_ioc: MarketMarketIoc | None = None
    sor_limit_ioc: SorLimitIoc | None = None
    limit_limit_gtc: LimitLimitGtc | None = None
    limit_limit_gtd: LimitLimitGtd | None = None
    stop_limit_stop_limit_gtc: StopLimitStopLimitGtc | None = None


# ── Requests ────────────────────────────────────────────────────────────


class OrderRequest(_ApiModel):
    """Body of ``POST /orders``.

    ``client_order_id`` makes placement idempotent: re-sending the same id
    returns the existing order instead of creating a second one.
    """

    client_order_id: str
    product_id: str
    side: OrderSide
    order_configuration: OrderConfiguration
    leverage: str | None = None
    margin_type: MarginType | None = None
    preview_id: str | None = None


class ClosePositionRequest(_ApiModel):
    """Body of ``POST /orders/close_position``."""

    client_order_id: str
    product_id: str
    size: str | None = None


class OrderSearchRequest(_ApiModel):
    """Filters for ``GET /orders/historical/batch``; all optional."""

    order_ids: list[str] | None = None
    product_ids: list[str] | None = None
    product_type: ProductType | None = None
    order_status: list[OrderStatus] | None = None
    time_in_forces: list[str] | None = None
    order_types: list[str] | None = None
    order_side: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    order_placement_source: str | None = None
    contract_expiry_type: str | None = None
    asset_filters: list[str] | None = None
    limit: int | None = Field(default=None, ge=1)
    cursor: str | None = None
    sort_by: str | None = None

    def to_query_params(self) -> list[tuple[str, str]]:
        """Query pairs; list filters repeat the key once per value."""
        params: list[tuple[str, str]] = []
        for key, value in self.model_dump(mode="json", exclude_none=True).items():
            if isinstance(value, list):
                params.extend((key, str(item)) for item in value)
            elif isinstance(value, bool):
                params.append((key, "true" if value else "false"))
            else:
                params.append((key, str(value)))
        return params


# ── Order responses ─────────────────────────────────────────────────────


class SuccessResponse(_ApiModel):
    order_id: str
    product_id: str | None = None
    side: str | None = None
    client_order_id: str | None = None


class ErrorResponse(_ApiModel):
    error: str | None = None
    message: str | None = None
    error_details: str | None = None
    preview_failure_reason: str | None = None
    new_order_failure_reason: str | None = None


class OrderInformation(_ApiModel):
    """Response of order placement and position close."""

    success: bool
    success_response: SuccessResponse | None = None
    error_response: ErrorResponse | None = None
    order_configuration: OrderConfiguration | None = None

    @property
    def order_id(self) -> str | None:
        if self.success_response is None:
            return None
        return self.success_response.order_id

    def failure_reason(self) -> str:
        """Most specific human-readable reason for ``success: false``."""
        error = self.error_response
        if error is None:
            return "Unknown error"
        return (
            error.message
            or error.error_details
            or error.new_order_failure_reason
            or error.error
            or "Unknown error"
        )


__all__ = [
    "ClosePositionRequest",
    "ErrorResponse",
    "LimitLimitGtc",
    "LimitLimitGtd",
    "MarketMarketIoc",
    "OrderConfiguration",
    "OrderInformation",
    "OrderRequest",
    "OrderSearchRequest",
    "SorLimitIoc",
    "StopLimitStopLimitGtc",
    "SuccessResponse",
]
