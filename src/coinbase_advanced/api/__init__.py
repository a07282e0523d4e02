"""REST endpoint binding and request/response models."""

from .endpoints import CoinbaseApi
from .models import (
    ClosePositionRequest,
    ErrorResponse,
    LimitLimitGtc,
    LimitLimitGtd,
    MarketMarketIoc,
    OrderConfiguration,
    OrderInformation,
    OrderRequest,
    OrderSearchRequest,
    SorLimitIoc,
    StopLimitStopLimitGtc,
    SuccessResponse,
)

__all__ = [
    "ClosePositionRequest",
    "CoinbaseApi",
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
