"""
String constants of the Advanced Trade API as enums.

Values are the exact wire strings, so members can be passed anywhere the API
expects a plain string.

STDLIB ONLY - NO PYDANTIC.
"""

from enum import Enum


class OrderSide(str, Enum):
    """Side of the market an order is on."""

    BUY = "BUY"
    SELL = "SELL"


class OrderStatus(str, Enum):
    """Order lifecycle states reported by the exchange."""

    OPEN = "OPEN"
    FILLED = "FILLED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"
    PENDING = "PENDING"
    QUEUED = "QUEUED"
    UNKNOWN = "UNKNOWN_ORDER_STATUS"


class CandleGranularity(str, Enum):
    """Candlestick bucket sizes accepted by ``/products/{id}/candles``."""

    ONE_MINUTE = "ONE_MINUTE"
    FIVE_MINUTE = "FIVE_MINUTE"
    FIFTEEN_MINUTE = "FIFTEEN_MINUTE"
    THIRTY_MINUTE = "THIRTY_MINUTE"
    ONE_HOUR = "ONE_HOUR"
    TWO_HOUR = "TWO_HOUR"
    SIX_HOUR = "SIX_HOUR"
    ONE_DAY = "ONE_DAY"


class ProductType(str, Enum):
    """Product families."""

    SPOT = "SPOT"
    FUTURE = "FUTURE"
    UNKNOWN = "UNKNOWN_PRODUCT_TYPE"


class MarginType(str, Enum):
    CROSS = "CROSS"
    ISOLATED = "ISOLATED"


class StopDirection(str, Enum):
    STOP_UP = "STOP_DIRECTION_STOP_UP"
    STOP_DOWN = "STOP_DIRECTION_STOP_DOWN"


__all__ = [
    "OrderSide",
    "OrderStatus",
    "CandleGranularity",
    "ProductType",
    "MarginType",
    "StopDirection",
]
