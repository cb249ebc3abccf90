"""
Type definitions for luzia-python.

Provides:
- Response records for the REST endpoints (Pydantic models)
- RateLimitInfo parsed from response headers
- Request option records (RetryOptions, CandleInterval)
"""

from luzia_python.types.models import (
    ApiRecord,
    Bounds,
    Exchange,
    ExchangeListResponse,
    Market,
    MarketLimits,
    MarketListResponse,
    MarketPrecision,
    OHLCVCandle,
    OHLCVResponse,
    Ticker,
    TickerListResponse,
)
from luzia_python.types.options import CandleInterval, QueryValue, RetryOptions
from luzia_python.types.rate_limit import RateLimitInfo

__all__ = [
    "ApiRecord",
    "Bounds",
    "CandleInterval",
    "Exchange",
    "ExchangeListResponse",
    "Market",
    "MarketLimits",
    "MarketListResponse",
    "MarketPrecision",
    "OHLCVCandle",
    "OHLCVResponse",
    "QueryValue",
    "RateLimitInfo",
    "RetryOptions",
    "Ticker",
    "TickerListResponse",
]
