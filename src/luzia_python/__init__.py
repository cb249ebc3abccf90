"""Luzia 加密货币行情 API 的 Python 客户端。

luzia-python: Python client for the Luzia cryptocurrency pricing API.

REST access to exchanges, markets, tickers and OHLCV history with
timeouts and retries built in, plus a reconnecting streaming session for
live ticker updates.
"""
from __future__ import annotations

from luzia_python._features import HAS_KEYRING, require_extra
from luzia_python.client import Luzia, LuziaBuilder
from luzia_python.errors import ErrorCode, LuziaError, is_luzia_error, is_retryable
from luzia_python.resilience import RetryConfig, RetryContext, with_retry
from luzia_python.streaming import (
    ConnectionState,
    LuziaWebSocket,
    StreamEvent,
    WebSocketOptions,
    parse_channel,
    ticker_channel,
)
from luzia_python.types import (
    Exchange,
    Market,
    MarketListResponse,
    OHLCVCandle,
    OHLCVResponse,
    RateLimitInfo,
    Ticker,
    TickerListResponse,
)
from luzia_python.utils import symbol_from_url, symbol_to_url

__version__ = "0.1.0"

__all__ = [
    # Client
    "Luzia",
    "LuziaBuilder",
    # Feature flags
    "HAS_KEYRING",
    "require_extra",
    # Errors
    "ErrorCode",
    "LuziaError",
    "is_luzia_error",
    "is_retryable",
    # Retry
    "RetryConfig",
    "RetryContext",
    "with_retry",
    # Streaming
    "ConnectionState",
    "LuziaWebSocket",
    "StreamEvent",
    "WebSocketOptions",
    "parse_channel",
    "ticker_channel",
    # Types
    "Exchange",
    "Market",
    "MarketListResponse",
    "OHLCVCandle",
    "OHLCVResponse",
    "RateLimitInfo",
    "Ticker",
    "TickerListResponse",
    # Symbols
    "symbol_from_url",
    "symbol_to_url",
    # Version
    "__version__",
]
