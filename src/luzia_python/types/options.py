"""
Request option records shared by the client and resource facades.
"""

from __future__ import annotations

from typing import Literal, TypedDict, Union

CandleInterval = Literal["1m", "5m", "15m", "30m", "1h", "4h", "1d"]
"""Supported OHLCV candle intervals."""

QueryValue = Union[str, int, float, bool, None]
"""Accepted query parameter value; ``None`` means "omit"."""


class RetryOptions(TypedDict, total=False):
    """Partial retry configuration accepted by the client and per request.

    Any key left out falls back to the client-level value, then to the
    library default.
    """

    max_retries: int
    initial_delay_ms: float
    max_delay_ms: float
    backoff_multiplier: float
    jitter: bool
