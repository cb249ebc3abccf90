"""
Response records for the REST endpoints.

These Pydantic models mirror the API's JSON schema. Field names are
snake_case in Python and camelCase on the wire; unknown fields returned
by the server are kept as extras.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiRecord(BaseModel):
    """Base class for API records (camelCase aliases, extras allowed)."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Exchange(ApiRecord):
    """Exchange information."""

    id: str | None = Field(default=None, description="Unique exchange identifier")
    name: str | None = Field(default=None, description="Display name")
    status: str | None = Field(
        default=None, description="Operational status, e.g. operational or degraded"
    )
    website_url: str | None = Field(default=None, description="Exchange website URL")


class ExchangeListResponse(ApiRecord):
    """Response from the list exchanges endpoint."""

    exchanges: list[Exchange] | None = None


class Bounds(ApiRecord):
    """Min/max bounds for a market quantity."""

    min: float | None = None
    max: float | None = None


class MarketLimits(ApiRecord):
    """Trading limits for a market."""

    amount: Bounds | None = None
    price: Bounds | None = None


class MarketPrecision(ApiRecord):
    """Decimal precision for price and amount."""

    amount: int | None = None
    price: int | None = None


class Market(ApiRecord):
    """Trading pair information."""

    symbol: str = Field(description="Normalized trading pair symbol, e.g. BTC/USDT")
    exchange: str | None = None
    base: str | None = None
    quote: str | None = None
    base_id: str | None = None
    quote_id: str | None = None
    active: bool | None = None
    limits: MarketLimits | None = None
    precision: MarketPrecision | None = None


class MarketListResponse(ApiRecord):
    """Paginated list of markets."""

    markets: list[Market] = Field(default_factory=list)
    total: int | None = None
    limit: int | None = None
    offset: int | None = None


class Ticker(ApiRecord):
    """Price statistics for a trading pair on an exchange."""

    symbol: str
    exchange: str
    last: float | None = None
    bid: float | None = None
    ask: float | None = None
    high: float | None = None
    low: float | None = None
    open: float | None = None
    close: float | None = None
    volume: float | None = None
    quote_volume: float | None = None
    change: float | None = None
    change_percent: float | None = None
    timestamp: int | None = Field(default=None, description="Unix timestamp in milliseconds")


class TickerListResponse(ApiRecord):
    """Paginated list of tickers."""

    tickers: list[Ticker] = Field(default_factory=list)
    total: int | None = None
    limit: int | None = None
    offset: int | None = None


class OHLCVCandle(ApiRecord):
    """A single open/high/low/close/volume candle."""

    timestamp: int = Field(description="Candle open time, Unix milliseconds")
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    volume: float | None = None
    quote_volume: float | None = None


class OHLCVResponse(ApiRecord):
    """Historical candles for a trading pair."""

    exchange: str | None = None
    symbol: str | None = None
    interval: str | None = None
    candles: list[OHLCVCandle] = Field(default_factory=list)
    count: int | None = None
