"""
Tickers resource.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from luzia_python.resources.base import Resource, parse_model
from luzia_python.types import Ticker, TickerListResponse
from luzia_python.utils import symbol_to_url

if TYPE_CHECKING:
    from collections.abc import Iterable

    from luzia_python.types import QueryValue


class TickersResource(Resource):
    """Current price snapshots."""

    async def get(self, exchange: str, symbol: str) -> Ticker:
        """Get the ticker for one trading pair.

        Args:
            exchange: Exchange identifier, e.g. ``binance``
            symbol: Trading pair, e.g. ``BTC/USDT``

        Example:
            >>> ticker = await luzia.tickers.get("binance", "BTC/USDT")
        """
        url_symbol = symbol_to_url(symbol.upper())
        data = await self._client.request(f"/v1/ticker/{exchange.lower()}/{url_symbol}")
        return parse_model(Ticker, data)

    async def list(
        self,
        exchange: str,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> TickerListResponse:
        """List tickers for one exchange."""
        data = await self._client.request(
            f"/v1/tickers/{exchange.lower()}",
            query={"limit": limit, "offset": offset},
        )
        return parse_model(TickerListResponse, data)

    async def list_filtered(
        self,
        *,
        exchange: str | None = None,
        symbols: Iterable[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> TickerListResponse:
        """List tickers across exchanges, optionally filtered.

        Args:
            exchange: Restrict to one exchange
            symbols: Trading pairs to include, e.g. ``["BTC/USDT", "ETH/USDT"]``
            limit: Page size
            offset: Page offset
        """
        query: dict[str, QueryValue] = {"limit": limit, "offset": offset}
        if exchange:
            query["exchange"] = exchange.lower()
        if symbols:
            joined = ",".join(symbol_to_url(s.upper()) for s in symbols)
            if joined:
                query["symbols"] = joined

        data = await self._client.request("/v1/tickers", query=query)
        return parse_model(TickerListResponse, data)
