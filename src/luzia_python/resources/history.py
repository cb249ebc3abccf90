"""
Historical OHLCV resource.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from luzia_python.resources.base import Resource, parse_model
from luzia_python.types import OHLCVResponse
from luzia_python.utils import symbol_to_url

if TYPE_CHECKING:
    from luzia_python.types import CandleInterval


class HistoryResource(Resource):
    """Historical candles."""

    async def get(
        self,
        exchange: str,
        symbol: str,
        *,
        interval: CandleInterval | None = None,
        start: int | None = None,
        end: int | None = None,
        limit: int | None = None,
    ) -> OHLCVResponse:
        """Get OHLCV candles for a trading pair.

        Args:
            exchange: Exchange identifier
            symbol: Trading pair, e.g. ``BTC/USDT``
            interval: Candle interval, e.g. ``1h``
            start: Start time (milliseconds since epoch)
            end: End time (milliseconds since epoch)
            limit: Maximum number of candles

        Example:
            >>> history = await luzia.history.get("binance", "BTC/USDT", interval="1h", limit=24)
            >>> closes = [candle.close for candle in history.candles]
        """
        url_symbol = symbol_to_url(symbol.upper())
        data = await self._client.request(
            f"/v1/history/{exchange.lower()}/{url_symbol}",
            query={"interval": interval, "start": start, "end": end, "limit": limit},
        )
        return parse_model(OHLCVResponse, data)
