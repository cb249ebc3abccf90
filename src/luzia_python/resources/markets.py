"""
Markets resource.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from luzia_python.resources.base import Resource, parse_model
from luzia_python.types import MarketListResponse

if TYPE_CHECKING:
    from luzia_python.types import QueryValue


class MarketsResource(Resource):
    """Trading pairs available on an exchange."""

    async def list(
        self,
        exchange: str,
        *,
        base: str | None = None,
        quote: str | None = None,
        active: bool | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> MarketListResponse:
        """List markets for an exchange.

        Args:
            exchange: Exchange identifier (case-insensitive)
            base: Filter by base currency, e.g. ``BTC``
            quote: Filter by quote currency, e.g. ``USDT``
            active: Only active (True) or inactive (False) markets
            limit: Page size
            offset: Page offset

        Returns:
            Page of markets
        """
        query: dict[str, QueryValue] = {"limit": limit, "offset": offset}
        if base:
            query["base"] = base.upper()
        if quote:
            query["quote"] = quote.upper()
        if active is not None:
            query["active"] = active

        data = await self._client.request(
            f"/v1/markets/{exchange.lower()}", query=query
        )
        return parse_model(MarketListResponse, data)
