"""
Exchanges resource.
"""

from __future__ import annotations

from luzia_python.resources.base import Resource, parse_model
from luzia_python.types import Exchange, ExchangeListResponse


class ExchangesResource(Resource):
    """Supported exchanges."""

    async def list(self) -> list[Exchange]:
        """List all supported exchanges.

        Example:
            >>> for exchange in await luzia.exchanges.list():
            ...     print(exchange.id, exchange.status)
        """
        data = await self._client.request("/v1/exchanges")
        response = parse_model(ExchangeListResponse, data)
        return response.exchanges or []
