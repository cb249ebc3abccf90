"""
Channel naming for the streaming API.

Channels look like ``ticker:{exchange}`` (every ticker on an exchange) or
``ticker:{exchange}:{SYMBOL}`` with the symbol in URL format.
"""

from __future__ import annotations

from typing import NamedTuple

from luzia_python.utils.symbols import symbol_from_url, symbol_to_url

TICKER_PREFIX = "ticker"


class Channel(NamedTuple):
    """Parsed channel name."""

    kind: str
    exchange: str
    symbol: str | None = None


def ticker_channel(exchange: str, symbol: str | None = None) -> str:
    """Build a ticker channel name.

    Example:
        >>> ticker_channel("binance", "btc/usdt")
        'ticker:binance:BTC-USDT'
        >>> ticker_channel("Binance")
        'ticker:binance'
    """
    channel = f"{TICKER_PREFIX}:{exchange.lower()}"
    if symbol:
        channel += f":{symbol_to_url(symbol.upper())}"
    return channel


def parse_channel(channel: str) -> Channel:
    """Split a channel name into its parts.

    The symbol, when present, is returned in normalized ``BASE/QUOTE`` form.

    Raises:
        ValueError: If the channel is not ``kind:exchange[:symbol]``
    """
    parts = channel.split(":")
    if len(parts) not in (2, 3) or not all(parts):
        raise ValueError(f"Invalid channel name: {channel!r}")
    symbol = symbol_from_url(parts[2]) if len(parts) == 3 else None
    return Channel(kind=parts[0], exchange=parts[1], symbol=symbol)
