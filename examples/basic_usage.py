#!/usr/bin/env python3
"""
Basic REST usage example.

Lists exchanges, fetches a ticker and pulls a day of hourly candles.

Usage:
    export LUZIA_API_KEY="lz_..."
    python examples/basic_usage.py
"""

import asyncio

from luzia_python import ErrorCode, Luzia, LuziaError


async def main() -> None:
    """Run basic usage example."""
    async with Luzia() as luzia:
        exchanges = await luzia.exchanges.list()
        print("Exchanges:", ", ".join(e.id or "?" for e in exchanges))

        ticker = await luzia.tickers.get("binance", "BTC/USDT")
        print(f"{ticker.symbol} on {ticker.exchange}: {ticker.last} ({ticker.change_percent}%)")

        markets = await luzia.markets.list("binance", quote="USDT", active=True, limit=5)
        print("Markets:", [m.symbol for m in markets.markets])

        history = await luzia.history.get("binance", "BTC/USDT", interval="1h", limit=24)
        closes = [c.close for c in history.candles]
        print(f"Last {len(closes)} hourly closes: {closes}")

        try:
            await luzia.tickers.get("binance", "NOPE/USDT")
        except LuziaError as e:
            if e.code == ErrorCode.NOT_FOUND:
                print(f"Not found (correlation id: {e.correlation_id})")
            else:
                raise

        info = luzia.rate_limit_info
        if info:
            print(f"Rate limit: {info.remaining}/{info.limit}, resets at {info.reset}")


if __name__ == "__main__":
    asyncio.run(main())
