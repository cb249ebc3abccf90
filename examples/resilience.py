#!/usr/bin/env python3
"""
Retry configuration example.

Shows client-wide retry settings, per-call overrides and retry logging.

Usage:
    export LUZIA_API_KEY="lz_..."
    python examples/resilience.py
"""

import asyncio

from luzia_python import Luzia, RetryContext
from luzia_python.telemetry import LuziaLogger


def on_retry(ctx: RetryContext) -> None:
    print(f"Retry {ctx.attempt + 1}/{ctx.max_retries} in {ctx.delay_ms:.0f}ms: {ctx.error}")


async def main() -> None:
    """Run retry example."""
    LuziaLogger.configure(level="INFO")

    luzia = (
        Luzia.builder()
        .timeout_ms(5000)
        .retry(max_retries=5, initial_delay_ms=500, max_delay_ms=10_000)
        .build()
    )

    try:
        tickers = await luzia.tickers.list_filtered(
            symbols=["BTC/USDT", "ETH/USDT"],
            limit=10,
        )
        print(f"Got {len(tickers.tickers)} tickers")

        # Fail fast for a single call
        exchanges = await luzia.request("/v1/exchanges", retry={"max_retries": 0})
        print(exchanges)

        await luzia.request("/v1/tickers/binance", on_retry=on_retry)
    finally:
        await luzia.close()


if __name__ == "__main__":
    asyncio.run(main())
