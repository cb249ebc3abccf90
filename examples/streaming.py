#!/usr/bin/env python3
"""
Streaming ticker example.

Subscribes to live BTC/USDT and ETH/USDT tickers on Binance and prints
updates for thirty seconds.

Usage:
    export LUZIA_API_KEY="lz_..."
    python examples/streaming.py
"""

import asyncio

from luzia_python import Luzia, StreamEvent, WebSocketOptions, ticker_channel
from luzia_python.streaming import (
    ConnectedMessage,
    DisconnectedEvent,
    ErrorMessage,
    ReconnectingEvent,
    TickerMessage,
)


def on_connected(msg: ConnectedMessage) -> None:
    limit = msg.limits.max_subscriptions if msg.limits else None
    print(f"Connected (tier={msg.tier}, max subscriptions={limit})")


def on_ticker(msg: TickerMessage) -> None:
    if msg.data is None:
        return
    tick = msg.data
    print(f"{msg.exchange} {msg.symbol}: last={tick.last} bid={tick.bid} ask={tick.ask}")


def on_error(msg: ErrorMessage) -> None:
    print(f"Error {msg.code}: {msg.message}")


def on_disconnected(event: DisconnectedEvent) -> None:
    print(f"Disconnected ({event.code} {event.reason})")


def on_reconnecting(event: ReconnectingEvent) -> None:
    print(f"Reconnecting, attempt {event.attempt} in {event.delay_ms}ms")


async def main() -> None:
    """Run streaming example."""
    async with Luzia() as luzia:
        ws = luzia.create_websocket(WebSocketOptions(heartbeat_interval_ms=15_000))
        ws.on(StreamEvent.CONNECTED, on_connected)
        ws.on(StreamEvent.TICKER, on_ticker)
        ws.on(StreamEvent.ERROR, on_error)
        ws.on(StreamEvent.DISCONNECTED, on_disconnected)
        ws.on(StreamEvent.RECONNECTING, on_reconnecting)

        # Sent once the server handshake arrives
        ws.subscribe(
            [
                ticker_channel("binance", "BTC/USDT"),
                ticker_channel("binance", "ETH/USDT"),
            ]
        )

        async with ws:
            await asyncio.sleep(30)
            print("Active subscriptions:", sorted(ws.subscriptions))


if __name__ == "__main__":
    asyncio.run(main())
