"""
流式会话：重连、订阅跟踪和心跳。

Streaming session over a persistent duplex transport.

The session is driven entirely by transport callbacks and event-loop
timers. It is considered live only after the server's ``connected``
handshake; requested channels are kept pending until the server confirms
them and are re-sent after every successful handshake.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from luzia_python.streaming.events import (
    ConnectedMessage,
    ConnectionState,
    DisconnectedEvent,
    ErrorMessage,
    PingRequest,
    PongMessage,
    ReconnectingEvent,
    StreamEvent,
    SubscribedMessage,
    SubscriptionRequest,
    TickerMessage,
    UnsubscribedMessage,
    WireMessage,
    parse_server_message,
)
from luzia_python.telemetry import get_logger
from luzia_python.transport.websocket import WebSocketsTransport

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from luzia_python.transport.websocket import DuplexTransport, TransportFactory

logger = get_logger(__name__)

CONNECTION_FAILED = "CONNECTION_FAILED"
MAX_RECONNECT = "MAX_RECONNECT"


@dataclass
class WebSocketOptions:
    """Configuration for a streaming session.

    Attributes:
        auto_reconnect: Reconnect after the connection drops
        max_reconnect_attempts: Attempt budget per outage (0 = unlimited)
        reconnect_delay_ms: Base reconnect delay
        max_reconnect_delay_ms: Upper bound for the reconnect delay before jitter
        heartbeat_interval_ms: Ping interval while connected (0 disables)
        transport_factory: Creates the duplex transport (default: websockets)
    """

    auto_reconnect: bool = True
    max_reconnect_attempts: int = 10
    reconnect_delay_ms: float = 1000
    max_reconnect_delay_ms: float = 30000
    heartbeat_interval_ms: float = 30000
    transport_factory: TransportFactory | None = None


class LuziaWebSocket:
    """Reconnecting streaming session for live ticker updates.

    Example:
        >>> ws = client.create_websocket()
        >>> ws.on(StreamEvent.TICKER, lambda msg: print(msg.symbol, msg.data.last))
        >>> ws.connect()
        >>> ws.subscribe(["ticker:binance:BTC-USDT"])
    """

    def __init__(
        self,
        url: str,
        options: WebSocketOptions | None = None,
        *,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize the session (does not connect).

        Args:
            url: Streaming endpoint URL
            options: Session options
            headers: Headers sent with the connection request
        """
        self._url = url
        self._headers = dict(headers or {})
        self._options = options or WebSocketOptions()
        self._auto_reconnect = self._options.auto_reconnect

        self._state = ConnectionState.DISCONNECTED
        self._transport: DuplexTransport | None = None
        self._reconnect_attempts = 0
        self._reconnect_timer: asyncio.TimerHandle | None = None
        self._heartbeat_timer: asyncio.TimerHandle | None = None

        # dicts keep insertion order for deterministic resubscription
        self._pending: dict[str, None] = {}
        self._active: dict[str, None] = {}
        self._listeners: dict[StreamEvent, dict[Callable[[Any], None], None]] = {
            event: {} for event in StreamEvent
        }

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def subscriptions(self) -> frozenset[str]:
        """Channels confirmed by the server."""
        return frozenset(self._active)

    @property
    def pending_subscriptions(self) -> frozenset[str]:
        """Channels requested but not yet confirmed."""
        return frozenset(self._pending)

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    # Listeners

    def on(self, event: StreamEvent | str, callback: Callable[[Any], None]) -> None:
        """Register a listener for an event.

        Registering the same callback twice has no effect.
        """
        self._listeners[StreamEvent(event)][callback] = None

    def off(self, event: StreamEvent | str, callback: Callable[[Any], None]) -> None:
        """Remove a listener (no-op if it was not registered)."""
        self._listeners[StreamEvent(event)].pop(callback, None)

    def _emit(self, event: StreamEvent, payload: Any) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback(payload)
            except Exception:
                logger.exception("Stream listener raised", event=event.value)

    # Lifecycle

    def connect(self) -> None:
        """Open the connection.

        No-op while already connecting or connected. Must be called from a
        running event loop.
        """
        if self._state in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
            return
        self._cancel_reconnect()
        self._open()

    def disconnect(self) -> None:
        """Close the session for good.

        Disables auto-reconnect, cancels timers, detaches and closes the
        live transport and forgets all subscriptions. Safe to call
        repeatedly; no events are emitted.
        """
        self._auto_reconnect = False
        self._cancel_reconnect()
        self._stop_heartbeat()

        transport = self._transport
        self._transport = None
        self._pending.clear()
        self._active.clear()
        self._reconnect_attempts = 0
        self._set_state(ConnectionState.DISCONNECTED)

        if transport is not None:
            self._detach(transport)
            try:
                transport.close(1000, "Client disconnect")
            except Exception as e:
                logger.debug("Stream transport close failed", error=str(e))

    def _open(self) -> None:
        self._set_state(ConnectionState.CONNECTING)
        factory = self._options.transport_factory or WebSocketsTransport
        try:
            transport = factory(self._url, dict(self._headers))
        except Exception as e:
            logger.warning("Failed to create stream transport", error=str(e))
            self._transport = None
            self._set_state(ConnectionState.DISCONNECTED)
            self._emit(
                StreamEvent.ERROR,
                ErrorMessage(code=CONNECTION_FAILED, message=str(e) or type(e).__name__),
            )
            self._schedule_reconnect()
            return

        self._transport = transport
        transport.on_open = lambda: self._handle_open(transport)
        transport.on_message = lambda data: self._handle_message(transport, data)
        transport.on_close = lambda code, reason: self._handle_close(transport, code, reason)
        transport.on_error = lambda error: self._handle_error(transport, error)

    @staticmethod
    def _detach(transport: DuplexTransport) -> None:
        transport.on_open = None
        transport.on_message = None
        transport.on_close = None
        transport.on_error = None

    def _set_state(self, state: ConnectionState) -> None:
        if state is not self._state:
            logger.debug(
                "Stream state changed", previous=self._state.value, state=state.value
            )
            self._state = state

    # Transport callbacks

    def _handle_open(self, transport: DuplexTransport) -> None:
        if transport is not self._transport:
            return
        # Not live until the server handshake arrives
        logger.debug("Stream transport open, awaiting handshake")

    def _handle_error(self, transport: DuplexTransport, error: BaseException) -> None:
        if transport is not self._transport:
            return
        logger.debug("Stream transport error", error=str(error))

    def _handle_close(self, transport: DuplexTransport, code: int, reason: str) -> None:
        if transport is not self._transport:
            return
        was_connected = self._state is ConnectionState.CONNECTED
        self._transport = None
        self._detach(transport)
        self._stop_heartbeat()

        # The server forgets subscriptions with the connection
        for channel in self._active:
            self._pending[channel] = None
        self._active.clear()

        self._set_state(ConnectionState.DISCONNECTED)
        logger.info("Stream disconnected", code=code, reason=reason)
        self._emit(StreamEvent.DISCONNECTED, DisconnectedEvent(code=code, reason=reason))

        if self._auto_reconnect and (was_connected or self._reconnect_attempts > 0):
            self._schedule_reconnect()

    def _handle_message(self, transport: DuplexTransport, raw: str) -> None:
        if transport is not self._transport:
            return
        message = parse_server_message(raw)
        if message is None:
            logger.debug("Dropped malformed stream frame")
            return

        if isinstance(message, ConnectedMessage):
            self._handle_handshake(message)
        elif isinstance(message, TickerMessage):
            self._emit(StreamEvent.TICKER, message)
        elif isinstance(message, SubscribedMessage):
            if message.channel in self._pending:
                del self._pending[message.channel]
                self._active[message.channel] = None
            self._emit(StreamEvent.SUBSCRIBED, message)
        elif isinstance(message, UnsubscribedMessage):
            self._pending.pop(message.channel, None)
            self._active.pop(message.channel, None)
            self._emit(StreamEvent.UNSUBSCRIBED, message)
        elif isinstance(message, ErrorMessage):
            logger.info("Stream server error", code=message.code)
            self._emit(StreamEvent.ERROR, message)
        elif isinstance(message, PongMessage):
            # heartbeat ack
            pass

    def _handle_handshake(self, message: ConnectedMessage) -> None:
        self._reconnect_attempts = 0
        self._set_state(ConnectionState.CONNECTED)
        self._start_heartbeat()
        logger.info("Stream connected", tier=message.tier)

        if self._pending:
            self._send(SubscriptionRequest(type="subscribe", channels=list(self._pending)))
        self._emit(StreamEvent.CONNECTED, message)

    # Subscriptions

    def subscribe(self, channels: Iterable[str]) -> None:
        """Request channels.

        Channels stay pending until the server confirms them. The request
        is sent right away only while connected; otherwise it goes out
        after the next handshake.
        """
        channels = list(channels)
        for channel in channels:
            self._pending[channel] = None
        if channels and self._state is ConnectionState.CONNECTED:
            self._send(SubscriptionRequest(type="subscribe", channels=channels))

    def unsubscribe(self, channels: Iterable[str]) -> None:
        """Drop channels from both pending and active sets."""
        channels = list(channels)
        for channel in channels:
            self._pending.pop(channel, None)
            self._active.pop(channel, None)
        if channels and self._state is ConnectionState.CONNECTED:
            self._send(SubscriptionRequest(type="unsubscribe", channels=channels))

    def ping(self) -> None:
        """Send a ping (only while connected)."""
        if self._state is ConnectionState.CONNECTED:
            self._send(PingRequest())

    def _send(self, message: WireMessage) -> None:
        if self._transport is None:
            return
        self._transport.send(message.model_dump_json(by_alias=True))

    # Timers

    def _schedule_reconnect(self) -> None:
        if not self._auto_reconnect:
            return

        max_attempts = self._options.max_reconnect_attempts
        if max_attempts > 0 and self._reconnect_attempts >= max_attempts:
            logger.warning("Max reconnect attempts reached", attempts=self._reconnect_attempts)
            self._emit(
                StreamEvent.ERROR,
                ErrorMessage(
                    code=MAX_RECONNECT,
                    message=f"Max reconnection attempts ({max_attempts}) exceeded",
                ),
            )
            return

        base_delay = min(
            self._options.reconnect_delay_ms * 2**self._reconnect_attempts,
            self._options.max_reconnect_delay_ms,
        )
        delay_ms = round(base_delay * (0.5 + random.random()))
        self._reconnect_attempts += 1

        self._cancel_reconnect()
        self._set_state(ConnectionState.RECONNECTING)
        self._reconnect_timer = asyncio.get_running_loop().call_later(
            delay_ms / 1000.0, self._reconnect
        )
        logger.info(
            "Reconnect scheduled", attempt=self._reconnect_attempts, delay_ms=delay_ms
        )
        self._emit(
            StreamEvent.RECONNECTING,
            ReconnectingEvent(attempt=self._reconnect_attempts, delay_ms=delay_ms),
        )

    def _reconnect(self) -> None:
        self._reconnect_timer = None
        if self._state is ConnectionState.RECONNECTING:
            self._open()

    def _cancel_reconnect(self) -> None:
        if self._reconnect_timer is not None:
            self._reconnect_timer.cancel()
            self._reconnect_timer = None

    def _start_heartbeat(self) -> None:
        self._stop_heartbeat()
        interval_ms = self._options.heartbeat_interval_ms
        if interval_ms <= 0:
            return
        self._heartbeat_timer = asyncio.get_running_loop().call_later(
            interval_ms / 1000.0, self._heartbeat
        )

    def _heartbeat(self) -> None:
        self._heartbeat_timer = None
        if self._state is not ConnectionState.CONNECTED:
            return
        self.ping()
        self._start_heartbeat()

    def _stop_heartbeat(self) -> None:
        if self._heartbeat_timer is not None:
            self._heartbeat_timer.cancel()
            self._heartbeat_timer = None

    async def __aenter__(self) -> LuziaWebSocket:
        """Connect on entry."""
        self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Disconnect on exit."""
        self.disconnect()
