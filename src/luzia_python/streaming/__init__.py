"""
Streaming module - live ticker updates over a persistent connection.

Provides:
- LuziaWebSocket: reconnecting, subscription-tracking session
- StreamEvent / ConnectionState: event kinds and lifecycle states
- Wire message models and channel helpers
"""

from luzia_python.streaming.channels import Channel, parse_channel, ticker_channel
from luzia_python.streaming.events import (
    ConnectedMessage,
    ConnectionLimits,
    ConnectionState,
    DisconnectedEvent,
    ErrorMessage,
    PingRequest,
    PongMessage,
    ReconnectingEvent,
    StreamEvent,
    SubscribedMessage,
    SubscriptionRequest,
    TickData,
    TickerMessage,
    UnsubscribedMessage,
    parse_server_message,
)
from luzia_python.streaming.session import (
    CONNECTION_FAILED,
    MAX_RECONNECT,
    LuziaWebSocket,
    WebSocketOptions,
)

__all__ = [
    "CONNECTION_FAILED",
    "MAX_RECONNECT",
    "Channel",
    "ConnectedMessage",
    "ConnectionLimits",
    "ConnectionState",
    "DisconnectedEvent",
    "ErrorMessage",
    "LuziaWebSocket",
    "PingRequest",
    "PongMessage",
    "ReconnectingEvent",
    "StreamEvent",
    "SubscribedMessage",
    "SubscriptionRequest",
    "TickData",
    "TickerMessage",
    "UnsubscribedMessage",
    "WebSocketOptions",
    "parse_channel",
    "parse_server_message",
    "ticker_channel",
]
