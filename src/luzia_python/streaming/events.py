"""
Streaming wire messages and session events.

Server messages are JSON objects discriminated by ``type``. They are
parsed into Pydantic models; anything that does not validate is treated
as a malformed frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel


class StreamEvent(str, Enum):
    """Events a LuziaWebSocket emits to listeners.

    Payload per event:
        CONNECTED: ConnectedMessage
        TICKER: TickerMessage
        SUBSCRIBED: SubscribedMessage
        UNSUBSCRIBED: UnsubscribedMessage
        ERROR: ErrorMessage
        DISCONNECTED: DisconnectedEvent
        RECONNECTING: ReconnectingEvent
    """

    CONNECTED = "connected"
    TICKER = "ticker"
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"
    ERROR = "error"
    DISCONNECTED = "disconnected"
    RECONNECTING = "reconnecting"


class ConnectionState(str, Enum):
    """Lifecycle state of a streaming session."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"


class WireMessage(BaseModel):
    """Base class for wire messages (camelCase aliases, extras allowed)."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        alias_generator=to_camel,
    )


class ConnectionLimits(WireMessage):
    max_subscriptions: int | None = None


class ConnectedMessage(WireMessage):
    """Handshake sent by the server once the session is ready."""

    type: Literal["connected"] = "connected"
    message: str | None = None
    tier: str | None = None
    limits: ConnectionLimits | None = None


class TickData(WireMessage):
    """Tick fields carried by a ticker message."""

    symbol: str | None = None
    exchange: str | None = None
    last: float | None = None
    bid: float | None = None
    ask: float | None = None
    high: float | None = None
    low: float | None = None
    open: float | None = None
    close: float | None = None
    volume: float | None = None
    quote_volume: float | None = None
    change: float | None = None
    change_percent: float | None = None
    timestamp: int | float | None = None


class TickerMessage(WireMessage):
    """Live ticker update."""

    type: Literal["ticker"] = "ticker"
    exchange: str | None = None
    symbol: str | None = None
    data: TickData | None = Field(default_factory=TickData)
    timestamp: int | float | None = None


class SubscribedMessage(WireMessage):
    type: Literal["subscribed"] = "subscribed"
    channel: str


class UnsubscribedMessage(WireMessage):
    type: Literal["unsubscribed"] = "unsubscribed"
    channel: str


class ErrorMessage(WireMessage):
    """Server-side error, or a local connection error emitted by the session."""

    type: Literal["error"] = "error"
    code: str | int | None = None
    message: str | None = None


class PongMessage(WireMessage):
    type: Literal["pong"] = "pong"
    timestamp: int | float | None = None


ServerMessage = Annotated[
    Union[
        ConnectedMessage,
        TickerMessage,
        SubscribedMessage,
        UnsubscribedMessage,
        ErrorMessage,
        PongMessage,
    ],
    Field(discriminator="type"),
]

_SERVER_MESSAGE: TypeAdapter[ServerMessage] = TypeAdapter(ServerMessage)


def parse_server_message(raw: str | bytes) -> ServerMessage | None:
    """Parse a raw frame into a server message.

    Returns:
        The parsed message, or None for non-JSON payloads, unknown types
        and messages missing required fields.
    """
    try:
        return _SERVER_MESSAGE.validate_json(raw)
    except ValidationError:
        return None


class SubscriptionRequest(WireMessage):
    """Outbound subscribe/unsubscribe request."""

    type: Literal["subscribe", "unsubscribe"]
    channels: list[str]


class PingRequest(WireMessage):
    type: Literal["ping"] = "ping"


@dataclass(frozen=True)
class DisconnectedEvent:
    """Payload of the ``disconnected`` event."""

    code: int
    reason: str


@dataclass(frozen=True)
class ReconnectingEvent:
    """Payload of the ``reconnecting`` event.

    Attributes:
        attempt: Reconnect attempt number (1-based)
        delay_ms: Delay before the attempt, after jitter
    """

    attempt: int
    delay_ms: int
