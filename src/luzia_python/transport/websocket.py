"""
Duplex transport for the streaming API.

Defines the callback-slot interface the streaming session drives, and a
default implementation on top of the ``websockets`` asyncio client.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from luzia_python.telemetry import get_logger

if TYPE_CHECKING:
    from websockets.asyncio.client import ClientConnection

logger = get_logger(__name__)

# Close code reported when the connection dropped without a close frame
ABNORMAL_CLOSURE = 1006


class DuplexTransport(Protocol):
    """Persistent duplex channel used by the streaming session.

    Implementations call the slots as events happen; a slot set to None
    is simply not called.
    """

    on_open: Callable[[], None] | None
    on_message: Callable[[str], None] | None
    on_close: Callable[[int, str], None] | None
    on_error: Callable[[BaseException], None] | None

    def send(self, data: str) -> None:
        """Queue a text frame for sending."""
        ...

    def close(self, code: int = 1000, reason: str = "") -> None:
        """Start closing the channel."""
        ...


TransportFactory = Callable[[str, dict[str, str]], DuplexTransport]
"""Creates a DuplexTransport from a URL and connection headers."""


class WebSocketsTransport:
    """DuplexTransport backed by ``websockets``.

    Construction starts connecting in a background task on the running
    event loop. Frames passed to :meth:`send` are queued and written in
    order once the connection is open.

    Example:
        >>> transport = WebSocketsTransport("wss://api.luzia.dev/v1/ws", {"Authorization": "Bearer lz_..."})
        >>> transport.on_message = print
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        *,
        open_timeout: float = 10.0,
    ) -> None:
        self.on_open: Callable[[], None] | None = None
        self.on_message: Callable[[str], None] | None = None
        self.on_close: Callable[[int, str], None] | None = None
        self.on_error: Callable[[BaseException], None] | None = None

        self._url = url
        self._headers = dict(headers or {})
        self._open_timeout = open_timeout
        self._ws: ClientConnection | None = None
        self._outbox: asyncio.Queue[str] = asyncio.Queue()
        self._close_task: asyncio.Task[None] | None = None
        # Raises RuntimeError outside of a running event loop
        self._task = asyncio.get_running_loop().create_task(self._run())

    def send(self, data: str) -> None:
        """Queue a text frame for sending."""
        self._outbox.put_nowait(data)

    def close(self, code: int = 1000, reason: str = "") -> None:
        """Start closing the connection."""
        if self._ws is not None:
            if self._close_task is None:
                self._close_task = asyncio.get_running_loop().create_task(
                    self._ws.close(code, reason)
                )
        elif not self._task.done():
            self._task.cancel()

    def _fire(self, callback: Callable[..., None] | None, *args: Any) -> None:
        if callback is not None:
            callback(*args)

    async def _drain(self, ws: ClientConnection) -> None:
        """Write queued frames until the connection goes away."""
        try:
            while True:
                data = await self._outbox.get()
                await ws.send(data)
        except ConnectionClosed:
            return

    async def _run(self) -> None:
        code, reason = ABNORMAL_CLOSURE, ""
        try:
            async with connect(
                self._url,
                additional_headers=self._headers or None,
                open_timeout=self._open_timeout,
                # Heartbeat is sent at the application level by the session
                ping_interval=None,
            ) as ws:
                self._ws = ws
                self._fire(self.on_open)
                writer = asyncio.create_task(self._drain(ws))
                try:
                    async for message in ws:
                        if isinstance(message, bytes):
                            message = message.decode("utf-8", errors="replace")
                        self._fire(self.on_message, message)
                finally:
                    writer.cancel()
            code = ws.close_code if ws.close_code is not None else ABNORMAL_CLOSURE
            reason = ws.close_reason or ""
        except ConnectionClosed as e:
            if e.rcvd is not None:
                code, reason = e.rcvd.code, e.rcvd.reason
            logger.debug("WebSocket closed abnormally", code=code)
            self._fire(self.on_error, e)
        except asyncio.CancelledError:
            code, reason = 1000, "cancelled"
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            logger.debug("WebSocket connection failed", error=str(e))
            self._fire(self.on_error, e)
        except Exception as e:
            logger.warning("WebSocket reader failed", error=str(e))
            self._fire(self.on_error, e)
        finally:
            self._ws = None
            self._fire(self.on_close, code, reason)
