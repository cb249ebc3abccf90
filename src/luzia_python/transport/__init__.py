"""
Transport layer - HTTP and WebSocket clients for API communication.

Provides:
- HttpTransport: httpx-based single-attempt requests with a hard deadline
- DuplexTransport: callback-slot interface used by the streaming session
- WebSocketsTransport: default DuplexTransport on top of ``websockets``
- API key resolution
"""

from luzia_python.transport.auth import get_auth_header, resolve_api_key, store_api_key
from luzia_python.transport.http import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_MS,
    HttpTransport,
    build_url,
    resolve_base_url,
    resolve_timeout_ms,
)
from luzia_python.transport.websocket import (
    DuplexTransport,
    TransportFactory,
    WebSocketsTransport,
)

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_MS",
    "DuplexTransport",
    "HttpTransport",
    "TransportFactory",
    "WebSocketsTransport",
    "build_url",
    "get_auth_header",
    "resolve_api_key",
    "resolve_base_url",
    "resolve_timeout_ms",
    "store_api_key",
]
