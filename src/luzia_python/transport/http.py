"""HTTP 传输层：基于 httpx 的异步 HTTP 客户端，负责超时控制和错误归一化。

HTTP transport using httpx for async requests.

Provides:
- URL and query string construction
- Bearer authentication headers
- A hard per-request deadline
- Normalization of transport failures into LuziaError
"""

from __future__ import annotations

import asyncio
import os
from contextlib import suppress
from typing import TYPE_CHECKING, Any

import httpx

from luzia_python.errors import ErrorCode, LuziaError
from luzia_python.telemetry import get_logger
from luzia_python.transport.auth import get_auth_header

if TYPE_CHECKING:
    from collections.abc import Mapping

    from luzia_python.types.options import QueryValue

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.luzia.dev"
DEFAULT_TIMEOUT_MS = 30000
_DEFAULT_CONNECT_TIMEOUT = 10.0

_UA_VERSION: str | None = None


def _trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("LUZIA_HTTP_TRUST_ENV", "0") == "1"


def _get_ua_version() -> str:
    """Get package version for User-Agent (cached)."""
    global _UA_VERSION
    if _UA_VERSION is None:
        try:
            from importlib.metadata import version

            _UA_VERSION = version("luzia-python")
        except Exception:
            _UA_VERSION = "0.1.0"
    return _UA_VERSION


def resolve_base_url(base_url: str | None = None) -> str:
    """Resolve the API base URL (argument, LUZIA_BASE_URL, default).

    A trailing slash is removed.
    """
    url = base_url or os.getenv("LUZIA_BASE_URL") or DEFAULT_BASE_URL
    return url.rstrip("/")


def resolve_timeout_ms(timeout_ms: float | None = None) -> float:
    """Resolve the request timeout (argument, LUZIA_TIMEOUT_MS, default)."""
    if timeout_ms is not None:
        return timeout_ms
    env_timeout = os.getenv("LUZIA_TIMEOUT_MS")
    if env_timeout:
        with suppress(ValueError):
            return float(env_timeout)
    return DEFAULT_TIMEOUT_MS


def format_query_value(value: QueryValue) -> str:
    """Render a query value the way the API expects (booleans lower-case)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(
    base_url: str,
    path: str,
    query: Mapping[str, QueryValue] | None = None,
) -> str:
    """Join base URL, path and query string.

    Parameters whose value is None are omitted.

    Example:
        >>> build_url("https://api.luzia.dev", "/v1/tickers", {"limit": 5, "offset": None})
        'https://api.luzia.dev/v1/tickers?limit=5'
    """
    url = f"{base_url}{path}"
    if not query:
        return url

    params = [
        (key, format_query_value(value))
        for key, value in query.items()
        if value is not None
    ]
    if not params:
        return url
    return str(httpx.URL(url, params=params))


class HttpTransport:
    """Single-attempt HTTP transport for the Luzia API.

    Each call is bounded by a deadline; if it expires the in-flight request
    is cancelled and a ``timeout`` LuziaError is raised. Network failures
    surface as ``network`` errors with the original exception chained.

    Example:
        >>> transport = HttpTransport("lz_...", base_url="https://api.luzia.dev")
        >>> response = await transport.get("/v1/exchanges")
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        timeout_ms: float | None = None,
        proxy: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            api_key: API key used for bearer authentication
            base_url: API base URL
            timeout_ms: Request deadline in milliseconds
            proxy: Proxy URL
            http_client: Pre-configured httpx client (not closed by us)
        """
        self._auth_headers = get_auth_header(api_key)
        self._base_url = resolve_base_url(base_url)
        self._timeout_ms = resolve_timeout_ms(timeout_ms)

        if proxy is not None:
            self._proxy = proxy
        elif _trust_env_enabled():
            self._proxy = os.getenv("LUZIA_PROXY_URL")
        else:
            self._proxy = None

        self._client = http_client
        self._owns_client = http_client is None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout_ms(self) -> float:
        return self._timeout_ms

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            timeout = httpx.Timeout(
                self._timeout_ms / 1000.0,
                connect=min(_DEFAULT_CONNECT_TIMEOUT, self._timeout_ms / 1000.0),
            )
            self._client = httpx.AsyncClient(
                timeout=timeout,
                proxy=self._proxy,
                trust_env=_trust_env_enabled(),
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def build_headers(self, auth: bool = True) -> dict[str, str]:
        """Build request headers.

        Args:
            auth: Whether to include the Authorization header

        Returns:
            Complete headers dictionary
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": f"luzia-python/{_get_ua_version()}",
        }
        if auth:
            headers.update(self._auth_headers)
        return headers

    def _timeout_error(self, cause: BaseException | None = None) -> LuziaError:
        return LuziaError(
            f"Request timed out after {self._timeout_ms:g}ms",
            code=ErrorCode.TIMEOUT,
            timeout_ms=self._timeout_ms,
            cause=cause,
        )

    async def get(
        self,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        auth: bool = True,
    ) -> httpx.Response:
        """Make a single GET request under the configured deadline.

        Args:
            path: Request path (relative to base URL)
            query: Query parameters; None values are omitted
            auth: Whether to send the bearer credential

        Returns:
            HTTP response (any status)

        Raises:
            LuziaError: ``timeout`` when the deadline expires, ``network``
                for connection and other transport failures
        """
        return await self.request("GET", path, query=query, auth=auth)

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        auth: bool = True,
    ) -> httpx.Response:
        """Make a single HTTP request under the configured deadline."""
        client = self._get_client()
        url = build_url(self._base_url, path, query)
        headers = self.build_headers(auth)

        logger.debug("Request issued", method=method, path=path)

        try:
            return await asyncio.wait_for(
                client.request(method, url, headers=headers),
                timeout=self._timeout_ms / 1000.0,
            )
        except LuziaError:
            raise
        except asyncio.TimeoutError as e:
            raise self._timeout_error() from e
        except httpx.TimeoutException as e:
            raise self._timeout_error(e) from e
        except httpx.HTTPError as e:
            raise LuziaError(
                f"Network error: {e}",
                code=ErrorCode.NETWORK,
                cause=e,
            ) from e
        except Exception as e:
            raise LuziaError(
                str(e) or "Unknown network error",
                code=ErrorCode.NETWORK,
                cause=e,
            ) from e

    async def __aenter__(self) -> HttpTransport:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
