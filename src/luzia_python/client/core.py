"""核心客户端实现：请求管线、限流信息和资源入口。

Core Luzia client implementation.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from luzia_python.errors import (
    ErrorCode,
    LuziaError,
    error_from_response,
    parse_rate_limit_headers,
)
from luzia_python.resilience import RetryConfig, resolve_retry_options, with_retry
from luzia_python.resources import (
    ExchangesResource,
    HistoryResource,
    MarketsResource,
    TickersResource,
)
from luzia_python.streaming import LuziaWebSocket
from luzia_python.telemetry import LogContext, get_logger, log_context
from luzia_python.transport import HttpTransport, get_auth_header, resolve_api_key
from luzia_python.utils import symbol_from_url, symbol_to_url

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    import httpx

    from luzia_python.client.builder import LuziaBuilder
    from luzia_python.resilience import RetryContext, RetryOverrides
    from luzia_python.streaming import WebSocketOptions
    from luzia_python.types import QueryValue, RateLimitInfo

logger = get_logger(__name__)

WEBSOCKET_PATH = "/v1/ws"


class Luzia:
    """Client for the Luzia cryptocurrency pricing API.

    Every request goes through one pipeline: a single attempt bounded by
    the configured timeout, classification of failures into LuziaError,
    and retry with backoff for retryable errors.

    Example:
        >>> async with Luzia(api_key="lz_...") as luzia:
        ...     ticker = await luzia.tickers.get("binance", "BTC/USDT")
        ...     print(ticker.last)

        >>> # Live updates
        >>> ws = luzia.create_websocket()
        >>> ws.on("ticker", print)
        >>> ws.connect()
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        timeout_ms: float | None = None,
        retry: RetryOverrides = None,
        proxy: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key (falls back to LUZIA_API_KEY, then the keyring)
            base_url: API base URL (falls back to LUZIA_BASE_URL)
            timeout_ms: Per-attempt timeout in milliseconds
            retry: Client-wide retry overrides
            proxy: Proxy URL for HTTP requests
            http_client: Pre-configured httpx client to send requests with

        Raises:
            LuziaError: If no API key could be resolved
        """
        resolved_key = resolve_api_key(api_key)
        if not resolved_key:
            raise LuziaError(
                "API key is required. Pass api_key or set LUZIA_API_KEY.",
                code=ErrorCode.UNKNOWN,
            )

        self._api_key = resolved_key
        self._transport = HttpTransport(
            resolved_key,
            base_url=base_url,
            timeout_ms=timeout_ms,
            proxy=proxy,
            http_client=http_client,
        )
        self._retry = resolve_retry_options(retry)
        self._rate_limit_info: RateLimitInfo | None = None

        self.exchanges = ExchangesResource(self)
        self.markets = MarketsResource(self)
        self.tickers = TickersResource(self)
        self.history = HistoryResource(self)

    @classmethod
    def builder(cls) -> LuziaBuilder:
        """Get a builder for fluent configuration.

        Example:
            >>> luzia = Luzia.builder().api_key("lz_...").timeout_ms(5000).build()
        """
        from luzia_python.client.builder import LuziaBuilder

        return LuziaBuilder()

    @property
    def base_url(self) -> str:
        return self._transport.base_url

    @property
    def timeout_ms(self) -> float:
        return self._transport.timeout_ms

    @property
    def retry_config(self) -> RetryConfig:
        """Client-wide retry configuration."""
        return self._retry

    @property
    def rate_limit_info(self) -> RateLimitInfo | None:
        """Rate limit info from the most recent response that carried it."""
        return self._rate_limit_info

    def symbol_to_url(self, symbol: str) -> str:
        """Convert ``BTC/USDT`` to ``BTC-USDT``."""
        return symbol_to_url(symbol)

    def symbol_from_url(self, symbol: str) -> str:
        """Convert ``BTC-USDT`` to ``BTC/USDT``."""
        return symbol_from_url(symbol)

    def create_websocket(self, options: WebSocketOptions | None = None) -> LuziaWebSocket:
        """Create a streaming session authenticated with this client's key.

        The streaming URL is derived from the base URL (``https`` becomes
        ``wss``, ``http`` becomes ``ws``). The session is not connected.
        """
        ws_base = self.base_url
        if ws_base.startswith("https:"):
            ws_base = "wss:" + ws_base[len("https:"):]
        elif ws_base.startswith("http:"):
            ws_base = "ws:" + ws_base[len("http:"):]
        return LuziaWebSocket(
            f"{ws_base}{WEBSOCKET_PATH}",
            options,
            headers=get_auth_header(self._api_key),
        )

    async def request(
        self,
        path: str,
        *,
        auth: bool = True,
        query: Mapping[str, QueryValue] | None = None,
        retry: RetryOverrides = None,
        on_retry: Callable[[RetryContext], None] | None = None,
    ) -> Any:
        """Make a GET request through the retrying pipeline.

        Args:
            path: Request path, e.g. ``/v1/exchanges``
            auth: Whether to send the bearer credential
            query: Query parameters; None values are omitted
            retry: Per-call retry overrides merged over the client's
            on_retry: Called before each retry wait

        Returns:
            Parsed JSON body

        Raises:
            LuziaError: On any failure, after retries are exhausted
        """
        options = self._retry.merge(retry)
        context = LogContext(request_id=uuid.uuid4().hex[:12], path=path)

        def handle_retry(ctx: RetryContext) -> None:
            code = ctx.error.code.value if isinstance(ctx.error, LuziaError) else None
            logger.info(
                "Retrying request",
                attempt=ctx.attempt + 1,
                max_retries=ctx.max_retries,
                delay_ms=round(ctx.delay_ms),
                code=code,
            )
            if on_retry is not None:
                on_retry(ctx)

        with log_context(context):
            try:
                return await with_retry(
                    lambda: self._execute(path, query=query, auth=auth),
                    options,
                    handle_retry,
                )
            except LuziaError as e:
                logger.warning("Request failed", code=e.code.value, status=e.status)
                raise

    async def _execute(
        self,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None,
        auth: bool,
    ) -> Any:
        """Single attempt: send, record rate limits, classify."""
        response = await self._transport.get(path, query=query, auth=auth)

        info = parse_rate_limit_headers(response.headers)
        if info is not None:
            self._rate_limit_info = info
            logger.debug(
                "Rate limit updated", remaining=info.remaining, limit=info.limit
            )

        if not response.is_success:
            raise error_from_response(
                response.status_code,
                reason_phrase=response.reason_phrase or None,
                headers=response.headers,
                body=_read_json(response),
                rate_limit_info=info,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise LuziaError(
                "Invalid JSON in response body",
                code=ErrorCode.NETWORK,
                status=response.status_code,
                cause=e,
            ) from e

    async def close(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        await self._transport.close()

    async def __aenter__(self) -> Luzia:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()


def _read_json(response: httpx.Response) -> Any:
    """Parse an error body, treating empty or non-JSON bodies as absent."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
