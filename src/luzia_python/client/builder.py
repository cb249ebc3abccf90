"""
Builder for fluent client construction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx

    from luzia_python.client.core import Luzia
    from luzia_python.resilience import RetryConfig


class LuziaBuilder:
    """Builder for creating Luzia clients with custom configuration.

    Example:
        >>> luzia = (
        ...     LuziaBuilder()
        ...     .api_key("lz_...")
        ...     .base_url("https://api.luzia.dev")
        ...     .timeout_ms(10_000)
        ...     .retry(max_retries=5, jitter=False)
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        """Initialize the builder."""
        self._api_key: str | None = None
        self._base_url: str | None = None
        self._timeout_ms: float | None = None
        self._retry: dict[str, Any] = {}
        self._proxy: str | None = None
        self._http_client: httpx.AsyncClient | None = None

    def api_key(self, key: str) -> LuziaBuilder:
        """Set explicit API key.

        Args:
            key: API key

        Returns:
            Self for chaining
        """
        self._api_key = key
        return self

    def base_url(self, url: str) -> LuziaBuilder:
        """Override base URL.

        Args:
            url: Base URL for API requests

        Returns:
            Self for chaining
        """
        self._base_url = url
        return self

    def timeout_ms(self, timeout_ms: float) -> LuziaBuilder:
        """Set the per-attempt timeout.

        Args:
            timeout_ms: Timeout in milliseconds

        Returns:
            Self for chaining
        """
        self._timeout_ms = timeout_ms
        return self

    def retry(self, config: RetryConfig | None = None, **options: Any) -> LuziaBuilder:
        """Set retry options.

        Accepts a RetryConfig, keyword overrides, or both (keywords win).
        Repeated calls accumulate.

        Returns:
            Self for chaining
        """
        if config is not None:
            self._retry.update(
                max_retries=config.max_retries,
                initial_delay_ms=config.initial_delay_ms,
                max_delay_ms=config.max_delay_ms,
                backoff_multiplier=config.backoff_multiplier,
                jitter=config.jitter,
            )
        self._retry.update(options)
        return self

    def no_retry(self) -> LuziaBuilder:
        """Disable retries."""
        self._retry["max_retries"] = 0
        return self

    def proxy(self, url: str) -> LuziaBuilder:
        """Route HTTP requests through a proxy."""
        self._proxy = url
        return self

    def http_client(self, client: httpx.AsyncClient) -> LuziaBuilder:
        """Send requests with a pre-configured httpx client.

        The client is not closed by Luzia.close().
        """
        self._http_client = client
        return self

    def build(self) -> Luzia:
        """Build the Luzia client.

        Raises:
            LuziaError: If no API key could be resolved
        """
        from luzia_python.client.core import Luzia

        return Luzia(
            self._api_key,
            base_url=self._base_url,
            timeout_ms=self._timeout_ms,
            retry=self._retry or None,
            proxy=self._proxy,
            http_client=self._http_client,
        )
