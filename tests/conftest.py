"""Root pytest fixtures for luzia-python tests."""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import patch

import pytest

TEST_API_KEY = "lz_test_key_123456"
TEST_BASE_URL = "https://api.luzia.test"


class FakeTransport:
    """In-memory duplex transport driven by the test."""

    def __init__(self, url: str, headers: dict[str, str]) -> None:
        self.url = url
        self.headers = headers
        self.sent: list[str] = []
        self.closed: tuple[int, str] | None = None
        self.on_open: Callable[[], None] | None = None
        self.on_message: Callable[[str], None] | None = None
        self.on_close: Callable[[int, str], None] | None = None
        self.on_error: Callable[[BaseException], None] | None = None

    def send(self, data: str) -> None:
        self.sent.append(data)

    def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = (code, reason)

    @property
    def sent_messages(self) -> list[dict[str, Any]]:
        return [json.loads(data) for data in self.sent]

    def server_open(self) -> None:
        if self.on_open:
            self.on_open()

    def server_send(self, message: dict[str, Any] | str) -> None:
        raw = message if isinstance(message, str) else json.dumps(message)
        if self.on_message:
            self.on_message(raw)

    def server_close(self, code: int = 1006, reason: str = "") -> None:
        if self.on_close:
            self.on_close(code, reason)

    def server_error(self, error: BaseException) -> None:
        if self.on_error:
            self.on_error(error)

    def handshake(self, tier: str = "pro", max_subscriptions: int = 50) -> None:
        self.server_open()
        self.server_send(
            {
                "type": "connected",
                "message": "Connected",
                "tier": tier,
                "limits": {"maxSubscriptions": max_subscriptions},
            }
        )


class FakeTransportFactory:
    """Records every transport the session creates."""

    def __init__(self) -> None:
        self.transports: list[FakeTransport] = []
        self.fail_next = 0

    def __call__(self, url: str, headers: dict[str, str]) -> FakeTransport:
        if self.fail_next > 0:
            self.fail_next -= 1
            raise OSError("connection refused")
        transport = FakeTransport(url, headers)
        self.transports.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.transports[-1]


@pytest.fixture
def transport_factory() -> FakeTransportFactory:
    """Fake duplex transport factory for streaming tests."""
    return FakeTransportFactory()


@pytest.fixture
def clean_env() -> Iterator[None]:
    """Run without any LUZIA_* environment variables."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("LUZIA_")}
    with patch.dict(os.environ, env, clear=True):
        yield


@pytest.fixture
def api_key() -> str:
    return TEST_API_KEY


@pytest.fixture
def base_url() -> str:
    return TEST_BASE_URL
