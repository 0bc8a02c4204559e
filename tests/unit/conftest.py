"""Shared fakes for bridge unit tests.

FakeTransport mimics the slice of a websockets client connection the bridge
uses (send/close/async iteration). FakeConnector stands in for
``websockets.connect`` and lets tests decide when a handshake completes.
"""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import patch

import pytest
from websockets.exceptions import ConnectionClosed

from viewhost.bridge import BridgeRuntime, BridgeSession, RuntimeConfig, TransportConfig

_CLOSE = object()


class FakeTransport:
    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self.fail_sends = False
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    async def send(self, message: str) -> None:
        if self.closed or self.fail_sends:
            raise ConnectionClosed(None, None)
        self.sent.append(message)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._inbox.put_nowait(_CLOSE)

    def feed(self, frame: str | bytes) -> None:
        """Queue an inbound frame."""
        self._inbox.put_nowait(frame)

    def drop(self, error: BaseException | None = None) -> None:
        """End the connection from the far side, optionally abnormally."""
        self.closed = True
        self._inbox.put_nowait(error if error is not None else _CLOSE)

    def __aiter__(self) -> FakeTransport:
        return self

    async def __anext__(self) -> str | bytes:
        item = await self._inbox.get()
        if item is _CLOSE:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item


class FakeConnector:
    def __init__(self) -> None:
        self.auto_accept = True
        self.urls: list[str] = []
        self.kwargs: list[dict[str, Any]] = []
        self.transports: list[FakeTransport] = []
        self._waiting: list[asyncio.Future[FakeTransport]] = []

    async def __call__(self, url: str, **kwargs: Any) -> FakeTransport:
        self.urls.append(url)
        self.kwargs.append(kwargs)
        if self.auto_accept:
            return self._new_transport()
        future: asyncio.Future[FakeTransport] = asyncio.get_running_loop().create_future()
        self._waiting.append(future)
        return await future

    @property
    def waiting(self) -> int:
        return len(self._waiting)

    def accept(self) -> FakeTransport:
        """Complete the oldest pending handshake."""
        transport = self._new_transport()
        self._waiting.pop(0).set_result(transport)
        return transport

    def refuse(self, error: BaseException | None = None) -> None:
        """Fail the oldest pending handshake."""
        self._waiting.pop(0).set_exception(error or OSError("connection refused"))

    def _new_transport(self) -> FakeTransport:
        transport = FakeTransport()
        self.transports.append(transport)
        return transport


async def settle(rounds: int = 20) -> None:
    """Let scheduled tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def connector():
    fake = FakeConnector()
    with patch("websockets.connect", new=fake):
        yield fake


@pytest.fixture
def fast_transport_config() -> TransportConfig:
    return TransportConfig(base_reconnect_delay=0.01, max_reconnect_delay=0.04)


@pytest.fixture
def session(fast_transport_config: TransportConfig) -> BridgeSession:
    return BridgeSession.create(
        "http://view.test:8080",
        RuntimeConfig(),
        transport_config=fast_transport_config,
    )


@pytest.fixture
def runtime(session: BridgeSession) -> BridgeRuntime:
    return BridgeRuntime(session)


@pytest.fixture
def settled():
    return settle


@pytest.fixture
def slow_timers(session: BridgeSession) -> BridgeSession:
    """Push reconnect timers far enough out that only the test fires them."""
    session.transport_config = TransportConfig(base_reconnect_delay=30.0, max_reconnect_delay=60.0)
    return session


@pytest.fixture
def fire_reconnect_timer():
    """Run the pending reconnect timer of a runtime immediately."""

    def fire(runtime: BridgeRuntime) -> None:
        timer = runtime.session.pending_timer
        assert timer is not None
        timer.cancel()
        runtime.connection._on_reconnect_timer()

    return fire
