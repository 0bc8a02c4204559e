"""Socket lifecycle for the bridge: connect, route, reconnect.

Architecture:
    Each connection attempt runs in its own asyncio task. The task turns the
    socket's life into four events (open, message, error, close) and hands
    them to the ``_handle_*`` methods, which play the role of socket event
    listeners.

    Every attempt is stamped with a fresh ConnectionToken taken from the
    session before the socket is created. A handler whose token no longer
    equals ``session.token`` returns without touching any state, so a
    superseded socket that reports late (a handshake finishing after a newer
    attempt started, a close following an error) cannot corrupt the newer
    connection.

Reconnection:
    A close on the active socket schedules one reconnect timer with
    exponential backoff: delay = min(max, base * 2**attempt). ``attempt``
    resets to 0 on a successful open and is otherwise never capped. At most
    one timer is pending; retries continue indefinitely.

Failure semantics:
    Transport failures are never raised to callers. An error only marks the
    connection as down; the close that always follows schedules the retry.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, Protocol

import websockets
from websockets.exceptions import WebSocketException

from ...core.enums import TransportState
from ...core.exceptions import FrameDecodeError
from ...models.events import ConnectionStatus, client_status_broadcast
from .. import codec

if TYPE_CHECKING:
    from ...runtime.router import InboundRouter
    from ...session import BridgeSession
    from ..outbound import OutboundQueue

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """The part of a websockets client connection the bridge relies on."""

    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...

    def __aiter__(self) -> AsyncIterator[str | bytes]: ...


def backoff_delay(attempt: int, base: float, maximum: float) -> float:
    """Reconnect delay for the given attempt number.

    Examples:
        >>> [backoff_delay(n, 0.5, 5.0) for n in range(6)]
        [0.5, 1.0, 2.0, 4.0, 5.0, 5.0]
    """
    # Exponent clamp keeps the float product finite after very long outages
    return min(maximum, base * 2 ** min(attempt, 64))


class ConnectionManager:
    def __init__(
        self,
        session: BridgeSession,
        queue: OutboundQueue,
        router: InboundRouter,
    ) -> None:
        self._session = session
        self._queue = queue
        self._router = router

    @property
    def is_open(self) -> bool:
        return self._session.is_open

    @property
    def state(self) -> TransportState:
        return self._session.state

    def connect(self) -> None:
        """Start a connection attempt unless one is connecting or open.

        Must be called from a running event loop.
        """
        session = self._session
        if session.shut_down or session.state.is_active:
            return
        session.token += 1
        token = session.token
        session.state = TransportState.CONNECTING
        session.transport = None
        session.task = asyncio.get_running_loop().create_task(self._run(token))

    async def close(self) -> None:
        """Tear the connection down for good; no reconnect follows."""
        session = self._session
        if session.shut_down:
            return
        session.shut_down = True
        # Invalidate every in-flight callback
        session.token += 1

        if session.pending_timer is not None:
            session.pending_timer.cancel()
            session.pending_timer = None

        transport, task = session.transport, session.task
        session.transport = None
        session.task = None
        session.state = TransportState.CLOSED

        if transport is not None:
            await self._discard(transport)
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("Bridge connection shut down")

    # ----------------------
    # Transport events
    # ----------------------
    def _handle_open(self, token: int, transport: Transport) -> bool:
        session = self._session
        if not session.is_current(token):
            return False
        session.transport = transport
        session.state = TransportState.OPEN
        session.attempt = 0
        logger.info(f"Bridge connected to {session.url}")
        return True

    def _handle_message(self, token: int, frame: str | bytes) -> None:
        if not self._session.is_current(token):
            return
        try:
            packet = codec.decode(frame)
        except FrameDecodeError:
            return
        self._router.route(packet)

    def _handle_error(self, token: int, error: BaseException) -> None:
        session = self._session
        if not session.is_current(token):
            return
        logger.debug(f"Bridge transport error: {error}")
        if session.state.is_active:
            session.state = TransportState.CLOSING

    def _handle_close(self, token: int) -> None:
        session = self._session
        if not session.is_current(token):
            return
        session.transport = None
        session.state = TransportState.CLOSED
        self._schedule_reconnect()

    # ----------------------
    # Reconnection
    # ----------------------
    def _schedule_reconnect(self) -> None:
        session = self._session
        if session.shut_down or session.is_open:
            return
        if session.pending_timer is not None:
            return
        conf = session.transport_config
        delay = backoff_delay(session.attempt, conf.base_reconnect_delay, conf.max_reconnect_delay)
        session.attempt += 1
        logger.warning(f"Bridge disconnected, reconnecting in {delay:.1f}s (attempt {session.attempt})")
        session.pending_timer = asyncio.get_running_loop().call_later(delay, self._on_reconnect_timer)

    def _on_reconnect_timer(self) -> None:
        self._session.pending_timer = None
        self.connect()

    # ----------------------
    # Internals
    # ----------------------
    def _connect_kwargs(self) -> dict[str, Any]:
        conf = self._session.transport_config
        kwargs: dict[str, Any] = {
            "ping_interval": conf.ping_interval,
            "ping_timeout": conf.ping_timeout,
            "close_timeout": conf.close_timeout,
        }
        # websockets applies its own limits when these are left out
        if conf.max_size is not None:
            kwargs["max_size"] = conf.max_size
        if conf.max_queue is not None:
            kwargs["max_queue"] = conf.max_queue
        return kwargs

    async def _run(self, token: int) -> None:
        session = self._session
        try:
            transport = await websockets.connect(session.url, **self._connect_kwargs())
        except asyncio.CancelledError:
            raise
        except Exception as e:  # noqa: BLE001
            self._handle_error(token, e)
            self._handle_close(token)
            return

        if not self._handle_open(token, transport):
            await self._discard(transport)
            return

        await self._queue.flush()
        if session.is_current(token):
            session.view.dispatch(client_status_broadcast(ConnectionStatus.CONNECTED))

        try:
            async for frame in transport:
                if not session.is_current(token):
                    break
                self._handle_message(token, frame)
        except asyncio.CancelledError:
            raise
        except Exception as e:  # noqa: BLE001
            self._handle_error(token, e)

        if not session.is_current(token):
            await self._discard(transport)
            return
        self._handle_close(token)

    async def _discard(self, transport: Transport) -> None:
        logger.debug("Closing superseded bridge transport")
        with contextlib.suppress(WebSocketException, OSError):
            await transport.close()
