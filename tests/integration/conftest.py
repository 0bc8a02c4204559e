"""Shared fixtures for integration tests.

The host side is a real ``websockets`` server bound to the loopback
interface, so these tests need no outside network access.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest
import pytest_asyncio
import websockets


class LoopbackHost:
    """Minimal host: records what the view sends and can push packets back."""

    def __init__(self) -> None:
        self.received: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.connections: list[Any] = []
        self.connected = asyncio.Event()
        self.port: int | None = None

    async def handler(self, websocket: Any) -> None:
        self.connections.append(websocket)
        self.connected.set()
        try:
            async for frame in websocket:
                await self.received.put(json.loads(frame))
        except websockets.ConnectionClosed:
            pass

    @property
    def origin(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    async def push(self, packet: dict[str, Any]) -> None:
        await self.connections[-1].send(json.dumps(packet))

    async def next_packet(self, timeout: float = 2.0) -> dict[str, Any]:
        return await asyncio.wait_for(self.received.get(), timeout)

    async def drop_clients(self) -> None:
        self.connected.clear()
        for websocket in list(self.connections):
            await websocket.close()


@pytest_asyncio.fixture
async def loopback_host():
    host = LoopbackHost()
    async with websockets.serve(host.handler, "127.0.0.1", 0) as server:
        host.port = server.sockets[0].getsockname()[1]
        yield host
