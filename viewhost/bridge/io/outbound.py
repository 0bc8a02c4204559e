"""Outbound durability queue.

Frames are appended in submission order and handed to the socket head to
tail by a single writer. A frame leaves the queue only after the socket
accepted it, so a disconnect mid-flush keeps the remainder (in order) for
the next successful open. The queue is unbounded: callers are moderate-rate
control messages, not bulk data.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from websockets.exceptions import WebSocketException

from . import codec

if TYPE_CHECKING:
    from ..models.packets import OutboundPacket
    from ..session import BridgeSession

logger = logging.getLogger(__name__)


class OutboundQueue:
    def __init__(self, session: BridgeSession) -> None:
        self._session = session
        self._flushing = False
        self._scheduled: asyncio.Task[None] | None = None

    def __len__(self) -> int:
        return len(self._session.outbound)

    @property
    def pending(self) -> list[str]:
        """Serialized frames still waiting for an open socket."""
        return list(self._session.outbound)

    def enqueue(self, packet: OutboundPacket) -> None:
        """Serialize and buffer a packet; schedule a flush if the socket is open.

        Returns without waiting for the socket to accept the frame.
        """
        session = self._session
        session.outbound.append(codec.encode(packet))
        if session.is_open and not self._flushing and self._scheduled is None:
            self._scheduled = asyncio.get_running_loop().create_task(self._scheduled_flush())
            session.background_tasks.add(self._scheduled)
            self._scheduled.add_done_callback(self._flush_done)

    async def _scheduled_flush(self) -> None:
        try:
            await self.flush()
        finally:
            self._scheduled = None

    def _flush_done(self, task: asyncio.Task[None]) -> None:
        self._session.background_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning(f"Scheduled flush failed: {task.exception()}")

    async def flush(self) -> None:
        """Drain buffered frames to the open socket, oldest first.

        Only one flush runs at a time; frames enqueued meanwhile are picked up
        by the running flush, which keeps delivery in FIFO order.
        """
        if self._flushing:
            return
        session = self._session
        self._flushing = True
        try:
            while session.outbound and session.is_open:
                transport = session.transport
                frame = session.outbound[0]
                try:
                    await transport.send(frame)
                except (WebSocketException, OSError) as e:
                    if session.transport is transport:
                        logger.debug(f"Flush interrupted, {len(session.outbound)} frame(s) kept: {e}")
                        break
                    # A newer socket replaced the failed one while sending
                    continue
                session.outbound.popleft()
        finally:
            self._flushing = False
