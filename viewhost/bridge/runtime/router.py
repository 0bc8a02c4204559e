"""Inbound packet router.

Routes one decoded packet to its destination:
    - message-for-view: one message event on the view, payload verbatim
    - worker-message-for-view: fan-out to the worker's subscribers
    - bridge-error: logged, never surfaced to view code
    - anything else: ignored, so newer hosts can add kinds safely
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..models.packets import BridgeErrorPacket, MessageForView, Packet, WorkerMessageForView

if TYPE_CHECKING:
    from ..session import BridgeSession
    from .registry import WorkerSubscriptionRegistry

logger = logging.getLogger(__name__)


class InboundRouter:
    def __init__(self, session: BridgeSession, registry: WorkerSubscriptionRegistry) -> None:
        self._view = session.view
        self._registry = registry

    def route(self, packet: Packet) -> None:
        if isinstance(packet, MessageForView):
            self._view.dispatch(packet.payload)
        elif isinstance(packet, WorkerMessageForView):
            # A worker without listeners yet is normal; nothing to do
            if isinstance(packet.worker_id, str):
                self._registry.emit(packet.worker_id, packet.payload)
        elif isinstance(packet, BridgeErrorPacket):
            message = packet.message if packet.message is not None else "unknown"
            logger.warning(f"Bridge error reported by host: {message}")
