"""Data models for wire packets and view events.

Architecture:
    Packets are Pydantic v2 models, immutable (frozen=True), with camelCase
    aliases matching the wire format. View events are frozen dataclasses,
    since they never cross the wire.

Model Categories:
    - Inbound packets: MessageForView, WorkerMessageForView, BridgeErrorPacket
    - Outbound packets: MessageFromView, WorkerMessageFromView, TriggerSentryTest
    - Forward compatibility: UnknownPacket
    - Events: ViewMessageEvent, ConnectionStatus
"""

from .events import ConnectionStatus, ViewMessageEvent, client_status_broadcast
from .packets import (
    PACKET_TYPES,
    BridgeErrorPacket,
    MessageForView,
    MessageFromView,
    OutboundPacket,
    Packet,
    TriggerSentryTest,
    UnknownPacket,
    WorkerMessageForView,
    WorkerMessageFromView,
)

__all__ = [
    "PACKET_TYPES",
    "BridgeErrorPacket",
    "ConnectionStatus",
    "MessageForView",
    "MessageFromView",
    "OutboundPacket",
    "Packet",
    "TriggerSentryTest",
    "UnknownPacket",
    "ViewMessageEvent",
    "WorkerMessageForView",
    "WorkerMessageFromView",
    "client_status_broadcast",
]
