"""Wire packets exchanged between the view and its host.

Every frame is one JSON object tagged by ``kind``. Field names on the wire
are camelCase (``workerId``); attributes are snake_case.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import PacketKind


class Packet(BaseModel):
    """Base for all wire packets."""

    kind: str

    model_config = ConfigDict(frozen=True, populate_by_name=True)


# Host -> view


class MessageForView(Packet):
    kind: Literal["message-for-view"] = PacketKind.MESSAGE_FOR_VIEW.value
    payload: Any = None


class WorkerMessageForView(Packet):
    """Worker-scoped message; ``worker_id`` is checked by the router, not here."""

    kind: Literal["worker-message-for-view"] = PacketKind.WORKER_MESSAGE_FOR_VIEW.value
    worker_id: Any = Field(default=None, alias="workerId")
    payload: Any = None


class BridgeErrorPacket(Packet):
    """Diagnostic reported by the host; logged only."""

    kind: Literal["bridge-error"] = PacketKind.BRIDGE_ERROR.value
    message: Any = None


# View -> host


class MessageFromView(Packet):
    kind: Literal["message-from-view"] = PacketKind.MESSAGE_FROM_VIEW.value
    payload: Any = None


class WorkerMessageFromView(Packet):
    kind: Literal["worker-message-from-view"] = PacketKind.WORKER_MESSAGE_FROM_VIEW.value
    worker_id: str = Field(..., alias="workerId")
    payload: Any = None


class TriggerSentryTest(Packet):
    kind: Literal["trigger-sentry-test"] = PacketKind.TRIGGER_SENTRY_TEST.value


class UnknownPacket(Packet):
    """Frame with a kind this bridge does not know; kept for forward compatibility."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")


PACKET_TYPES: dict[str, type[Packet]] = {
    PacketKind.MESSAGE_FOR_VIEW.value: MessageForView,
    PacketKind.WORKER_MESSAGE_FOR_VIEW.value: WorkerMessageForView,
    PacketKind.BRIDGE_ERROR.value: BridgeErrorPacket,
    PacketKind.MESSAGE_FROM_VIEW.value: MessageFromView,
    PacketKind.WORKER_MESSAGE_FROM_VIEW.value: WorkerMessageFromView,
    PacketKind.TRIGGER_SENTRY_TEST.value: TriggerSentryTest,
}

OutboundPacket = MessageFromView | WorkerMessageFromView | TriggerSentryTest
