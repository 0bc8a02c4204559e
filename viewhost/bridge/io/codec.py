"""Packet codec: outbound packets to text frames, inbound frames to packets."""

from __future__ import annotations

import json

from pydantic import ValidationError

from ..core.exceptions import FrameDecodeError
from ..models.packets import PACKET_TYPES, OutboundPacket, Packet, UnknownPacket


def encode(packet: OutboundPacket) -> str:
    """Serialize a packet to its wire form (one JSON object per frame)."""
    return packet.model_dump_json(by_alias=True)


def decode(frame: str | bytes) -> Packet:
    """Parse one inbound frame.

    Known kinds are validated for structural shape only; frames with an
    unrecognized kind come back as ``UnknownPacket`` so the router can ignore
    them.

    Raises:
        FrameDecodeError: If the frame is not a JSON object with a string kind,
            or a known kind is missing its structure
    """
    try:
        data = json.loads(frame)
    except (TypeError, ValueError, RecursionError) as e:
        raise FrameDecodeError(f"Frame is not valid JSON: {e}", frame=frame) from e

    if not isinstance(data, dict):
        raise FrameDecodeError("Frame is not a JSON object", frame=frame)

    kind = data.get("kind")
    if not isinstance(kind, str):
        raise FrameDecodeError("Frame has no kind", frame=frame)

    model = PACKET_TYPES.get(kind)
    if model is None:
        return UnknownPacket.model_validate(data)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise FrameDecodeError(f"Malformed {kind} packet: {e}", frame=frame) from e
