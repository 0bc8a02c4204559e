"""Core types: exceptions and enums."""

from .enums import PacketKind, TransportState
from .exceptions import BridgeError, ConfigError, FrameDecodeError

__all__ = [
    # Enums
    "PacketKind",
    "TransportState",
    # Exceptions
    "BridgeError",
    "ConfigError",
    "FrameDecodeError",
]
