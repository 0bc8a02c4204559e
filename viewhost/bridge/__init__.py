"""Viewhost Bridge - socket-backed host bridge for views running in a plain browser tab."""

from .clients import BridgeFacade, BridgeRuntime, start_bridge
from .config import (
    DEFAULT_WS_PATH,
    RuntimeConfig,
    TransportConfig,
    build_ws_url,
)
from .core import (
    BridgeError,
    ConfigError,
    FrameDecodeError,
    PacketKind,
    TransportState,
)
from .io import ConnectionManager, OutboundQueue, backoff_delay, codec
from .models import (
    BridgeErrorPacket,
    ConnectionStatus,
    MessageForView,
    MessageFromView,
    Packet,
    TriggerSentryTest,
    UnknownPacket,
    ViewMessageEvent,
    WorkerMessageForView,
    WorkerMessageFromView,
)
from .runtime import InboundRouter, Subscription, ViewEventTarget, WorkerSubscriptionRegistry
from .session import BridgeSession
from .utils import ErrorSuppressor

__version__ = "0.1.0"

__all__ = [
    # Entry point
    "start_bridge",
    "BridgeFacade",
    "BridgeRuntime",
    "BridgeSession",
    # Configuration
    "DEFAULT_WS_PATH",
    "RuntimeConfig",
    "TransportConfig",
    "build_ws_url",
    # Core enums
    "PacketKind",
    "TransportState",
    # Components
    "codec",
    "ConnectionManager",
    "OutboundQueue",
    "InboundRouter",
    "WorkerSubscriptionRegistry",
    "Subscription",
    "ViewEventTarget",
    "ErrorSuppressor",
    "backoff_delay",
    # Models
    "Packet",
    "MessageForView",
    "WorkerMessageForView",
    "BridgeErrorPacket",
    "MessageFromView",
    "WorkerMessageFromView",
    "TriggerSentryTest",
    "UnknownPacket",
    "ViewMessageEvent",
    "ConnectionStatus",
    # Exceptions
    "BridgeError",
    "ConfigError",
    "FrameDecodeError",
]
