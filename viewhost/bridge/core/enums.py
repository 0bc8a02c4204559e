"""Core enumerations shared by the codec, router and connection layers.

Key Types:
    - PacketKind: Wire discriminator carried in every frame's ``kind`` field
    - TransportState: Lifecycle of the single socket owned by a session
"""

from enum import Enum


class PacketKind(str, Enum):
    """Packet kinds understood by this bridge.

    Host-to-view kinds are routed inbound; view-to-host kinds are only ever
    produced by the facade. Frames carrying any other kind are ignored.
    """

    MESSAGE_FOR_VIEW = "message-for-view"
    WORKER_MESSAGE_FOR_VIEW = "worker-message-for-view"
    MESSAGE_FROM_VIEW = "message-from-view"
    WORKER_MESSAGE_FROM_VIEW = "worker-message-from-view"
    BRIDGE_ERROR = "bridge-error"
    TRIGGER_SENTRY_TEST = "trigger-sentry-test"

    @property
    def is_inbound(self) -> bool:
        return self in (
            PacketKind.MESSAGE_FOR_VIEW,
            PacketKind.WORKER_MESSAGE_FOR_VIEW,
            PacketKind.BRIDGE_ERROR,
        )


class TransportState(str, Enum):
    """Socket lifecycle, mirroring the WebSocket ready states."""

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"

    @property
    def is_active(self) -> bool:
        """True while a connect() call must be a no-op."""
        return self in (TransportState.CONNECTING, TransportState.OPEN)
