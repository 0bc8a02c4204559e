"""I/O layer: packet codec, outbound queue and socket lifecycle."""

from . import codec
from .outbound import OutboundQueue
from .ws import ConnectionManager, Transport, backoff_delay

__all__ = [
    "codec",
    "OutboundQueue",
    "ConnectionManager",
    "Transport",
    "backoff_delay",
]
