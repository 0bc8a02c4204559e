"""WebSocket connection management."""

from .connection import ConnectionManager, Transport, backoff_delay

__all__ = [
    "ConnectionManager",
    "Transport",
    "backoff_delay",
]
