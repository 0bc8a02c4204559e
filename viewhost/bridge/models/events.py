"""View-level notification events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ConnectionStatus(Enum):
    """Client status values announced to the view."""

    CONNECTED = "connected"


@dataclass(frozen=True)
class ViewMessageEvent:
    """Message-style event dispatched on the view's event target."""

    data: Any
    type: str = "message"
    timestamp: datetime = field(default_factory=datetime.now)


def client_status_broadcast(status: ConnectionStatus) -> dict[str, Any]:
    """Build the broadcast a native host sends when its client status changes.

    The socket transport synthesizes it on every successful (re)connect so
    view code written against the native host keeps working unchanged.
    """
    return {
        "type": "ipc-broadcast",
        "method": "client-status-changed",
        "sourceClientId": None,
        "version": 1,
        "params": {"status": status.value},
    }
