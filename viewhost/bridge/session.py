"""Explicit session object shared by every bridge component.

Architecture:
    A page hosts exactly one bridge session. All mutable state (connection
    generation, socket handle, reconnect bookkeeping, outbound frames and
    worker subscribers) lives here instead of in module globals, and each
    component receives the session in its constructor.

Concurrency:
    Every mutation happens synchronously inside one event-loop turn, so the
    session needs no locking. Deferred transport callbacks compare their
    captured token against ``token`` before touching anything.

Lifecycle:
    Created once by ``start_bridge``; lives until the process exits or
    ``BridgeRuntime.close()`` is called.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .config import RuntimeConfig, TransportConfig, build_ws_url
from .core.enums import TransportState
from .runtime.view import ViewEventTarget

if TYPE_CHECKING:
    from .io.ws.connection import Transport

WorkerCallback = Callable[[Any], Any]


@dataclass
class BridgeSession:
    config: RuntimeConfig
    url: str
    view: ViewEventTarget
    transport_config: TransportConfig = field(default_factory=TransportConfig)

    # ConnectionToken: only callbacks carrying this value are honored
    token: int = 0
    state: TransportState = TransportState.CLOSED
    transport: Transport | None = None
    task: asyncio.Task[None] | None = None

    # ReconnectState
    attempt: int = 0
    pending_timer: asyncio.TimerHandle | None = None

    outbound: deque[str] = field(default_factory=deque)
    worker_subscribers: dict[str, set[WorkerCallback]] = field(default_factory=dict)

    # Callback coroutines and scheduled flushes still running
    background_tasks: set[asyncio.Task[Any]] = field(default_factory=set)

    shut_down: bool = False

    @classmethod
    def create(
        cls,
        origin: str,
        config: RuntimeConfig | None = None,
        *,
        view: ViewEventTarget | None = None,
        transport_config: TransportConfig | None = None,
    ) -> BridgeSession:
        """Documented initialization entry point for a page's bridge state."""
        config = config or RuntimeConfig()
        return cls(
            config=config,
            url=build_ws_url(origin, config.effective_ws_path),
            view=view if view is not None else ViewEventTarget(),
            transport_config=transport_config or TransportConfig(),
        )

    @property
    def is_open(self) -> bool:
        return self.state == TransportState.OPEN and self.transport is not None

    def is_current(self, token: int) -> bool:
        return not self.shut_down and token == self.token
