"""Bridge facade and entry point for views hosted over a socket.

The facade exposes the same operations a native in-process host bridge
offers, so view code does not know which backend serves it:

- fire-and-forget submissions (view and worker messages, Sentry test trigger)
- worker channel subscriptions returning an unsubscribe handle
- accessors over the injected runtime configuration
- native-only features (file paths, context menus) answered with None

``start_bridge`` wires one session's components together and starts
connecting; ``BridgeRuntime`` keeps them for inspection and teardown.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import RuntimeConfig, TransportConfig
from ..io.outbound import OutboundQueue
from ..io.ws.connection import ConnectionManager
from ..models.packets import MessageFromView, TriggerSentryTest, WorkerMessageFromView
from ..runtime.registry import Subscription, WorkerSubscriptionRegistry
from ..runtime.router import InboundRouter
from ..runtime.view import ViewEventTarget
from ..session import BridgeSession, WorkerCallback
from ..utils.suppressor import ErrorSuppressor

logger = logging.getLogger(__name__)


class BridgeFacade:
    """Host bridge operations backed by the socket transport."""

    window_type = "web"

    def __init__(
        self,
        session: BridgeSession,
        queue: OutboundQueue,
        registry: WorkerSubscriptionRegistry,
    ) -> None:
        self._config = session.config
        self._queue = queue
        self._registry = registry

    def send_message_from_view(self, message: Any) -> None:
        """Queue a message for the host; returns before the socket sends it."""
        self._queue.enqueue(MessageFromView(payload=message))

    def get_path_for_file(self, file: Any = None) -> None:
        """No filesystem access over a socket."""
        return None

    def send_worker_message_from_view(self, worker_id: str, message: Any) -> None:
        self._queue.enqueue(WorkerMessageFromView(worker_id=worker_id, payload=message))

    def subscribe_to_worker_messages(
        self, worker_id: str, callback: WorkerCallback
    ) -> Subscription:
        """Listen on a worker channel; call the returned handle to unsubscribe."""
        return self._registry.subscribe(worker_id, callback)

    async def show_context_menu(self, *args: Any, **kwargs: Any) -> None:
        """No native menu over a socket."""
        return None

    def trigger_sentry_test_error(self) -> None:
        self._queue.enqueue(TriggerSentryTest())

    def get_sentry_init_options(self) -> dict[str, Any] | None:
        return self._config.sentry_init_options

    def get_app_session_id(self) -> str | None:
        return self._config.effective_app_session_id

    def get_build_flavor(self) -> str:
        return self._config.build_flavor


class BridgeRuntime:
    """Components of one running bridge session."""

    def __init__(
        self,
        session: BridgeSession,
        *,
        suppressor: ErrorSuppressor | None = None,
    ) -> None:
        self.session = session
        self.queue = OutboundQueue(session)
        self.registry = WorkerSubscriptionRegistry(session)
        self.router = InboundRouter(session, self.registry)
        self.connection = ConnectionManager(session, self.queue, self.router)
        self.api = BridgeFacade(session, self.queue, self.registry)
        self._suppressor = suppressor

    @property
    def view(self) -> ViewEventTarget:
        return self.session.view

    async def close(self) -> None:
        """Stop reconnecting, close the socket and restore global error hooks."""
        await self.connection.close()
        if self._suppressor is not None:
            self._suppressor.uninstall()

    async def __aenter__(self) -> BridgeRuntime:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()


def start_bridge(
    origin: str,
    config: RuntimeConfig | None = None,
    *,
    view: ViewEventTarget | None = None,
    transport_config: TransportConfig | None = None,
    suppress_transient_errors: bool = True,
) -> BridgeRuntime:
    """Create the bridge session for a view and start connecting.

    Must be called from a running event loop.

    Args:
        origin: Origin the view is served from (e.g. "https://app.example");
            decides the socket scheme and host
        config: Injected runtime options (defaults to RuntimeConfig.from_env())
        view: Event target receiving message events (a new one if omitted)
        transport_config: Backoff and keep-alive tuning
        suppress_transient_errors: Install the transient error filter

    Returns:
        BridgeRuntime whose ``api`` is the host bridge facade

    Raises:
        ConfigError: If the configuration or origin is invalid
    """
    if config is None:
        config = RuntimeConfig.from_env()
    session = BridgeSession.create(origin, config, view=view, transport_config=transport_config)

    suppressor: ErrorSuppressor | None = None
    if suppress_transient_errors:
        suppressor = ErrorSuppressor()
        suppressor.install()

    runtime = BridgeRuntime(session, suppressor=suppressor)
    logger.info(f"Starting bridge for {origin} ({session.url})")
    runtime.connection.connect()
    return runtime
