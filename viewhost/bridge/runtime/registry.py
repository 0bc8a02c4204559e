"""Per-worker subscriber registry.

Architecture:
    Maps a worker id to the set of callbacks listening on that worker's
    channel. A worker id with no subscribers is absent from the mapping,
    never present with an empty set, so dead workers do not accumulate.

Design Decisions:
    - Set semantics: subscribing the same callback twice is idempotent
    - Explicit handle: ``subscribe`` returns a Subscription whose
      ``release()`` (or call) removes exactly that callback
    - Releasing twice, or for an unknown worker, is a safe no-op
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .callbacks import invoke_isolated

if TYPE_CHECKING:
    from ..session import BridgeSession, WorkerCallback


class Subscription:
    """Handle returned by ``subscribe``; callable as the unsubscribe function."""

    __slots__ = ("_registry", "worker_id", "callback", "_released")

    def __init__(
        self,
        registry: WorkerSubscriptionRegistry,
        worker_id: str,
        callback: WorkerCallback,
    ) -> None:
        self._registry = registry
        self.worker_id = worker_id
        self.callback = callback
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Remove this subscription; later calls do nothing."""
        if self._released:
            return
        self._released = True
        self._registry._remove(self.worker_id, self.callback)

    def __call__(self) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"Subscription(worker_id={self.worker_id!r}, released={self._released})"


class WorkerSubscriptionRegistry:
    def __init__(self, session: BridgeSession) -> None:
        self._subscribers = session.worker_subscribers
        self._tasks = session.background_tasks

    def subscribe(self, worker_id: str, callback: WorkerCallback) -> Subscription:
        self._subscribers.setdefault(worker_id, set()).add(callback)
        return Subscription(self, worker_id, callback)

    def subscribers(self, worker_id: str) -> frozenset[WorkerCallback]:
        return frozenset(self._subscribers.get(worker_id, ()))

    def __contains__(self, worker_id: object) -> bool:
        return worker_id in self._subscribers

    def __len__(self) -> int:
        """Number of workers with at least one subscriber."""
        return len(self._subscribers)

    def emit(self, worker_id: str, payload: Any) -> int:
        """Invoke every subscriber of ``worker_id`` with ``payload``.

        Returns:
            Number of subscribers invoked (0 when the worker has none)
        """
        subscribers = self._subscribers.get(worker_id)
        if not subscribers:
            return 0
        # Snapshot so callbacks may unsubscribe while being invoked
        targets = list(subscribers)
        for callback in targets:
            invoke_isolated(
                callback, payload, label="Worker subscription handler", tasks=self._tasks
            )
        return len(targets)

    def _remove(self, worker_id: str, callback: WorkerCallback) -> None:
        subscribers = self._subscribers.get(worker_id)
        if subscribers is None:
            return
        subscribers.discard(callback)
        if not subscribers:
            del self._subscribers[worker_id]
