"""Event target standing in for the view's global scope."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from ..models.events import ViewMessageEvent
from .callbacks import invoke_isolated

ViewListener = Callable[[ViewMessageEvent], Any]


class ViewEventTarget:
    """Delivers message events to listeners registered by view code.

    Listeners run in registration order; registering the same listener twice
    has no effect, matching ``addEventListener``.
    """

    def __init__(self) -> None:
        self._listeners: list[ViewListener] = []
        # Listener coroutines still running
        self._tasks: set[asyncio.Task[Any]] = set()

    def add_listener(self, listener: ViewListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ViewListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, data: Any) -> ViewMessageEvent:
        """Dispatch one message event carrying ``data`` verbatim."""
        event = ViewMessageEvent(data=data)
        for listener in list(self._listeners):
            invoke_isolated(listener, event, label="View message listener", tasks=self._tasks)
        return event
