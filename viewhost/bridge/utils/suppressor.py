"""Filter for transient errors raised by stale view renders.

Installs two global hooks: ``sys.excepthook`` for uncaught errors and the
event loop's exception handler for task exceptions nobody retrieved (the
asyncio counterpart of an unhandled promise rejection). An error whose
message contains one of ``TRANSIENT_ERROR_PATTERNS`` is swallowed; every
other error goes to the handler that was installed before.

This is a noise filter, not a correctness mechanism. The pattern list is
fixed on purpose; note that generic entries such as "is not a function"
can also hide genuine defects.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from types import TracebackType
from typing import Any

logger = logging.getLogger(__name__)

TRANSIENT_ERROR_PATTERNS: tuple[str, ...] = (
    "Cannot read properties of undefined",
    "is not iterable",
    "is not a function",
    "reading 'map'",
    "reading 'find'",
    "reading 'push'",
    "reading 'filter'",
    "reading 'length'",
)


def is_transient_error(message: object) -> bool:
    if not isinstance(message, str):
        return False
    return any(pattern in message for pattern in TRANSIENT_ERROR_PATTERNS)


class ErrorSuppressor:
    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._previous_loop_handler: Any = None
        self._previous_excepthook: Any = None

    @property
    def installed(self) -> bool:
        return self._loop is not None

    def install(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Hook the given (or running) loop and the interpreter's excepthook."""
        if self.installed:
            return
        self._loop = loop or asyncio.get_running_loop()
        self._previous_loop_handler = self._loop.get_exception_handler()
        self._loop.set_exception_handler(self._handle_loop_exception)
        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._handle_uncaught

    def uninstall(self) -> None:
        """Restore the hooks that were active before ``install``."""
        if self._loop is None:
            return
        if self._loop.get_exception_handler() == self._handle_loop_exception:
            self._loop.set_exception_handler(self._previous_loop_handler)
        if sys.excepthook == self._handle_uncaught:
            sys.excepthook = self._previous_excepthook
        self._loop = None
        self._previous_loop_handler = None
        self._previous_excepthook = None

    def _handle_loop_exception(
        self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]
    ) -> None:
        exc = context.get("exception")
        message = str(exc) if exc is not None else context.get("message", "")
        if is_transient_error(message):
            logger.debug(f"Suppressed transient error: {message}")
            return
        if self._previous_loop_handler is not None:
            self._previous_loop_handler(loop, context)
        else:
            loop.default_exception_handler(context)

    def _handle_uncaught(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        if is_transient_error(str(exc)):
            logger.debug(f"Suppressed transient error: {exc}")
            return
        self._previous_excepthook(exc_type, exc, tb)
