"""Isolated invocation of page-supplied callbacks.

Callbacks may be plain functions or coroutine functions. A failing callback
is logged and never affects its siblings or the caller.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from functools import partial
from typing import Any

logger = logging.getLogger(__name__)


def invoke_isolated(
    callback: Callable[[Any], Any],
    arg: Any,
    *,
    label: str,
    tasks: set[asyncio.Task[Any]],
) -> None:
    """Call ``callback(arg)``; schedule the result if it is awaitable.

    Scheduled coroutines are held in ``tasks`` until they finish.
    """
    try:
        result = callback(arg)
    except Exception as e:
        logger.warning(f"{label} failed: {e}", exc_info=True)
        return

    if inspect.isawaitable(result):
        task = asyncio.ensure_future(result)
        tasks.add(task)
        task.add_done_callback(partial(_finish, label, tasks))


def _finish(label: str, tasks: set[asyncio.Task[Any]], task: asyncio.Task[Any]) -> None:
    tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning(f"{label} failed: {exc}", exc_info=exc)
