"""Runtime dispatch: view event target, worker registry and inbound router."""

from .callbacks import invoke_isolated
from .registry import Subscription, WorkerSubscriptionRegistry
from .router import InboundRouter
from .view import ViewEventTarget, ViewListener

__all__ = [
    "InboundRouter",
    "Subscription",
    "ViewEventTarget",
    "ViewListener",
    "WorkerSubscriptionRegistry",
    "invoke_isolated",
]
