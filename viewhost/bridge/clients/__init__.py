"""High-level clients."""

from .bridge import BridgeFacade, BridgeRuntime, start_bridge

__all__ = ["BridgeFacade", "BridgeRuntime", "start_bridge"]
