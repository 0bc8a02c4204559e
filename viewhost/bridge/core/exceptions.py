"""Custom exception hierarchy."""

from __future__ import annotations


class BridgeError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigError(BridgeError):
    """Runtime configuration could not be loaded or validated.

    Raised when the injected configuration is not a JSON object or does not
    match the shape of RuntimeConfig.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class FrameDecodeError(BridgeError):
    """Inbound frame is not a structurally valid packet.

    The connection layer drops such frames; the error never reaches page code.
    """

    def __init__(self, message: str, frame: str | bytes | None = None) -> None:
        super().__init__(message)
        self.frame = frame
