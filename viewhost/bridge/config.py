"""Bridge configuration: defaults, transport tuning and injected runtime options.

This module centralizes the constants used by the connection layer and the
runtime configuration object supplied by the embedding page, so the
components themselves stay small and focused.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin, urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core.exceptions import ConfigError

DEFAULT_WS_PATH = "/ws"
DEFAULT_BUILD_FLAVOR = "prod"
CONFIG_ENV_VAR = "VIEWHOST_BRIDGE_CONFIG"

# Nested field of sentryInitOptions that carries the app session id
SENTRY_SESSION_ID_FIELD = "codexAppSessionId"

# Origin scheme -> socket scheme
SOCKET_SCHEMES = {
    "https": "wss",
    "http": "ws",
}


@dataclass
class TransportConfig:
    base_reconnect_delay: float = 0.5
    max_reconnect_delay: float = 5.0
    ping_interval: float | None = 20.0
    ping_timeout: float | None = 20.0
    close_timeout: float | None = 10.0
    max_size: int | None = None  # bytes; None = websockets default
    max_queue: int | None = None  # frames; None = websockets default


class RuntimeConfig(BaseModel):
    """Options injected by the embedding page before the bridge starts.

    Field names follow the page's camelCase keys; snake_case names are
    accepted as well. Unknown keys are ignored.
    """

    ws_path: str | None = Field(default=None, alias="wsPath")
    sentry_init_options: dict[str, Any] | None = Field(default=None, alias="sentryInitOptions")
    app_session_id: str | None = Field(default=None, alias="appSessionId")
    build_flavor: str = Field(default=DEFAULT_BUILD_FLAVOR, alias="buildFlavor")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("ws_path", mode="before")
    @classmethod
    def validate_ws_path(cls, v: Any) -> str | None:
        """Anything but a non-empty string means "use the default path"."""
        if isinstance(v, str) and v:
            return v
        return None

    @field_validator("build_flavor", mode="before")
    @classmethod
    def validate_build_flavor(cls, v: Any) -> Any:
        return DEFAULT_BUILD_FLAVOR if v is None else v

    @property
    def effective_ws_path(self) -> str:
        return self.ws_path or DEFAULT_WS_PATH

    @property
    def effective_app_session_id(self) -> str | None:
        """Explicit session id, else the one nested in the Sentry options."""
        if self.app_session_id is not None:
            return self.app_session_id
        if self.sentry_init_options is not None:
            return self.sentry_init_options.get(SENTRY_SESSION_ID_FIELD)
        return None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> RuntimeConfig:
        """Build a config from an already-decoded mapping.

        Raises:
            ConfigError: If the mapping does not match the expected shape
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError(f"Runtime config must be an object, got {type(data).__name__}")
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(f"Invalid runtime config: {e}") from e

    @classmethod
    def from_env(cls, name: str = CONFIG_ENV_VAR) -> RuntimeConfig:
        """Load the config from a JSON object stored in an environment variable.

        An unset or empty variable yields the defaults.

        Raises:
            ConfigError: If the value is not a JSON object or fails validation
        """
        raw = os.environ.get(name, "").strip()
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ConfigError(f"{name} is not valid JSON: {e}", source=name) from e
        if not isinstance(data, dict):
            raise ConfigError(f"{name} must hold a JSON object", source=name)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid runtime config in {name}: {e}", source=name) from e


def build_ws_url(origin: str, ws_path: str = DEFAULT_WS_PATH) -> str:
    """Derive the socket URL from the page origin and the configured path.

    Examples:
        >>> build_ws_url("https://app.example")
        'wss://app.example/ws'
        >>> build_ws_url("http://127.0.0.1:8080", "/bridge")
        'ws://127.0.0.1:8080/bridge'
    """
    parts = urlsplit(origin)
    if not parts.netloc:
        raise ConfigError(f"Origin has no host: {origin!r}")
    scheme = SOCKET_SCHEMES.get(parts.scheme.lower(), "ws")
    return urljoin(f"{scheme}://{parts.netloc}/", ws_path)
