"""Unit tests for BridgeFacade, BridgeRuntime and start_bridge."""

from __future__ import annotations

import json
import sys
from unittest.mock import Mock

import pytest

from viewhost.bridge import (
    BridgeSession,
    ConfigError,
    RuntimeConfig,
    TransportState,
    start_bridge,
)


def _pending_frames(runtime) -> list[dict]:
    return [json.loads(frame) for frame in runtime.queue.pending]


class TestSubmissions:
    """Test fire-and-forget operations before a socket is open."""

    @pytest.mark.asyncio
    async def test_send_message_from_view_is_buffered(self, runtime):
        runtime.api.send_message_from_view({"type": "ping"})

        assert _pending_frames(runtime) == [{"kind": "message-from-view", "payload": {"type": "ping"}}]

    @pytest.mark.asyncio
    async def test_send_worker_message_from_view(self, runtime):
        runtime.api.send_worker_message_from_view("w1", [1, 2])

        assert _pending_frames(runtime) == [
            {"kind": "worker-message-from-view", "workerId": "w1", "payload": [1, 2]}
        ]

    @pytest.mark.asyncio
    async def test_trigger_sentry_test_error(self, runtime):
        runtime.api.trigger_sentry_test_error()

        assert _pending_frames(runtime) == [{"kind": "trigger-sentry-test"}]

    @pytest.mark.asyncio
    async def test_messages_sent_after_connect(self, runtime, connector, settled):
        runtime.connection.connect()
        await settled()

        runtime.api.send_message_from_view("live")
        await settled()

        frames = connector.transports[0].sent
        assert [json.loads(f)["payload"] for f in frames] == ["live"]
        await runtime.close()


class TestNativeOnlyFeatures:
    """Test operations a socket backend cannot provide."""

    def test_window_type(self, runtime):
        assert runtime.api.window_type == "web"

    def test_get_path_for_file_returns_none(self, runtime):
        assert runtime.api.get_path_for_file(object()) is None
        assert runtime.api.get_path_for_file() is None

    @pytest.mark.asyncio
    async def test_show_context_menu_returns_none(self, runtime):
        assert await runtime.api.show_context_menu([{"label": "Copy"}], x=1, y=2) is None
        assert len(runtime.queue) == 0


class TestConfigAccessors:
    """Test accessors over the injected runtime configuration."""

    def _api(self, config: RuntimeConfig):
        from viewhost.bridge import BridgeRuntime

        session = BridgeSession.create("https://app.example", config)
        return BridgeRuntime(session).api

    def test_defaults(self):
        api = self._api(RuntimeConfig())

        assert api.get_sentry_init_options() is None
        assert api.get_app_session_id() is None
        assert api.get_build_flavor() == "prod"

    def test_explicit_values(self):
        api = self._api(
            RuntimeConfig.from_mapping(
                {
                    "sentryInitOptions": {"dsn": "https://key@sentry.example/1"},
                    "appSessionId": "explicit",
                    "buildFlavor": "dev",
                }
            )
        )

        assert api.get_sentry_init_options() == {"dsn": "https://key@sentry.example/1"}
        assert api.get_app_session_id() == "explicit"
        assert api.get_build_flavor() == "dev"

    def test_app_session_id_falls_back_to_sentry_options(self):
        api = self._api(RuntimeConfig(sentryInitOptions={"codexAppSessionId": "nested"}))

        assert api.get_app_session_id() == "nested"

    def test_sentry_options_without_session_id(self):
        api = self._api(RuntimeConfig(sentryInitOptions={"dsn": "x"}))

        assert api.get_app_session_id() is None


class TestWorkerSubscriptions:
    """Test the subscribe handle returned by the facade."""

    def test_handle_unsubscribes(self, runtime):
        received = []
        unsubscribe = runtime.api.subscribe_to_worker_messages("w1", received.append)
        runtime.registry.emit("w1", "first")

        unsubscribe()
        runtime.registry.emit("w1", "second")

        assert received == ["first"]
        assert "w1" not in runtime.registry


class TestStartBridge:
    """Test the entry point wiring."""

    @pytest.mark.asyncio
    async def test_connects_to_configured_path(self, connector, settled):
        runtime = start_bridge(
            "https://app.example/index.html",
            RuntimeConfig(wsPath="/bridge"),
            suppress_transient_errors=False,
        )
        await settled()

        assert connector.urls == ["wss://app.example/bridge"]
        assert runtime.connection.state == TransportState.OPEN
        await runtime.close()

    @pytest.mark.asyncio
    async def test_config_loaded_from_environment(self, connector, settled, monkeypatch):
        monkeypatch.setenv("VIEWHOST_BRIDGE_CONFIG", '{"wsPath": "/env", "buildFlavor": "nightly"}')

        runtime = start_bridge("http://localhost:3000", suppress_transient_errors=False)
        await settled()

        assert connector.urls == ["ws://localhost:3000/env"]
        assert runtime.api.get_build_flavor() == "nightly"
        await runtime.close()

    @pytest.mark.asyncio
    async def test_invalid_origin_raises(self, connector):
        with pytest.raises(ConfigError):
            start_bridge("not an origin", RuntimeConfig(), suppress_transient_errors=False)
        assert connector.urls == []

    @pytest.mark.asyncio
    async def test_supplied_view_receives_status(self, connector, settled):
        from viewhost.bridge import ViewEventTarget

        view = ViewEventTarget()
        events = []
        view.add_listener(events.append)

        runtime = start_bridge(
            "http://localhost", RuntimeConfig(), view=view, suppress_transient_errors=False
        )
        await settled()

        assert runtime.view is view
        assert events[0].data["method"] == "client-status-changed"
        await runtime.close()

    @pytest.mark.asyncio
    async def test_suppressor_installed_until_close(self, connector, settled, monkeypatch):
        original_hook = Mock()
        monkeypatch.setattr(sys, "excepthook", original_hook)

        runtime = start_bridge("http://localhost", RuntimeConfig())
        await settled()
        assert sys.excepthook is not original_hook

        await runtime.close()
        assert sys.excepthook is original_hook

    @pytest.mark.asyncio
    async def test_async_context_manager_closes(self, connector, settled):
        async with start_bridge(
            "http://localhost", RuntimeConfig(), suppress_transient_errors=False
        ) as runtime:
            await settled()
            transport = connector.transports[0]
            assert runtime.connection.is_open

        assert transport.closed
        assert runtime.session.shut_down
        assert runtime.connection.state == TransportState.CLOSED
