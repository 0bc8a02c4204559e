#!/usr/bin/env python3
"""Run a bridge against a local echo host and print what the view receives."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

import websockets

from viewhost.bridge import RuntimeConfig, start_bridge


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Bridge a view to a loopback echo host")
    p.add_argument("--port", type=int, default=8765)
    p.add_argument("--worker", default="worker-1")
    p.add_argument("--count", type=int, default=3, help="messages to send per channel")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()


async def echo_host(websocket) -> None:
    """Answer every view packet with the matching host-to-view packet."""
    async for frame in websocket:
        packet = json.loads(frame)
        if packet["kind"] == "message-from-view":
            reply = {"kind": "message-for-view", "payload": {"echo": packet["payload"]}}
        elif packet["kind"] == "worker-message-from-view":
            reply = {
                "kind": "worker-message-for-view",
                "workerId": packet["workerId"],
                "payload": {"echo": packet["payload"]},
            }
        else:
            reply = {"kind": "bridge-error", "message": f"unsupported kind {packet['kind']}"}
        await websocket.send(json.dumps(reply))


async def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    async with websockets.serve(echo_host, "127.0.0.1", args.port):
        origin = f"http://127.0.0.1:{args.port}"
        async with start_bridge(origin, RuntimeConfig(buildFlavor="dev")) as runtime:
            runtime.view.add_listener(lambda event: print(f"view  <- {event.data}"))
            unsubscribe = runtime.api.subscribe_to_worker_messages(
                args.worker, lambda payload: print(f"{args.worker} <- {payload}")
            )

            for i in range(args.count):
                runtime.api.send_message_from_view({"seq": i})
                runtime.api.send_worker_message_from_view(args.worker, {"seq": i})
            runtime.api.trigger_sentry_test_error()

            await asyncio.sleep(0.5)
            unsubscribe()
            print(f"build flavor: {runtime.api.get_build_flavor()}")


if __name__ == "__main__":
    asyncio.run(main())
