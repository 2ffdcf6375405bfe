# -*- coding: utf-8 -*-
"""
An example that chats with an agent gateway and prints its events.
"""
import asyncio
import os

from visionlink import RPCClient, setup_logger
from visionlink.events import ConnectorEvent, ConnectorServerEvent


async def main() -> None:
    """The main entry point for the gateway chat."""
    setup_logger("INFO")

    client = RPCClient(
        os.getenv("GATEWAY_URL", "ws://127.0.0.1:18789"),
        token=os.getenv("GATEWAY_TOKEN"),
    )

    def on_event(event: ConnectorEvent) -> None:
        if isinstance(event, ConnectorServerEvent):
            print(f"[{event.name}] {event.payload}")

    client.subscribe(on_event)
    await client.connect()

    try:
        while True:
            text = await asyncio.to_thread(input, "User: ")
            if text == "exit":
                break
            payload = await client.send_chat(text)
            print(f"Accepted: {payload}")
    finally:
        await client.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
