# -*- coding: utf-8 -*-
"""
An example that streams image frames to the Gemini Live API and asks it to
describe the scene.
"""
import asyncio
import os
import sys

from visionlink import (
    ConnectorConfig,
    LiveVisionClient,
    setup_logger,
)
from visionlink.events import ConnectorEvent, ConnectorTurnDelta


def load_frames(directory: str) -> list[bytes]:
    """Load the JPEG frames of a directory, sorted by name."""
    frames = []
    for name in sorted(os.listdir(directory)):
        if name.lower().endswith((".jpg", ".jpeg")):
            with open(os.path.join(directory, name), "rb") as file:
                frames.append(file.read())
    return frames


async def main(directory: str) -> None:
    """The main entry point for the live vision example."""
    setup_logger("INFO")

    client = LiveVisionClient(
        api_key=os.getenv("GEMINI_API_KEY", ""),
        config=ConnectorConfig(video_fps=2),
    )

    def on_event(event: ConnectorEvent) -> None:
        if isinstance(event, ConnectorTurnDelta):
            print(event.text, end="", flush=True)

    client.subscribe(on_event)
    await client.connect()

    try:
        for frame in load_frames(directory):
            await client.offer_frame(frame)
            await asyncio.sleep(0.5)

        description = await client.describe_scene()
        print(f"\nScene: {description}")
    finally:
        await client.disconnect()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "."))
