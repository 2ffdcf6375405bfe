# -*- coding: utf-8 -*-
"""The message oriented duplex transports."""
from abc import ABC, abstractmethod
from typing import AsyncIterator, Awaitable

import websockets
from websockets import State
from websockets.asyncio.client import ClientConnection

from .._logging import logger
from ..exception import ConnectionLost


class TransportBase(ABC):
    """A message oriented duplex channel owned by exactly one connection.

    The connection opens the transport, polls `is_open` until it reports
    ready, consumes `messages()` in its receive loop and writes frames
    with `send()` from any number of concurrent callers.
    """

    @abstractmethod
    async def open(self) -> None:
        """Open the channel."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the channel is ready to carry messages."""

    @abstractmethod
    async def send(self, data: str | bytes) -> None:
        """Send one message.

        Args:
            data (`str | bytes`):
                A text or binary message.

        Raises:
            `ConnectionLost`:
                If the channel is closed or fails.
        """

    @abstractmethod
    def messages(self) -> AsyncIterator[str | bytes]:
        """Iterate over the inbound messages. The iteration ends when the
        channel is closed normally.

        Raises:
            `ConnectionLost`:
                If the channel fails.
        """

    @abstractmethod
    async def ping(self) -> Awaitable[object]:
        """Send a transport level heartbeat.

        Returns:
            `Awaitable[object]`:
                An awaitable that completes when the heartbeat is answered.

        Raises:
            `ConnectionLost`:
                If the channel is closed or fails.
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the channel and release its resources."""


class WebSocketTransport(TransportBase):
    """A transport over a secured websocket connection.

    The library keepalive is disabled since the connection runs its own
    heartbeat.
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        max_size: int | None = 16 * 2**20,
    ) -> None:
        """Initialize the websocket transport.

        Args:
            url (`str`):
                The websocket endpoint URL.
            headers (`dict[str, str] | None`, optional):
                Additional HTTP headers of the opening handshake.
            max_size (`int | None`, defaults to 16 MiB):
                The maximum size of an inbound message.
        """
        self.url = url
        self.headers = headers or {}
        self.max_size = max_size

        self._websocket: ClientConnection | None = None

    async def open(self) -> None:
        """Open the websocket connection."""
        try:
            self._websocket = await websockets.connect(
                self.url,
                additional_headers=self.headers,
                ping_interval=None,
                max_size=self.max_size,
            )
        except (OSError, websockets.exceptions.WebSocketException) as e:
            raise ConnectionLost(f"Failed to open websocket: {e}") from e

    @property
    def is_open(self) -> bool:
        """Whether the websocket is open."""
        return (
            self._websocket is not None
            and self._websocket.state == State.OPEN
        )

    async def send(self, data: str | bytes) -> None:
        """Send one websocket message."""
        if self._websocket is None:
            raise ConnectionLost("WebSocket is not connected")

        try:
            await self._websocket.send(data)
        except websockets.exceptions.ConnectionClosed as e:
            raise ConnectionLost(f"WebSocket closed: {e}") from e

    async def messages(self) -> AsyncIterator[str | bytes]:
        """Iterate over the inbound websocket messages."""
        if self._websocket is None:
            raise ConnectionLost("WebSocket is not connected")

        try:
            async for message in self._websocket:
                yield message
        except websockets.exceptions.ConnectionClosedError as e:
            raise ConnectionLost(f"WebSocket closed: {e}") from e

    async def ping(self) -> Awaitable[object]:
        """Send a websocket ping."""
        if self._websocket is None:
            raise ConnectionLost("WebSocket is not connected")

        try:
            return await self._websocket.ping()
        except websockets.exceptions.ConnectionClosed as e:
            raise ConnectionLost(f"WebSocket closed: {e}") from e

    async def close(self) -> None:
        """Close the websocket connection."""
        websocket, self._websocket = self._websocket, None
        if websocket is None:
            return

        try:
            await websocket.close()
        except Exception as e:
            logger.error("Close error: %s", e)
