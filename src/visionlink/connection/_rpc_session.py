# -*- coding: utf-8 -*-
"""The connection of the RPC dialect."""
import asyncio

from .._logging import logger
from ..events import ConnectorServerEvent
from ..exception import ConnectionFault
from ..protocol import (
    EventFrame,
    RequestFrame,
    ResponseFrame,
    decode_rpc_frame,
    encode_rpc_frame,
)
from ..types import JSONObject
from ..value import encode_value
from ._session_base import ConnectionSessionBase


class RPCConnectionSession(ConnectionSessionBase):
    """A connection exchanging request, response and event frames. It is
    ready as soon as the transport is open."""

    requires_handshake = False

    last_seq: int | None = None
    """The sequence number of the last server event, if it had one."""

    async def send_call(
        self,
        method: str,
        params: JSONObject | None = None,
        timeout: float | None = None,
    ) -> "asyncio.Future[JSONObject]":
        """Send a request without waiting for its response.

        Args:
            method (`str`):
                The method name, e.g. "chat.send".
            params (`JSONObject | None`, optional):
                The parameters of the call.
            timeout (`float | None`, optional):
                The deadline in seconds, defaults to `call_timeout`.

        Returns:
            `asyncio.Future[JSONObject]`:
                The completion handle, resolved with the response payload,
                or failed with `RemoteCallError`, `CallTimeout` or
                `ConnectionLost`.

        Raises:
            `ValueEncodingError`:
                If the params cannot be encoded.
            `NotConnected`:
                If the connection is not ready.
        """
        params = params or {}
        # Fail before an id is allocated
        encode_value(params)

        async with self._lock:
            self._ensure_ready()
            pending = self.correlator.issue(method, timeout)

        frame = RequestFrame(id=pending.id, method=method, params=params)
        try:
            await self._send(encode_rpc_frame(frame))
        except ConnectionFault:
            # The teardown already failed the pending call
            pass
        return pending.future

    async def call(
        self,
        method: str,
        params: JSONObject | None = None,
        timeout: float | None = None,
    ) -> JSONObject:
        """Send a request and wait for its response payload. See
        `send_call` for the arguments and errors."""
        future = await self.send_call(method, params, timeout)
        return await future

    async def _handle_message(self, message: str | bytes) -> None:
        frame = decode_rpc_frame(message)

        if isinstance(frame, ResponseFrame):
            self.correlator.resolve(frame)

        elif isinstance(frame, EventFrame):
            self._check_seq(frame)
            self._emit(
                ConnectorServerEvent(
                    name=frame.event,
                    payload=frame.payload or {},
                    seq=frame.seq,
                ),
            )

        else:
            logger.debug(
                "Ignoring request %s (%s) from the server",
                frame.id,
                frame.method,
            )

    def _check_seq(self, frame: EventFrame) -> None:
        """Log gaps and regressions in the event sequence."""
        if frame.seq is None:
            return

        if self.last_seq is not None:
            if frame.seq <= self.last_seq:
                logger.warning(
                    "Event sequence went back from %d to %d",
                    self.last_seq,
                    frame.seq,
                )
            elif frame.seq > self.last_seq + 1:
                logger.warning(
                    "Missed %d event(s) between %d and %d",
                    frame.seq - self.last_seq - 1,
                    self.last_seq,
                    frame.seq,
                )
        self.last_seq = frame.seq
