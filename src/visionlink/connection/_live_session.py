# -*- coding: utf-8 -*-
"""The connection of the session dialect, used by the live multimodal
model API."""
import asyncio
from collections import deque

from .._logging import logger
from ..events import (
    ConnectorGoAway,
    ConnectorTurnComplete,
    ConnectorTurnDelta,
)
from ..exception import ConnectionFault, SetupFailed
from ..protocol import (
    ResponseFrame,
    SessionMessageType,
    build_client_content,
    build_realtime_input,
    extract_turn_text,
    is_turn_complete,
    parse_session_message,
)
from ..types import JSONObject
from ..value import encode_value
from ._session_base import ConnectionSessionBase
from ._state import ConnectionState
from ._transport import TransportBase


class LiveConnectionSession(ConnectionSessionBase):
    """A connection that sends a `setup` message first and is ready once
    the server answers `setupComplete`.

    The server answers the client turns in order, so each completed server
    turn resolves the oldest pending turn through the correlator.
    """

    requires_handshake = True

    def __init__(
        self,
        transport: TransportBase,
        setup_message: JSONObject,
        **kwargs: object,
    ) -> None:
        """Initialize the session.

        Args:
            transport (`TransportBase`):
                The transport, owned by this session from now on.
            setup_message (`JSONObject`):
                The setup message, see `build_setup_message`.
            **kwargs:
                The other arguments of `ConnectionSessionBase`.
        """
        super().__init__(transport, **kwargs)
        self.setup_message = setup_message
        self.resumption_handle: str | None = None

        self._setup_complete: asyncio.Future[None] | None = None
        self._turn_ids: deque[str] = deque()
        self._turn_text: list[str] = []

    async def send_turn(
        self,
        parts: list[JSONObject],
        timeout: float | None = None,
    ) -> "asyncio.Future[JSONObject]":
        """Send a complete client turn without waiting for the answer.

        Args:
            parts (`list[JSONObject]`):
                The content parts of the turn.
            timeout (`float | None`, optional):
                The deadline in seconds, defaults to `call_timeout`.

        Returns:
            `asyncio.Future[JSONObject]`:
                The completion handle, resolved with ``{"text": ...}`` when
                the server completes its turn.

        Raises:
            `ValueEncodingError`:
                If the parts cannot be encoded.
            `NotConnected`:
                If the session is not ready.
        """
        data = encode_value(build_client_content(parts)).decode("utf-8")

        async with self._lock:
            self._ensure_ready()
            pending = self.correlator.issue(
                SessionMessageType.CLIENT_CONTENT.value,
                timeout,
            )
            self._turn_ids.append(pending.id)

        try:
            await self._send(data)
        except ConnectionFault:
            # The teardown already failed the pending turn
            pass
        return pending.future

    async def send_media(self, data: bytes, mime_type: str) -> None:
        """Stream one media chunk, e.g. a camera frame.

        Raises:
            `NotConnected`:
                If the session is not ready.
            `ConnectionLost`:
                If the transport fails.
        """
        self._ensure_ready()
        await self._send(
            encode_value(build_realtime_input(data, mime_type)).decode(
                "utf-8",
            ),
        )

    async def _perform_handshake(self) -> None:
        self._setup_complete = asyncio.get_running_loop().create_future()
        await self._send(encode_value(self.setup_message).decode("utf-8"))

        timeout = self.config.setup_timeout
        try:
            await asyncio.wait_for(self._setup_complete, timeout)
        except asyncio.TimeoutError as e:
            raise SetupFailed(
                f"No setupComplete received within {timeout:g}s",
            ) from e

    async def _handle_message(self, message: str | bytes) -> None:
        parsed = parse_session_message(message)

        if parsed.type is SessionMessageType.SETUP_COMPLETE:
            if (
                self._setup_complete is not None
                and not self._setup_complete.done()
            ):
                logger.info("Session %s setup complete", self.id)
                self._setup_complete.set_result(None)
            return

        if self._state is ConnectionState.HANDSHAKE_IN_PROGRESS:
            logger.warning(
                "Dropping '%s' received before setupComplete",
                parsed.type.value,
            )
            return

        if parsed.type is SessionMessageType.SERVER_CONTENT:
            self._handle_server_content(parsed.body)

        elif parsed.type is SessionMessageType.GO_AWAY:
            time_left = parsed.body.get("timeLeft")
            logger.warning("Server going away, time left: %s", time_left)
            if not isinstance(time_left, str):
                time_left = None
            self._emit(ConnectorGoAway(time_left=time_left))
            await self.close()
            self._notify_closed_by_server()

        elif parsed.type is SessionMessageType.SESSION_RESUMPTION_UPDATE:
            handle = parsed.body.get("newHandle")
            if parsed.body.get("resumable") and isinstance(handle, str):
                self.resumption_handle = handle

        else:
            logger.debug("Ignoring '%s' from the server", parsed.type.value)

    def _handle_server_content(self, body: JSONObject) -> None:
        turn_id = self._turn_ids[0] if self._turn_ids else None

        # Both raise MalformedPayload before any state is touched
        text = extract_turn_text(body)
        complete = is_turn_complete(body)

        if text:
            self._turn_text.append(text)
            self._emit(ConnectorTurnDelta(text=text, turn_id=turn_id))

        if not complete:
            return

        full_text = "".join(self._turn_text).strip()
        self._turn_text = []
        if self._turn_ids:
            self._turn_ids.popleft()
            self.correlator.resolve(
                ResponseFrame(
                    id=turn_id,
                    ok=True,
                    payload={"text": full_text},
                ),
            )
        self._emit(ConnectorTurnComplete(text=full_text, turn_id=turn_id))

    def _on_teardown(self, error: ConnectionFault) -> None:
        if (
            self._setup_complete is not None
            and not self._setup_complete.done()
        ):
            self._setup_complete.set_exception(error)
        self._turn_ids.clear()
        self._turn_text = []
