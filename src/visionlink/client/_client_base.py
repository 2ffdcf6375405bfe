# -*- coding: utf-8 -*-
"""The base class of the backend clients.

A client owns at most one live connection session at a time. It forwards
the session events to its subscribers, paces the outbound media frames and
replaces the session with a new one when the connection faults.
"""
import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

from .._logging import logger
from ..config import ConnectorConfig
from ..connection import (
    BackoffPolicy,
    ConnectionSessionBase,
    ConnectionState,
    FrameThrottle,
    ReconnectController,
    ThrottleDecision,
    TransportBase,
    WebSocketTransport,
)
from ..events import (
    ConnectorEvent,
    ConnectorEventCallback,
    ConnectorReconnectExhausted,
    ConnectorReconnectScheduled,
    ConnectorStateChanged,
)
from ..exception import (
    ConnectionFault,
    NotConnected,
    ReconnectExhausted,
)

# Type alias for the transport factory, called with the url and headers
TransportFactory = Callable[[str, dict[str, str]], TransportBase]


class BackendClientBase(ABC):
    """Base class of the clients of a streaming backend.

    Usage:
        .. code-block:: python

            client = RPCClient("wss://gateway.example.com/ws", token="xxx")

            def on_event(event: ConnectorEvent) -> None:
                print(f"Received: {event.type}")

            unsubscribe = client.subscribe(on_event)
            await client.connect()
            payload = await client.call("chat.send", {"message": "hi"})
            await client.disconnect()
    """

    def __init__(
        self,
        config: ConnectorConfig | None = None,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config (`ConnectorConfig | None`, optional):
                The timing configuration. The defaults are used if not
                given.
            transport_factory (`TransportFactory | None`, optional):
                Create the transport of each new session from the url and
                headers. Defaults to `WebSocketTransport`.
        """
        self.config = config or ConnectorConfig()
        self.transport_factory = transport_factory or WebSocketTransport

        self.frames_sent = 0

        self._session: ConnectionSessionBase | None = None
        self._subscribers: list[ConnectorEventCallback] = []
        self._lifecycle_lock = asyncio.Lock()
        self._closed_by_user = False

        self._throttle = FrameThrottle(self.config.video_fps)
        self._reconnect = ReconnectController(
            BackoffPolicy(
                base=self.config.backoff_base,
                cap=self.config.backoff_cap,
                max_attempts=self.config.max_reconnect_attempts,
            ),
            attempt=self._reconnect_attempt,
            on_exhausted=self._on_reconnect_exhausted,
            on_scheduled=self._on_reconnect_scheduled,
        )

    # =========================================================================
    # Abstract Methods - Subclasses Must Implement
    # =========================================================================

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the backend name used in logs, e.g. 'gateway' or 'gemini'."""

    @abstractmethod
    def _get_websocket_url(self) -> str:
        """Get the WebSocket endpoint URL.

        Returns:
            `str`:
                The WebSocket endpoint URL.
        """

    @abstractmethod
    def _get_headers(self) -> dict[str, str]:
        """Get the headers of the opening handshake.

        Returns:
            `dict[str, str]`:
                The authentication headers.
        """

    @abstractmethod
    def _create_session(
        self,
        transport: TransportBase,
    ) -> ConnectionSessionBase:
        """Create a new session over the given transport, see
        `_session_kwargs` for the callbacks to wire."""

    @property
    def supports_media(self) -> bool:
        """Whether the backend accepts streamed media frames."""
        return False  # Override in subclass if supported

    def _carry_over(self, previous: ConnectionSessionBase) -> None:
        """Keep what the next session needs from the superseded one."""

    async def _send_media(
        self,
        session: ConnectionSessionBase,
        data: bytes,
        mime_type: str,
    ) -> None:
        """Send one media frame over the session. Only called when
        `supports_media` is True."""
        raise NotImplementedError(
            f"{self.provider_name} does not support media frames",
        )

    # =========================================================================
    # Connection Management
    # =========================================================================

    @property
    def state(self) -> ConnectionState:
        """The state of the current session."""
        if self._session is None:
            return ConnectionState.DISCONNECTED
        return self._session.state

    @property
    def is_ready(self) -> bool:
        """Whether calls, turns and media may flow."""
        return self.state is ConnectionState.READY

    async def connect(self) -> None:
        """Open a new session, superseding the current one if any.

        If the attempt fails and reconnection is enabled, further attempts
        are scheduled in the background.

        Raises:
            `ConnectionFault`:
                The fault of the failed attempt.
        """
        self._closed_by_user = False
        self._reconnect.cancel()
        # A user retry starts with a fresh attempt budget
        self._reconnect.reset()

        logger.info("Connecting to %s...", self.provider_name)
        await self._open_session()
        self._reconnect.reset()
        logger.info("%s client connected", self.provider_name)

    async def disconnect(self) -> None:
        """Close the current session and stop reconnecting. Pending calls
        fail with `ConnectionLost`."""
        self._closed_by_user = True
        self._reconnect.cancel()

        async with self._lifecycle_lock:
            if self._session is not None:
                await self._session.close()

        logger.info("%s client disconnected", self.provider_name)

    def set_network_available(self, available: bool) -> None:
        """Report whether the host has a usable network path. Reconnection
        is suspended while it has none.

        Args:
            available (`bool`):
                The network reachability reported by the host.
        """
        self._reconnect.set_network_available(available)

    def subscribe(
        self,
        handler: ConnectorEventCallback,
    ) -> Callable[[], None]:
        """Register a handler of the connector events.

        Args:
            handler (`ConnectorEventCallback`):
                Called with every event, in order.

        Returns:
            `Callable[[], None]`:
                A function removing the handler.
        """
        self._subscribers.append(handler)

        def unsubscribe() -> None:
            if handler in self._subscribers:
                self._subscribers.remove(handler)

        return unsubscribe

    async def _open_session(self) -> None:
        async with self._lifecycle_lock:
            previous, self._session = self._session, None
            if previous is not None:
                # Stale from now on, its callbacks are ignored
                await previous.close()
                self._carry_over(previous)
            self._throttle.reset()

            transport = self.transport_factory(
                self._get_websocket_url(),
                self._get_headers(),
            )
            session = self._create_session(transport)
            self._session = session

            try:
                await session.open()
            except BaseException:
                # No-op if the session already faulted
                await session.close()
                raise

    def _require_session(self) -> ConnectionSessionBase:
        session = self._session
        if session is None or not session.is_ready:
            raise NotConnected(
                f"{self.provider_name} client is {self.state.value}",
            )
        return session

    def _session_kwargs(self) -> dict[str, Any]:
        """The config and callbacks to pass to every new session."""
        return {
            "config": self.config,
            "on_event": self._emit_event,
            "on_state_change": self._on_session_state_change,
            "on_fault": self._on_session_fault,
            "on_closed_by_server": self._on_session_closed_by_server,
        }

    # =========================================================================
    # Media Streaming
    # =========================================================================

    async def offer_frame(
        self,
        data: bytes,
        mime_type: str = "image/jpeg",
        now: float | None = None,
    ) -> ThrottleDecision:
        """Offer a media frame, e.g. a camera frame, for streaming.

        The frame is dropped while the client is not ready, when the
        backend does not support media, or when it arrives before the
        throttle interval has elapsed.

        Args:
            data (`bytes`):
                The encoded frame, e.g. JPEG bytes.
            mime_type (`str`, defaults to `"image/jpeg"`):
                The MIME type of the frame.
            now (`float | None`, optional):
                The monotonic timestamp of the frame. Defaults to the
                current time.

        Returns:
            `ThrottleDecision`:
                Whether the frame was sent.
        """
        session = self._session
        if session is None or not session.is_ready:
            return ThrottleDecision.DROP

        if not self.supports_media:
            logger.warning(
                "%s does not support media frames, dropping",
                self.provider_name,
            )
            return ThrottleDecision.DROP

        now = time.monotonic() if now is None else now
        if self._throttle.offer(data, now) is ThrottleDecision.DROP:
            return ThrottleDecision.DROP

        try:
            await self._send_media(session, data, mime_type)
        except (NotConnected, ConnectionFault) as e:
            logger.debug("Dropping media frame: %s", e)
            return ThrottleDecision.DROP

        self.frames_sent += 1
        if self.frames_sent % 10 == 0:
            logger.info("Sent %d media frames", self.frames_sent)
        return ThrottleDecision.EMIT

    # =========================================================================
    # Session Callbacks
    # =========================================================================

    def _on_session_state_change(
        self,
        session: ConnectionSessionBase,
        state: ConnectionState,
        previous: ConnectionState,
        fault: ConnectionFault | None,
    ) -> None:
        if session is not self._session:
            return
        self._emit_event(
            ConnectorStateChanged(state=state, previous=previous, error=fault),
        )

    def _on_session_fault(
        self,
        session: ConnectionSessionBase,
        fault: ConnectionFault,
    ) -> None:
        if session is not self._session:
            return
        logger.warning("%s connection faulted: %s", self.provider_name, fault)
        self._schedule_reconnect()

    def _on_session_closed_by_server(
        self,
        session: ConnectionSessionBase,
    ) -> None:
        if session is not self._session:
            return
        logger.info("%s closed the session", self.provider_name)
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if self._closed_by_user or not self.config.reconnect_enabled:
            return
        self._reconnect.schedule()

    async def _reconnect_attempt(self) -> bool:
        try:
            await self._open_session()
        except ConnectionFault as e:
            logger.warning("Reconnection attempt failed: %s", e)
            return False
        return True

    def _on_reconnect_scheduled(self, attempt: int, delay: float) -> None:
        self._emit_event(
            ConnectorReconnectScheduled(attempt=attempt, delay=delay),
        )

    def _on_reconnect_exhausted(self, error: ReconnectExhausted) -> None:
        self._emit_event(
            ConnectorReconnectExhausted(
                attempts=error.attempts,
                message=error.message,
            ),
        )

    def _emit_event(self, event: ConnectorEvent) -> None:
        """Deliver an event to every subscriber.

        Args:
            event (`ConnectorEvent`):
                The event to deliver.
        """
        for handler in list(self._subscribers):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    "Error in event subscriber: %s",
                    e,
                    exc_info=True,
                )
