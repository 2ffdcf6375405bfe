# -*- coding: utf-8 -*-
"""The base class of a single backend connection."""
import asyncio
from abc import ABC, abstractmethod
from typing import Callable

import shortuuid

from .._logging import logger
from ..config import ConnectorConfig
from ..events import ConnectorEvent, ConnectorEventCallback
from ..exception import (
    ConnectionFault,
    ConnectionLost,
    ConnectionTimeout,
    HeartbeatTimeout,
    MalformedPayload,
    NotConnected,
)
from ._correlation import CallCorrelator
from ._state import ConnectionState, TERMINATING_STATES, check_transition
from ._transport import TransportBase


StateChangeCallback = Callable[
    [
        "ConnectionSessionBase",
        ConnectionState,
        ConnectionState,
        ConnectionFault | None,
    ],
    None,
]
FaultCallback = Callable[["ConnectionSessionBase", ConnectionFault], None]
ClosedCallback = Callable[["ConnectionSessionBase"], None]


class ConnectionSessionBase(ABC):
    """One connection over one transport, from opening to teardown.

    A session instance is used once: after a fault or a close it stays in a
    terminal state and the owning client creates a new one to reconnect.
    All its pending calls are owned by `correlator` and are failed with
    `ConnectionLost` on teardown.

    Subclasses implement the dialect with `_handle_message` and, when
    `requires_handshake` is set, `_perform_handshake`.
    """

    requires_handshake: bool = False
    """Whether the session must be set up before it is ready."""

    def __init__(
        self,
        transport: TransportBase,
        config: ConnectorConfig | None = None,
        on_event: ConnectorEventCallback | None = None,
        on_state_change: StateChangeCallback | None = None,
        on_fault: FaultCallback | None = None,
        on_closed_by_server: ClosedCallback | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            transport (`TransportBase`):
                The transport, owned by this session from now on.
            config (`ConnectorConfig | None`, optional):
                The timing configuration.
            on_event (`ConnectorEventCallback | None`, optional):
                Called with the events received from the server.
            on_state_change (`StateChangeCallback | None`, optional):
                Called with the session, the new state, the previous state
                and the fault, if any, after every transition.
            on_fault (`FaultCallback | None`, optional):
                Called once the session is torn down by a fault.
            on_closed_by_server (`ClosedCallback | None`, optional):
                Called once the server gracefully closed the session.
        """
        self.id = shortuuid.uuid()
        self.config = config or ConnectorConfig()
        self.correlator = CallCorrelator(
            id_prefix=self.id,
            default_timeout=self.config.call_timeout,
        )
        self.fault: ConnectionFault | None = None

        self.last_inbound_at: float | None = None
        self.last_heartbeat_at: float | None = None

        self._transport = transport
        self._state = ConnectionState.DISCONNECTED
        self._lock = asyncio.Lock()

        self._on_event = on_event
        self._on_state_change = on_state_change
        self._on_fault = on_fault
        self._on_closed_by_server = on_closed_by_server

        self._receive_task: asyncio.Task[None] | None = None
        self._heartbeat_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> ConnectionState:
        """The current connection state."""
        return self._state

    @property
    def is_ready(self) -> bool:
        """Whether calls, turns and media may flow."""
        return self._state is ConnectionState.READY

    async def open(self) -> None:
        """Open the transport, perform the handshake if required, and start
        the heartbeat.

        Raises:
            `ConnectionTimeout`:
                If the transport is not ready within `connect_timeout`.
            `SetupFailed`:
                If the handshake is not acknowledged within `setup_timeout`.
            `ConnectionLost`:
                If the transport fails or the session is closed meanwhile.
        """
        self._set_state(ConnectionState.CONNECTING)

        try:
            await self._wait_transport_open()
        except ConnectionFault as e:
            await self._fail(e)
            raise
        self._check_still(ConnectionState.CONNECTING)

        self._receive_task = asyncio.create_task(self._receive_loop())

        if self.requires_handshake:
            self._set_state(ConnectionState.HANDSHAKE_IN_PROGRESS)
            try:
                await self._perform_handshake()
            except ConnectionFault as e:
                await self._fail(e)
                raise
            self._check_still(ConnectionState.HANDSHAKE_IN_PROGRESS)

        self._set_state(ConnectionState.READY)
        self._mark_inbound()
        self._heartbeat_task = asyncio.create_task(self._heartbeat_loop())

    async def close(self) -> None:
        """Close the session on user request. Pending calls fail with
        `ConnectionLost`. Closing a session that is already torn down is a
        no-op."""
        async with self._lock:
            if self._state in TERMINATING_STATES:
                return
            self._set_state(ConnectionState.CLOSING)
            self.correlator.cancel_all("The connection was closed")
            self._on_teardown(ConnectionLost("The connection was closed"))

        await self._release()
        self._set_state(ConnectionState.DISCONNECTED)

    async def _perform_handshake(self) -> None:
        """Set up the session once the transport is open."""

    @abstractmethod
    async def _handle_message(self, message: str | bytes) -> None:
        """Handle one inbound message.

        Raises:
            `MalformedPayload`:
                If the message cannot be parsed. It's logged and dropped.
        """

    def _on_teardown(self, error: ConnectionFault) -> None:
        """Fail the dialect specific waiters, called once on teardown."""

    async def _send(self, data: str | bytes) -> None:
        """Send a message, tearing the session down if the transport
        fails."""
        try:
            await self._transport.send(data)
        except ConnectionFault as e:
            await self._fail(e)
            raise

    def _ensure_ready(self) -> None:
        if self._state is not ConnectionState.READY:
            raise NotConnected(
                f"The connection is {self._state.value}, not ready",
            )

    async def _wait_transport_open(self) -> None:
        """Open the transport and poll until it reports ready."""
        loop = asyncio.get_running_loop()
        timeout = self.config.connect_timeout
        deadline = loop.time() + timeout

        open_task = asyncio.create_task(self._transport.open())
        try:
            while not self._transport.is_open:
                if open_task.done():
                    error = open_task.exception()
                    if isinstance(error, ConnectionFault):
                        raise error
                    if error is not None:
                        raise ConnectionLost(
                            f"Failed to open the transport: {error}",
                        ) from error
                    raise ConnectionLost("The transport closed while opening")

                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise ConnectionTimeout(
                        f"The transport was not ready after {timeout:g}s",
                    )
                await asyncio.wait(
                    {open_task},
                    timeout=min(self.config.connect_poll_interval, remaining),
                )
        except BaseException:
            if not open_task.done():
                open_task.cancel()
            raise

    def _check_still(self, expected: ConnectionState) -> None:
        """Raise if the session was torn down while opening."""
        if self._state is not expected:
            raise self.fault or ConnectionLost(
                "The connection was closed while opening",
            )

    async def _receive_loop(self) -> None:
        try:
            async for message in self._transport.messages():
                self._mark_inbound()
                try:
                    await self._handle_message(message)
                except MalformedPayload as e:
                    logger.warning("Dropping malformed message: %s", e)

                if self._state in TERMINATING_STATES:
                    return

        except ConnectionFault as e:
            await self._fail(e)
            return

        except Exception as e:
            logger.error("Receive loop error: %s", e, exc_info=True)
            await self._fail(ConnectionLost(f"Receive loop failed: {e}"))
            return

        if self._state not in TERMINATING_STATES:
            await self._fail(
                ConnectionLost("The connection was closed by the server"),
            )

    async def _heartbeat_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while self._state is ConnectionState.READY:
            await asyncio.sleep(self.config.heartbeat_interval)

            sent_at = loop.time()
            self.last_heartbeat_at = sent_at
            try:
                pong = await self._transport.ping()
                await asyncio.wait_for(pong, self.config.heartbeat_grace)
            except asyncio.TimeoutError:
                # Any other inbound traffic also proves liveness
                if (
                    self.last_inbound_at is None
                    or self.last_inbound_at < sent_at
                ):
                    await self._fail(
                        HeartbeatTimeout(
                            "No inbound traffic within "
                            f"{self.config.heartbeat_grace:g}s of a heartbeat",
                        ),
                    )
                    return
                continue
            except ConnectionFault as e:
                await self._fail(e)
                return

            self._mark_inbound()

    async def _fail(self, fault: ConnectionFault) -> None:
        """Tear the session down after a fault. Only the first teardown
        takes effect."""
        async with self._lock:
            if self._state in TERMINATING_STATES:
                return
            self.fault = fault
            self._set_state(ConnectionState.FAULTED, fault)
            self.correlator.cancel_all(
                f"Connection lost: {fault.message}",
                reason=fault.reason,
            )
            self._on_teardown(fault)

        logger.error("Connection %s faulted: %s", self.id, fault)
        await self._release()

        if self._on_fault is not None:
            try:
                self._on_fault(self, fault)
            except Exception as e:
                logger.error("Error in fault callback: %s", e, exc_info=True)

    async def _release(self) -> None:
        """Stop the loops and close the transport."""
        current = asyncio.current_task()
        tasks = [self._heartbeat_task, self._receive_task]
        self._heartbeat_task = None
        self._receive_task = None

        for task in tasks:
            if task is None or task is current or task.done():
                continue
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        try:
            await self._transport.close()
        except Exception as e:
            logger.error("Error closing the transport: %s", e)

    def _notify_closed_by_server(self) -> None:
        if self._on_closed_by_server is not None:
            try:
                self._on_closed_by_server(self)
            except Exception as e:
                logger.error("Error in close callback: %s", e, exc_info=True)

    def _set_state(
        self,
        state: ConnectionState,
        fault: ConnectionFault | None = None,
    ) -> None:
        check_transition(self._state, state)
        previous, self._state = self._state, state
        logger.info(
            "Connection %s: %s -> %s",
            self.id,
            previous.value,
            state.value,
        )

        if self._on_state_change is not None:
            try:
                self._on_state_change(self, state, previous, fault)
            except Exception as e:
                logger.error(
                    "Error in state change callback: %s",
                    e,
                    exc_info=True,
                )

    def _mark_inbound(self) -> None:
        self.last_inbound_at = asyncio.get_running_loop().time()

    def _emit(self, event: ConnectorEvent) -> None:
        """Deliver a server event to the subscriber."""
        if self._on_event is not None:
            try:
                self._on_event(event)
            except Exception as e:
                logger.error("Error in event callback: %s", e, exc_info=True)
