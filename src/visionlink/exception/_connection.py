# -*- coding: utf-8 -*-
"""The connection level errors."""
from enum import Enum

from ._exception_base import ConnectorError


class FaultReason(str, Enum):
    """The reasons that put a connection into the faulted state."""

    CONNECTION_LOST = "connection_lost"
    """The transport failed or was closed by the remote side."""

    CONNECTION_TIMEOUT = "connection_timeout"
    """The transport did not become ready within the bound."""

    SETUP_FAILED = "setup_failed"
    """The handshake was not acknowledged within the bound."""

    HEARTBEAT_TIMEOUT = "heartbeat_timeout"
    """No inbound traffic arrived within the heartbeat grace window."""


class ConnectionFault(ConnectorError):
    """The base class of the errors that tear down a connection. They are
    surfaced to all pending callers and state subscribers, and trigger
    reconnection scheduling."""

    reason: FaultReason = FaultReason.CONNECTION_LOST

    def __init__(
        self,
        message: str,
        reason: FaultReason | None = None,
    ) -> None:
        """Initialize the connection fault.

        Args:
            message (`str`):
                The error message.
            reason (`FaultReason | None`, optional):
                Override the class level fault reason. Used by
                `ConnectionLost` to report why the connection was lost.
        """
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class ConnectionLost(ConnectionFault):
    """The connection was torn down while the call was pending, or the
    transport failed."""

    reason = FaultReason.CONNECTION_LOST


class ConnectionTimeout(ConnectionFault):
    """The transport did not report ready in time."""

    reason = FaultReason.CONNECTION_TIMEOUT


class SetupFailed(ConnectionFault):
    """The server did not acknowledge the session setup in time."""

    reason = FaultReason.SETUP_FAILED


class HeartbeatTimeout(ConnectionFault):
    """No inbound traffic arrived after a heartbeat."""

    reason = FaultReason.HEARTBEAT_TIMEOUT


class ReconnectExhausted(ConnectorError):
    """All the reconnection attempts failed. No further automatic retries are
    made."""

    def __init__(self, attempts: int) -> None:
        """Initialize the error.

        Args:
            attempts (`int`):
                The number of reconnection attempts made.
        """
        super().__init__(f"gave up reconnecting after {attempts} attempts")
        self.attempts = attempts


class InvalidStateTransition(ConnectorError):
    """An illegal transition was requested from the state machine."""
