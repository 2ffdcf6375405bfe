# -*- coding: utf-8 -*-
"""The connection states and their legal transitions."""
from enum import Enum

from ..exception import InvalidStateTransition


class ConnectionState(str, Enum):
    """The states of a connection."""

    DISCONNECTED = "disconnected"
    """No transport. The entry state and the target of a clean shutdown."""

    CONNECTING = "connecting"
    """The transport is being opened."""

    HANDSHAKE_IN_PROGRESS = "handshake_in_progress"
    """The setup message was sent, waiting for its acknowledgement."""

    READY = "ready"
    """Calls, turns and media may flow."""

    CLOSING = "closing"
    """A user initiated disconnect is in progress."""

    FAULTED = "faulted"
    """The transport failed. Terminal for the connection instance."""


_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.DISCONNECTED: frozenset({ConnectionState.CONNECTING}),
    ConnectionState.CONNECTING: frozenset(
        {
            ConnectionState.HANDSHAKE_IN_PROGRESS,
            ConnectionState.READY,
            ConnectionState.CLOSING,
            ConnectionState.FAULTED,
        },
    ),
    ConnectionState.HANDSHAKE_IN_PROGRESS: frozenset(
        {
            ConnectionState.READY,
            ConnectionState.CLOSING,
            ConnectionState.FAULTED,
        },
    ),
    ConnectionState.READY: frozenset(
        {ConnectionState.CLOSING, ConnectionState.FAULTED},
    ),
    ConnectionState.CLOSING: frozenset({ConnectionState.DISCONNECTED}),
    ConnectionState.FAULTED: frozenset(),
}

TERMINATING_STATES = frozenset(
    {
        ConnectionState.CLOSING,
        ConnectionState.DISCONNECTED,
        ConnectionState.FAULTED,
    },
)
"""The states in which a connection no longer accepts work."""


def can_transition(
    current: ConnectionState,
    target: ConnectionState,
) -> bool:
    """Check whether the transition from `current` to `target` is legal."""
    return target in _TRANSITIONS[current]


def check_transition(
    current: ConnectionState,
    target: ConnectionState,
) -> None:
    """Raise if the transition from `current` to `target` is illegal.

    Raises:
        `InvalidStateTransition`:
            If the transition is not allowed.
    """
    if not can_transition(current, target):
        raise InvalidStateTransition(
            f"Cannot move from {current.value} to {target.value}",
        )
