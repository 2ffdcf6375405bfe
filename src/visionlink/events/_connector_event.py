# -*- coding: utf-8 -*-
"""The events delivered by the connector to the application layer."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from ..connection._state import ConnectionState
from ..exception import ConnectionFault
from ..types import JSONObject


class ConnectorEventType(str, Enum):
    """Types of the connector events."""

    # Connection lifecycle
    STATE_CHANGED = "state_changed"

    # RPC dialect
    SERVER_EVENT = "server_event"

    # Session dialect
    TURN_DELTA = "turn_delta"
    TURN_COMPLETE = "turn_complete"
    GO_AWAY = "go_away"

    # Reconnection
    RECONNECT_SCHEDULED = "reconnect_scheduled"
    RECONNECT_EXHAUSTED = "reconnect_exhausted"


@dataclass
class ConnectorEvent:
    """Base class for connector events."""

    type: ConnectorEventType


@dataclass
class ConnectorStateChanged(ConnectorEvent):
    """The connection moved to a new state."""

    state: ConnectionState
    previous: ConnectionState
    error: ConnectionFault | None = None
    type: ConnectorEventType = field(
        default=ConnectorEventType.STATE_CHANGED,
        init=False,
    )


@dataclass
class ConnectorServerEvent(ConnectorEvent):
    """An unsolicited event pushed by the RPC server."""

    name: str
    payload: JSONObject = field(default_factory=dict)
    seq: int | None = None
    type: ConnectorEventType = field(
        default=ConnectorEventType.SERVER_EVENT,
        init=False,
    )


@dataclass
class ConnectorTurnDelta(ConnectorEvent):
    """A text fragment of the current server turn."""

    text: str
    turn_id: str | None = None
    type: ConnectorEventType = field(
        default=ConnectorEventType.TURN_DELTA,
        init=False,
    )


@dataclass
class ConnectorTurnComplete(ConnectorEvent):
    """The server finished a turn."""

    text: str
    turn_id: str | None = None
    type: ConnectorEventType = field(
        default=ConnectorEventType.TURN_COMPLETE,
        init=False,
    )


@dataclass
class ConnectorGoAway(ConnectorEvent):
    """The server announced a graceful shutdown of the session."""

    time_left: str | None = None
    type: ConnectorEventType = field(
        default=ConnectorEventType.GO_AWAY,
        init=False,
    )


@dataclass
class ConnectorReconnectScheduled(ConnectorEvent):
    """A reconnection attempt was scheduled."""

    attempt: int
    delay: float
    type: ConnectorEventType = field(
        default=ConnectorEventType.RECONNECT_SCHEDULED,
        init=False,
    )


@dataclass
class ConnectorReconnectExhausted(ConnectorEvent):
    """All reconnection attempts failed. The application should present
    this as an actionable error."""

    attempts: int
    message: str = ""
    type: ConnectorEventType = field(
        default=ConnectorEventType.RECONNECT_EXHAUSTED,
        init=False,
    )


# Type alias for event subscribers
ConnectorEventCallback = Callable[[ConnectorEvent], None]
