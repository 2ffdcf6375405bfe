# -*- coding: utf-8 -*-
"""The connection layer: state machine, call correlation, liveness,
reconnection and media pacing."""

# The state module goes first, the events depend on it
from ._state import (
    ConnectionState,
    TERMINATING_STATES,
    can_transition,
    check_transition,
)
from ._correlation import PendingCall, CallCorrelator
from ._throttle import ThrottleDecision, FrameThrottle
from ._reconnect import BackoffPolicy, ReconnectController
from ._transport import TransportBase, WebSocketTransport
from ._session_base import ConnectionSessionBase
from ._rpc_session import RPCConnectionSession
from ._live_session import LiveConnectionSession

__all__ = [
    "ConnectionState",
    "TERMINATING_STATES",
    "can_transition",
    "check_transition",
    "PendingCall",
    "CallCorrelator",
    "ThrottleDecision",
    "FrameThrottle",
    "BackoffPolicy",
    "ReconnectController",
    "TransportBase",
    "WebSocketTransport",
    "ConnectionSessionBase",
    "RPCConnectionSession",
    "LiveConnectionSession",
]
