# -*- coding: utf-8 -*-
"""The exceptions in visionlink."""

from ._exception_base import ConnectorError
from ._payload import MalformedPayload, ValueEncodingError
from ._call import (
    RemoteCallError,
    CallTimeout,
    NotConnected,
    QueryInProgress,
    NotConfigured,
)
from ._connection import (
    FaultReason,
    ConnectionFault,
    ConnectionLost,
    ConnectionTimeout,
    SetupFailed,
    HeartbeatTimeout,
    ReconnectExhausted,
    InvalidStateTransition,
)

__all__ = [
    "ConnectorError",
    "MalformedPayload",
    "ValueEncodingError",
    "RemoteCallError",
    "CallTimeout",
    "NotConnected",
    "QueryInProgress",
    "NotConfigured",
    "FaultReason",
    "ConnectionFault",
    "ConnectionLost",
    "ConnectionTimeout",
    "SetupFailed",
    "HeartbeatTimeout",
    "ReconnectExhausted",
    "InvalidStateTransition",
]
