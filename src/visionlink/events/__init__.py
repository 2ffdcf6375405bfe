# -*- coding: utf-8 -*-
"""The events delivered by the connector to the application layer."""

from ._connector_event import (
    ConnectorEventType,
    ConnectorEvent,
    ConnectorStateChanged,
    ConnectorServerEvent,
    ConnectorTurnDelta,
    ConnectorTurnComplete,
    ConnectorGoAway,
    ConnectorReconnectScheduled,
    ConnectorReconnectExhausted,
    ConnectorEventCallback,
)

__all__ = [
    "ConnectorEventType",
    "ConnectorEvent",
    "ConnectorStateChanged",
    "ConnectorServerEvent",
    "ConnectorTurnDelta",
    "ConnectorTurnComplete",
    "ConnectorGoAway",
    "ConnectorReconnectScheduled",
    "ConnectorReconnectExhausted",
    "ConnectorEventCallback",
]
