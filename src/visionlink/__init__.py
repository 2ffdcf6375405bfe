# -*- coding: utf-8 -*-
"""Streaming connectors between a vision client and its backends: an agent
gateway speaking the RPC dialect and a live multimodal model speaking the
session dialect."""

from . import exception
from . import types
from . import value
from . import protocol
from . import config
from . import connection
from . import events
from . import client

from ._logging import logger, setup_logger
from ._version import __version__

from .config import ConnectorConfig
from .connection import ConnectionState, ThrottleDecision
from .client import BackendClientBase, RPCClient, LiveVisionClient

__all__ = [
    "exception",
    "types",
    "value",
    "protocol",
    "config",
    "connection",
    "events",
    "client",
    "logger",
    "setup_logger",
    "__version__",
    "ConnectorConfig",
    "ConnectionState",
    "ThrottleDecision",
    "BackendClientBase",
    "RPCClient",
    "LiveVisionClient",
]
