# -*- coding: utf-8 -*-
"""The clients of the streaming backends."""

from ._client_base import BackendClientBase, TransportFactory
from ._rpc_client import RPCClient
from ._live_client import (
    LiveVisionClient,
    DEFAULT_SCENE_PROMPT,
    DEFAULT_VISION_INSTRUCTIONS,
)

__all__ = [
    "BackendClientBase",
    "TransportFactory",
    "RPCClient",
    "LiveVisionClient",
    "DEFAULT_SCENE_PROMPT",
    "DEFAULT_VISION_INSTRUCTIONS",
]
