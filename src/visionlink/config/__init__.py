# -*- coding: utf-8 -*-
"""The configuration of the connector."""

from ._connector_config import ConnectorConfig

__all__ = [
    "ConnectorConfig",
]
