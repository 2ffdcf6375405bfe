# -*- coding: utf-8 -*-
"""The errors raised when encoding or decoding payloads."""
from ._exception_base import ConnectorError


class MalformedPayload(ConnectorError):
    """Inbound bytes that cannot be decoded into a value or a frame. The
    offending frame is dropped and the connection stays up."""


class ValueEncodingError(ConnectorError):
    """A value that cannot be encoded, e.g. an unsupported native type. It's
    raised synchronously to the caller and nothing is sent."""
