# -*- coding: utf-8 -*-
"""The dynamic value model used for frame params and payloads."""

from ._codec import (
    ValueKind,
    kind_of,
    encode_value,
    decode_value,
    values_equal,
)

__all__ = [
    "ValueKind",
    "kind_of",
    "encode_value",
    "decode_value",
    "values_equal",
]
