# -*- coding: utf-8 -*-
"""The types in visionlink."""

from ._json import (
    JSONPrimitive,
    JSONSerializableObject,
    JSONObject,
)

__all__ = [
    "JSONPrimitive",
    "JSONSerializableObject",
    "JSONObject",
]
