# -*- coding: utf-8 -*-
"""The JSON related types."""
from typing import Union

JSONPrimitive = Union[
    str,
    int,
    float,
    bool,
    None,
]

JSONSerializableObject = Union[
    JSONPrimitive,
    list["JSONSerializableObject"],
    tuple["JSONSerializableObject", ...],
    dict[str, "JSONSerializableObject"],
]

JSONObject = dict[str, JSONSerializableObject]
"""A mapping from string keys to JSON serializable values, e.g. the params
or payload of a frame."""
