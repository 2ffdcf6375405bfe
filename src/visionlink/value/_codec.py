# -*- coding: utf-8 -*-
"""Encoding and decoding of the dynamic, JSON compatible values carried in
frame params and payloads.

The values are plain Python trees built from `None`, `bool`, `int`,
`float`, `str`, `list` (or `tuple`) and `dict` with string keys. Anything
else is rejected instead of being coerced, and integers are never widened
to floats on the way back.
"""
import json
import math
from enum import Enum
from typing import Any

from ..exception import MalformedPayload, ValueEncodingError
from ..types import JSONSerializableObject


class ValueKind(str, Enum):
    """The tags of a dynamic value."""

    NULL = "null"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def kind_of(value: Any) -> ValueKind:
    """Get the tag of a dynamic value.

    Args:
        value (`Any`):
            The value to inspect.

    Returns:
        `ValueKind`:
            The tag of the value.

    Raises:
        `ValueEncodingError`:
            If the value is not a supported dynamic value.
    """
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, dict):
        return ValueKind.MAPPING
    raise ValueEncodingError(
        f"Unsupported value type {type(value).__name__}",
    )


def _check_encodable(value: Any, path: str) -> None:
    """Walk the value tree and raise on the first unsupported node."""
    try:
        kind = kind_of(value)
    except ValueEncodingError as e:
        raise ValueEncodingError(f"{e.message} at {path}") from None

    if kind == ValueKind.FLOAT and not math.isfinite(value):
        raise ValueEncodingError(f"Non-finite float {value!r} at {path}")

    if kind == ValueKind.SEQUENCE:
        for index, item in enumerate(value):
            _check_encodable(item, f"{path}[{index}]")

    elif kind == ValueKind.MAPPING:
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValueEncodingError(
                    f"Mapping key {key!r} at {path} is not a string",
                )
            _check_encodable(item, f"{path}.{key}")


def encode_value(value: JSONSerializableObject) -> bytes:
    """Encode a dynamic value into UTF-8 JSON bytes.

    Args:
        value (`JSONSerializableObject`):
            The value to encode.

    Returns:
        `bytes`:
            The encoded value.

    Raises:
        `ValueEncodingError`:
            If the tree contains an unsupported type, a non-string mapping
            key, a non-finite float, or is cyclic or nested too deeply.
    """
    try:
        _check_encodable(value, "$")
        text = json.dumps(
            value,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except RecursionError:
        raise ValueEncodingError(
            "The value is cyclic or nested too deeply",
        ) from None
    except ValueError as e:
        # e.g. an integer beyond the int to str conversion limit
        raise ValueEncodingError(f"Cannot encode the value: {e}") from e
    return text.encode("utf-8")


def _unique_object(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """Build a mapping, rejecting duplicated keys."""
    result: dict[str, Any] = {}
    for key, item in pairs:
        if key in result:
            raise MalformedPayload(f"Duplicated key {key!r}")
        result[key] = item
    return result


def _reject_constant(name: str) -> Any:
    """Reject the NaN and Infinity literals that Python's json accepts."""
    raise MalformedPayload(f"Unsupported literal {name}")


def decode_value(data: bytes | bytearray | str) -> JSONSerializableObject:
    """Decode UTF-8 JSON into a dynamic value.

    Numbers written without a fraction or an exponent are decoded as `int`,
    the others as `float`.

    Args:
        data (`bytes | bytearray | str`):
            The encoded value.

    Returns:
        `JSONSerializableObject`:
            The decoded value.

    Raises:
        `MalformedPayload`:
            If the input is not valid UTF-8, not valid JSON, or contains
            duplicated keys, non-standard literals, oversized integers or
            too deep nesting.
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPayload(f"Invalid UTF-8 payload: {e}") from e
    elif isinstance(data, str):
        text = data
    else:
        raise MalformedPayload(
            f"Cannot decode payload of type {type(data).__name__}",
        )

    try:
        return json.loads(
            text,
            object_pairs_hook=_unique_object,
            parse_constant=_reject_constant,
        )
    except RecursionError:
        raise MalformedPayload("The payload is nested too deeply") from None
    except ValueError as e:
        # JSONDecodeError, or an integer beyond the int conversion limit
        raise MalformedPayload(f"Invalid JSON payload: {e}") from e


def values_equal(a: Any, b: Any) -> bool:
    """Compare two dynamic values by tag and content.

    Unlike `==`, the values `1`, `1.0` and `True` are all different here.
    Lists and tuples are both sequences and compare element-wise.

    Args:
        a (`Any`):
            The first value.
        b (`Any`):
            The second value.

    Returns:
        `bool`:
            Whether the two values have the same tag and content.
    """
    try:
        kind_a, kind_b = kind_of(a), kind_of(b)
    except ValueEncodingError:
        return False

    if kind_a != kind_b:
        return False

    if kind_a == ValueKind.SEQUENCE:
        return len(a) == len(b) and all(
            values_equal(x, y) for x, y in zip(a, b)
        )

    if kind_a == ValueKind.MAPPING:
        return a.keys() == b.keys() and all(
            values_equal(a[key], b[key]) for key in a
        )

    return a == b
