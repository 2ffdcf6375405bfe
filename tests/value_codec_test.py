# -*- coding: utf-8 -*-
"""Unit tests for the dynamic value codec."""
import sys
import unittest

from visionlink.exception import MalformedPayload, ValueEncodingError
from visionlink.value import (
    ValueKind,
    decode_value,
    encode_value,
    kind_of,
    values_equal,
)


class TestValueKind(unittest.TestCase):
    """Test cases for the value tags."""

    def test_scalar_kinds(self) -> None:
        """Test the tags of the scalar values."""
        self.assertEqual(kind_of(None), ValueKind.NULL)
        self.assertEqual(kind_of(True), ValueKind.BOOL)
        self.assertEqual(kind_of(0), ValueKind.INTEGER)
        self.assertEqual(kind_of(0.5), ValueKind.FLOAT)
        self.assertEqual(kind_of(""), ValueKind.STRING)

    def test_container_kinds(self) -> None:
        """Test the tags of the containers."""
        self.assertEqual(kind_of([1, 2]), ValueKind.SEQUENCE)
        self.assertEqual(kind_of((1, 2)), ValueKind.SEQUENCE)
        self.assertEqual(kind_of({"a": 1}), ValueKind.MAPPING)

    def test_unsupported_type(self) -> None:
        """Test that unsupported types are rejected."""
        with self.assertRaises(ValueEncodingError):
            kind_of(b"bytes")
        with self.assertRaises(ValueEncodingError):
            kind_of({1, 2})


class TestValueCodec(unittest.TestCase):
    """Test cases for encoding and decoding values."""

    def test_round_trip_preserves_tags(self) -> None:
        """Test that a nested tree decodes to an equal tree."""
        value = {
            "null": None,
            "flag": False,
            "count": 3,
            "ratio": 3.0,
            "name": "caméra",
            "items": [1, "two", [3.5], {"deep": True}],
            "empty": {},
        }
        decoded = decode_value(encode_value(value))
        self.assertTrue(values_equal(value, decoded))
        self.assertIsInstance(decoded["count"], int)
        self.assertIsInstance(decoded["ratio"], float)
        self.assertIs(decoded["flag"], False)

    def test_encode_is_compact_utf8(self) -> None:
        """Test the encoded form."""
        self.assertEqual(
            encode_value({"a": [1, "é"]}),
            '{"a":[1,"é"]}'.encode("utf-8"),
        )

    def test_tuple_encodes_as_sequence(self) -> None:
        """Test that tuples are encoded like lists."""
        self.assertEqual(decode_value(encode_value((1, 2))), [1, 2])

    def test_encode_rejects_non_finite_floats(self) -> None:
        """Test that NaN and infinities are rejected."""
        for value in (float("nan"), float("inf"), -float("inf")):
            with self.assertRaises(ValueEncodingError):
                encode_value({"x": [value]})

    def test_encode_rejects_non_string_keys(self) -> None:
        """Test that mapping keys must be strings."""
        with self.assertRaises(ValueEncodingError) as context:
            encode_value({"outer": {1: "one"}})
        self.assertIn("$.outer", context.exception.message)

    def test_encode_rejects_unsupported_leaf(self) -> None:
        """Test that the error names the path of the bad value."""
        with self.assertRaises(ValueEncodingError) as context:
            encode_value({"items": [1, object()]})
        self.assertIn("$.items[1]", context.exception.message)

    def test_encode_rejects_cyclic_values(self) -> None:
        """Test that a self-referencing tree is an encoding error."""
        cyclic: list = [1]
        cyclic.append(cyclic)
        with self.assertRaises(ValueEncodingError):
            encode_value({"items": cyclic})

    @unittest.skipUnless(
        hasattr(sys, "get_int_max_str_digits"),
        "no integer string conversion limit",
    )
    def test_encode_rejects_oversized_integer(self) -> None:
        """Test that an integer beyond the conversion limit is refused."""
        with self.assertRaises(ValueEncodingError):
            encode_value([10**5000])

    def test_decode_accepts_str_and_bytearray(self) -> None:
        """Test the accepted input types."""
        self.assertEqual(decode_value('{"a":1}'), {"a": 1})
        self.assertEqual(decode_value(bytearray(b"[true]")), [True])

    def test_decode_rejects_invalid_json(self) -> None:
        """Test that invalid JSON is a malformed payload."""
        with self.assertRaises(MalformedPayload):
            decode_value(b"{not json")

    def test_decode_rejects_invalid_utf8(self) -> None:
        """Test that invalid UTF-8 is a malformed payload."""
        with self.assertRaises(MalformedPayload):
            decode_value(b'"\xff"')

    def test_decode_rejects_duplicated_keys(self) -> None:
        """Test that duplicated keys are a malformed payload."""
        with self.assertRaises(MalformedPayload):
            decode_value(b'{"a":1,"a":2}')

    def test_decode_rejects_nan_literal(self) -> None:
        """Test that the non-standard literals are rejected."""
        with self.assertRaises(MalformedPayload):
            decode_value(b'{"a":NaN}')

    def test_decode_rejects_unsupported_input(self) -> None:
        """Test that only text and bytes can be decoded."""
        with self.assertRaises(MalformedPayload):
            decode_value(42)  # type: ignore[arg-type]


    def test_decode_rejects_deep_nesting(self) -> None:
        """Test that a too deeply nested payload is malformed."""
        with self.assertRaises(MalformedPayload):
            decode_value("[" * 100000 + "]" * 100000)

    @unittest.skipUnless(
        hasattr(sys, "get_int_max_str_digits"),
        "no integer string conversion limit",
    )
    def test_decode_rejects_oversized_integer(self) -> None:
        """Test that an integer beyond the conversion limit is malformed."""
        with self.assertRaises(MalformedPayload):
            decode_value("1" * 5000)


class TestValuesEqual(unittest.TestCase):
    """Test cases for the tag aware comparison."""

    def test_numbers_of_different_tags_differ(self) -> None:
        """Test that 1, 1.0 and True are different values."""
        self.assertFalse(values_equal(1, 1.0))
        self.assertFalse(values_equal(1, True))
        self.assertTrue(values_equal(1.0, 1.0))

    def test_nested_comparison(self) -> None:
        """Test the comparison of nested containers."""
        self.assertTrue(values_equal({"a": [1, (2,)]}, {"a": [1, [2]]}))
        self.assertFalse(values_equal({"a": [1]}, {"a": [1.0]}))
        self.assertFalse(values_equal({"a": 1}, {"b": 1}))
        self.assertFalse(values_equal([1], [1, 2]))

    def test_unsupported_values_are_never_equal(self) -> None:
        """Test that unsupported values compare unequal."""
        marker = object()
        self.assertFalse(values_equal(marker, marker))


if __name__ == "__main__":
    unittest.main()
