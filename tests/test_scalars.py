from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

import pytest

from python_formdata.rfc3339 import parse_rfc3339
from python_formdata.scalars import (
    BoundedInt,
    Float32,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    int_bounds,
    is_unsigned,
)


class TestBoundedInt(unittest.TestCase):
    def test_bounds(self) -> None:
        self.assertEqual(int_bounds(Int8), (-128, 127))
        self.assertEqual(int_bounds(Int16), (-32768, 32767))
        self.assertEqual(int_bounds(Int32), (-(2**31), 2**31 - 1))
        self.assertEqual(int_bounds(Int64), (-(2**63), 2**63 - 1))
        self.assertEqual(int_bounds(Int), int_bounds(Int64))
        self.assertEqual(int_bounds(UInt8), (0, 255))
        self.assertEqual(int_bounds(UInt16), (0, 65535))
        self.assertEqual(int_bounds(UInt32), (0, 2**32 - 1))
        self.assertEqual(int_bounds(UInt64), (0, 2**64 - 1))
        self.assertEqual(int_bounds(UInt), int_bounds(UInt64))

    def test_plain_int_unbounded(self) -> None:
        self.assertEqual(int_bounds(int), (None, None))
        self.assertFalse(is_unsigned(int))

    def test_unsigned(self) -> None:
        self.assertTrue(is_unsigned(UInt8))
        self.assertFalse(is_unsigned(Int8))

    def test_construct(self) -> None:
        v = UInt8(200)
        self.assertEqual(v, 200)
        self.assertIsInstance(v, int)
        self.assertEqual(repr(v), "UInt8(200)")

    def test_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            Int8(128)
        with self.assertRaises(ValueError):
            UInt16(-1)

    def test_default_zero(self) -> None:
        self.assertEqual(Int32(), 0)

    def test_custom_width(self) -> None:
        class UInt4(BoundedInt):
            bits = 4
            signed = False

        self.assertEqual(int_bounds(UInt4), (0, 15))


class TestFloat32(unittest.TestCase):
    def test_rounds_to_single_precision(self) -> None:
        v = Float32(0.1)
        self.assertNotEqual(v, 0.1)
        self.assertAlmostEqual(v, 0.1, places=6)

    def test_exact_values_survive(self) -> None:
        self.assertEqual(Float32(0.5), 0.5)

    def test_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            Float32(1e39)

    def test_max_value(self) -> None:
        self.assertEqual(Float32(Float32.max_value), Float32.max_value)

    def test_infinity_allowed(self) -> None:
        self.assertEqual(Float32(float("inf")), float("inf"))


class TestParseRFC3339(unittest.TestCase):
    def test_utc_with_fraction(self) -> None:
        self.assertEqual(
            parse_rfc3339("2014-09-03T14:07:59.773Z"),
            datetime(2014, 9, 3, 14, 7, 59, 773000, tzinfo=timezone.utc),
        )

    def test_offset(self) -> None:
        d = parse_rfc3339("2014-09-03T14:07:59+02:30")
        self.assertEqual(d.utcoffset(), timedelta(hours=2, minutes=30))
        self.assertEqual(d, datetime(2014, 9, 3, 11, 37, 59, tzinfo=timezone.utc))

    def test_negative_offset(self) -> None:
        d = parse_rfc3339("2014-09-03T14:07:59-05:00")
        self.assertEqual(d.utcoffset(), timedelta(hours=-5))

    def test_nanoseconds_truncated(self) -> None:
        self.assertEqual(parse_rfc3339("2014-09-03T14:07:59.123456789Z").microsecond, 123456)


@pytest.mark.parametrize(
    "value",
    [
        "not-a-date",
        "",
        "2014-09-03",
        "2014-09-03T14:07:59",
        "2014-09-03 14:07:59Z",
        "2014-09-03t14:07:59Z",
        "2014-09-03T14:07:59z",
        "2014-09-03T14:07Z",
        "2014-13-03T14:07:59Z",
        "2014-02-30T14:07:59Z",
        "2014-09-03T24:00:00Z",
        "2014-09-03T14:07:60Z",
        "2014-09-03T14:07:59+24:00",
        "2014-09-03T14:07:59.Z",
        " 2014-09-03T14:07:59Z",
        "2014-09-03T14:07:59Z\n",
    ],
)
def test_rfc3339_rejects(value: str) -> None:
    with pytest.raises(ValueError):
        parse_rfc3339(value)
