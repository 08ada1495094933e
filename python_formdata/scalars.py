"""Fixed-width numeric types for record fields.

Python's ``int`` and ``float`` have no width, so a field that must reject
values outside a machine range is annotated with one of the types below.
They are plain ``int`` / ``float`` subclasses and compare equal to the
builtin values they wrap::

    @dataclass
    class Upload:
        chunks: UInt16 = UInt16(0)
        ratio: Float32 = Float32(0.0)
"""

from __future__ import annotations

import struct


class BoundedInt(int):
    """Base class for integers with a fixed bit width."""

    bits = 64
    signed = True

    #: Filled in by ``__init_subclass__``.
    min_value = -(2**63)
    max_value = 2**63 - 1

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if cls.signed:
            cls.min_value = -(2 ** (cls.bits - 1))
            cls.max_value = 2 ** (cls.bits - 1) - 1
        else:
            cls.min_value = 0
            cls.max_value = 2**cls.bits - 1

    def __new__(cls, value: int = 0) -> BoundedInt:
        if not cls.min_value <= int(value) <= cls.max_value:
            raise ValueError(f"{value!r} is out of range for {cls.__name__}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({int(self)})"


class Int(BoundedInt):
    bits = 64


class Int8(BoundedInt):
    bits = 8


class Int16(BoundedInt):
    bits = 16


class Int32(BoundedInt):
    bits = 32


class Int64(BoundedInt):
    bits = 64


class UInt(BoundedInt):
    bits = 64
    signed = False


class UInt8(BoundedInt):
    bits = 8
    signed = False


class UInt16(BoundedInt):
    bits = 16
    signed = False


class UInt32(BoundedInt):
    bits = 32
    signed = False


class UInt64(BoundedInt):
    bits = 64
    signed = False


class Float32(float):
    """A float rounded to IEEE 754 single precision."""

    max_value = struct.unpack("<f", b"\xff\xff\x7f\x7f")[0]

    def __new__(cls, value: float = 0.0) -> Float32:
        try:
            (single,) = struct.unpack("<f", struct.pack("<f", float(value)))
        except OverflowError:
            raise ValueError(f"{value!r} is out of range for {cls.__name__}")
        return super().__new__(cls, single)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({float(self)!r})"


class Float64(float):
    pass


def int_bounds(cls: type) -> tuple[int | None, int | None]:
    """Return the inclusive ``(min, max)`` range of an integer type.

    Plain ``int`` (and subclasses that do not derive from
    :class:`BoundedInt`) are unbounded.
    """
    if issubclass(cls, BoundedInt):
        return cls.min_value, cls.max_value
    return None, None


def is_unsigned(cls: type) -> bool:
    return issubclass(cls, BoundedInt) and not cls.signed
