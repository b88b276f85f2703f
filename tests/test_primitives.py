"""Tests for fixed-width integers, booleans and floats."""

import struct
from typing import Annotated

import pytest
from pydantic import BaseModel

from loaddump import serialize, deserialize, StreamReadError
from loaddump.types import (
    Int8,
    Int16,
    Int32,
    Int64,
    Int128,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    UInt128,
    Float32,
    Float64,
)


class Widths(BaseModel):
    a: Annotated[int, Int8]
    b: Annotated[int, UInt16]
    c: Annotated[int, Int32]
    d: Annotated[int, UInt64]
    e: Annotated[int, Int128]


class Plain(BaseModel):
    n: int
    x: float
    flag: bool


class Floats(BaseModel):
    single: Annotated[float, Float32]
    double: Annotated[float, Float64]


UNSIGNED = [(UInt8, 1), (UInt16, 2), (UInt32, 4), (UInt64, 8), (UInt128, 16)]
SIGNED = [(Int8, 1), (Int16, 2), (Int32, 4), (Int64, 8), (Int128, 16)]


@pytest.mark.parametrize("wire_type,size", UNSIGNED)
def test_unsigned_width_does_not_depend_on_magnitude(wire_type, size):
    for value in (0, 1, (1 << (size * 8)) - 1):
        data = serialize(value, Annotated[int, wire_type])
        assert len(data) == size
        assert deserialize(data, Annotated[int, wire_type]) == value


@pytest.mark.parametrize("wire_type,size", SIGNED)
def test_signed_width_does_not_depend_on_magnitude(wire_type, size):
    lo, hi = -(1 << (size * 8 - 1)), (1 << (size * 8 - 1)) - 1
    for value in (lo, -1, 0, 1, hi):
        data = serialize(value, Annotated[int, wire_type])
        assert len(data) == size
        assert deserialize(data, Annotated[int, wire_type]) == value


def test_int32_small_and_large_values_take_four_bytes():
    assert serialize(1, Annotated[int, Int32]) == b"\x01\x00\x00\x00"
    assert serialize(2147483647, Annotated[int, Int32]) == b"\xff\xff\xff\x7f"


def test_little_endian_twos_complement():
    assert serialize(-2, Annotated[int, Int16]) == b"\xfe\xff"
    assert serialize(0x1234, Annotated[int, UInt16]) == b"\x34\x12"
    assert serialize(-1, Annotated[int, Int128]) == b"\xff" * 16


def test_sign_extension_on_load():
    assert deserialize(b"\x80", Annotated[int, Int8]) == -128
    assert deserialize(b"\x00\x00\x00\x80", Annotated[int, Int32]) == -(2**31)
    assert deserialize(b"\xff\xff", Annotated[int, UInt16]) == 0xFFFF


def test_128_bit_values():
    big = (1 << 127) + 12345
    data = serialize(big, Annotated[int, UInt128])
    assert data == big.to_bytes(16, "little")
    assert deserialize(data, Annotated[int, UInt128]) == big


def test_out_of_range_values_rejected():
    with pytest.raises(ValueError):
        serialize(256, Annotated[int, UInt8])
    with pytest.raises(ValueError):
        serialize(-1, Annotated[int, UInt32])
    with pytest.raises(ValueError):
        serialize(1 << 127, Annotated[int, Int128])


def test_widths_model_layout():
    m = Widths(a=-1, b=0x1234, c=1, d=2**64 - 1, e=-2)
    data = serialize(m)
    assert data == (
        b"\xff"
        + b"\x34\x12"
        + b"\x01\x00\x00\x00"
        + b"\xff" * 8
        + b"\xfe" + b"\xff" * 15
    )
    assert deserialize(data, Widths) == m


def test_bool_dumps_canonical_bytes():
    assert serialize(True) == b"\x01"
    assert serialize(False) == b"\x00"


def test_bool_load_is_tolerant():
    assert deserialize(b"\x07", bool) is True
    assert deserialize(b"\x01", bool) is True
    assert deserialize(b"\x00", bool) is False


def test_bare_annotations_use_default_widths():
    m = Plain(n=-5, x=0.25, flag=True)
    data = serialize(m)
    assert data == struct.pack("<id?", -5, 0.25, True)
    assert deserialize(data, Plain) == m


def test_floats_roundtrip():
    m = Floats(single=23.5, double=-1e300)
    data = serialize(m)
    assert data == struct.pack("<fd", 23.5, -1e300)
    assert deserialize(data, Floats) == m


def test_short_input_is_a_read_error():
    with pytest.raises(StreamReadError, match="Cannot read from stream"):
        deserialize(b"\x01\x02", Annotated[int, Int32])
    with pytest.raises(StreamReadError):
        deserialize(b"", bool)
