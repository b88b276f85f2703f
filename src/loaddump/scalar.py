"""Fixed-width little-endian scalars.

Integers always occupy their declared width regardless of magnitude, signed
values in two's complement::

    >>> sink = BytesSink()
    >>> write_int(sink, 1, 4, signed=True)
    >>> write_int(sink, -2, 2, signed=True)
    >>> sink.getvalue().hex()
    '01000000feff'

Widths up to 8 bytes move through a 64-bit intermediate and are truncated
(or sign-extended on load) to the declared width; 16-byte integers have a
dedicated path.
"""

from __future__ import annotations

import operator
import struct

from loaddump.stream import Sink, Source
from loaddump.types import WireType

_WIDE_SIZE = 16
_REGISTER_SIZE = 8
_SIZES = (1, 2, 4, 8, 16)


def _check_range(value: int, size: int, signed: bool) -> None:
    bits = size * 8
    if signed:
        lo, hi = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        lo, hi = 0, (1 << bits) - 1
    if not lo <= value <= hi:
        kind = "signed" if signed else "unsigned"
        raise ValueError(f"{value} does not fit in a {size}-byte {kind} integer")


def write_int(sink: Sink, value: int, size: int, signed: bool) -> None:
    if size not in _SIZES:
        raise ValueError(f"Unsupported integer width: {size}")
    value = operator.index(value)
    _check_range(value, size, signed)
    if size == _WIDE_SIZE:
        sink.write(value.to_bytes(_WIDE_SIZE, "little", signed=signed))
        return
    register = struct.pack("<q" if signed else "<Q", value)
    sink.write(register[:size])


def read_int(source: Source, size: int, signed: bool) -> int:
    if size not in _SIZES:
        raise ValueError(f"Unsupported integer width: {size}")
    data = source.read_exact(size)
    if size == _WIDE_SIZE:
        return int.from_bytes(data, "little", signed=signed)
    fill = b"\xff" if signed and data[-1] & 0x80 else b"\x00"
    (value,) = struct.unpack("<q" if signed else "<Q", data + fill * (_REGISTER_SIZE - size))
    return value


def write_float(sink: Sink, value: float, fmt: str) -> None:
    sink.write(struct.pack(fmt, value))


def read_float(source: Source, fmt: str) -> float:
    (value,) = struct.unpack(fmt, source.read_exact(struct.calcsize(fmt)))
    return value


def write_bool(sink: Sink, value: bool) -> None:
    sink.write_byte(1 if value else 0)


def read_bool(source: Source) -> bool:
    # any nonzero byte is true
    return source.read_byte() != 0


def write_scalar(sink: Sink, value: int | float, wire_type: WireType) -> None:
    if wire_type.fmt is not None:
        write_float(sink, value, wire_type.fmt)
    else:
        write_int(sink, value, wire_type.size, wire_type.signed)


def read_scalar(source: Source, wire_type: WireType) -> int | float:
    if wire_type.fmt is not None:
        return read_float(source, wire_type.fmt)
    return read_int(source, wire_type.size, wire_type.signed)
