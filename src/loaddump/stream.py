"""Byte sinks and sources.

Every codec in this package talks only to a :class:`Sink` (when dumping) or a
:class:`Source` (when loading), so an in-memory buffer, a file, a socket or a
serial port can all carry the wire format without the codec knowing which one
it is using. Writes are not buffered or rolled back: bytes handed to a sink
before a failure stay written.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, BinaryIO

from loaddump.errors import StreamReadError, StreamWriteError


class Sink(ABC):
    """Accepts raw bytes."""

    @abstractmethod
    def write(self, data: bytes | bytearray | memoryview) -> None:
        """Write all of `data` or raise :class:`StreamWriteError`."""
        raise NotImplementedError

    def write_byte(self, value: int) -> None:
        self.write(bytes((value,)))


class Source(ABC):
    """Supplies raw bytes on demand."""

    @abstractmethod
    def read_exact(self, n: int) -> bytes:
        """Read exactly `n` bytes or raise :class:`StreamReadError`."""
        raise NotImplementedError

    def read_byte(self) -> int:
        return self.read_exact(1)[0]

    def read_until(self, terminator: int) -> bytes:
        """Read up to and including `terminator`, returning the bytes before it."""
        # implementors backed by a buffer should specialize this
        buf = bytearray()
        while True:
            byte = self.read_byte()
            if byte == terminator:
                return bytes(buf)
            buf.append(byte)


class BytesSink(Sink):
    """Collects everything written into an in-memory buffer."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def write(self, data: bytes | bytearray | memoryview) -> None:
        self._buf.extend(data)

    def write_byte(self, value: int) -> None:
        self._buf.append(value)

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)


class BytesSource(Source):
    """Reads from a byte sequence, keeping track of the current position."""

    def __init__(self, data: bytes | bytearray | memoryview, pos: int = 0) -> None:
        self.data = data if isinstance(data, (bytes, bytearray)) else bytes(data)
        self.pos = pos

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def read_exact(self, n: int) -> bytes:
        end = self.pos + n
        if n < 0 or end > len(self.data):
            raise StreamReadError(f"wanted {n} bytes at offset {self.pos}, {self.remaining()} available")
        chunk = bytes(self.data[self.pos : end])
        self.pos = end
        return chunk

    def read_byte(self) -> int:
        if self.pos >= len(self.data):
            raise StreamReadError(f"end of data at offset {self.pos}")
        byte = self.data[self.pos]
        self.pos += 1
        return byte

    def read_until(self, terminator: int) -> bytes:
        index = self.data.find(terminator, self.pos)
        if index < 0:
            self.pos = len(self.data)
            raise StreamReadError("end of data before terminator")
        chunk = bytes(self.data[self.pos : index])
        self.pos = index + 1
        return chunk

    def read_all(self) -> bytes:
        chunk = bytes(self.data[self.pos :])
        self.pos = len(self.data)
        return chunk


class IOSink(Sink):
    """Writes to a binary file-like object (file, socket file, serial port)."""

    def __init__(self, fp: BinaryIO) -> None:
        self.fp = fp

    def write(self, data: bytes | bytearray | memoryview) -> None:
        view = memoryview(data)
        try:
            while view:
                written = self.fp.write(view)
                if written is None:
                    # non-blocking raw stream that could not take anything
                    raise StreamWriteError("stream would block")
                view = view[written:]
        except OSError as exc:
            raise StreamWriteError(str(exc)) from exc


class IOSource(Source):
    """Reads from a binary file-like object."""

    def __init__(self, fp: BinaryIO) -> None:
        self.fp = fp

    def read_exact(self, n: int) -> bytes:
        buf = bytearray()
        try:
            while len(buf) < n:
                chunk = self.fp.read(n - len(buf))
                if not chunk:
                    raise StreamReadError(f"end of stream after {len(buf)} of {n} bytes")
                buf.extend(chunk)
        except OSError as exc:
            raise StreamReadError(str(exc)) from exc
        return bytes(buf)


def as_sink(obj: Any) -> Sink:
    """Adapt `obj` to a :class:`Sink`."""
    if isinstance(obj, Sink):
        return obj
    if hasattr(obj, "write"):
        return IOSink(obj)
    raise TypeError(f"Cannot write to {type(obj).__name__}")


def as_source(obj: Any) -> Source:
    """Adapt `obj` to a :class:`Source`; byte strings are read from the start."""
    if isinstance(obj, Source):
        return obj
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BytesSource(obj)
    if hasattr(obj, "read"):
        return IOSource(obj)
    raise TypeError(f"Cannot read from {type(obj).__name__}")
