"""Schema-bound little-endian binary dump/load for pydantic models."""

from loaddump.codec import (
    serialize,
    deserialize,
    dump,
    load,
)
from loaddump.deserializer import Deserializer
from loaddump.serializer import Serializer
from loaddump.sequence import SequenceIterator
from loaddump.stream import (
    Sink,
    Source,
    BytesSink,
    BytesSource,
    IOSink,
    IOSource,
)
from loaddump.types import (
    Box,
    FixedArray,
    Skip,
    TaggedUnion,
    never,
    skip_variant,
)
from loaddump.errors import (
    ErrorKind,
    LoadDumpError,
    StreamReadError,
    StreamWriteError,
    InvalidUtf8Error,
    EmbeddedNulError,
    UnknownError,
    FatalError,
    NeverVariantError,
    InvalidTagError,
)

__all__ = [
    "serialize",
    "deserialize",
    "dump",
    "load",
    "Deserializer",
    "Serializer",
    "SequenceIterator",
    "Sink",
    "Source",
    "BytesSink",
    "BytesSource",
    "IOSink",
    "IOSource",
    "Box",
    "FixedArray",
    "Skip",
    "TaggedUnion",
    "never",
    "skip_variant",
    "ErrorKind",
    "LoadDumpError",
    "StreamReadError",
    "StreamWriteError",
    "InvalidUtf8Error",
    "EmbeddedNulError",
    "UnknownError",
    "FatalError",
    "NeverVariantError",
    "InvalidTagError",
]
