"""Top-level dump/load functions."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

from loaddump.deserializer import Deserializer
from loaddump.serializer import Serializer
from loaddump.stream import BytesSink, as_sink, as_source


def _infer_annotation(value: Any) -> Any:
    if isinstance(value, (BaseModel, Enum)):
        return type(value)
    if isinstance(value, (bool, str)):
        return type(value)
    raise TypeError(f"Cannot infer the wire type of {type(value).__name__}; pass an annotation")


def serialize(value: Any, annotation: Optional[Any] = None) -> bytes:
    """Serialize `value` to bytes.

    `annotation` describes the wire type (for example ``list[Annotated[int, UInt16]]``);
    it can be left out for models, tagged unions, enums, bools and strings.
    """
    ser = Serializer(BytesSink())
    ser.dump(value, annotation if annotation is not None else _infer_annotation(value))
    return ser.finalize()


def deserialize(data: bytes | bytearray, annotation: Any) -> Any:
    """Deserialize a value of type `annotation` from the start of `data`."""
    de = Deserializer(data)
    return de.load(annotation)


def dump(value: Any, stream: Any, annotation: Optional[Any] = None) -> None:
    """Write `value` to a sink or binary file-like object."""
    ser = Serializer(as_sink(stream))
    ser.dump(value, annotation if annotation is not None else _infer_annotation(value))


def load(stream: Any, annotation: Any) -> Any:
    """Read a value of type `annotation` from a source, byte string or binary file-like object."""
    de = Deserializer(as_source(stream))
    return de.load(annotation)
