"""Serializer: Python values → wire bytes."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from pydantic import BaseModel
from structlog import get_logger

from loaddump.constants import MAX_TUPLE_ARITY, SEQUENCE_LENGTH_SIZE, TAG_SIZE, TEXT_TERMINATOR
from loaddump.errors import EmbeddedNulError, NeverVariantError
from loaddump.scalar import write_bool, write_int, write_scalar
from loaddump.stream import BytesSink, Sink
from loaddump.types import (
    DEFAULT_FLOAT,
    DEFAULT_INT,
    TaggedUnion,
    field_annotation,
    get_fixed_array,
    get_wire_type,
    is_enum,
    is_list_type,
    is_pydantic_model,
    is_skipped,
    is_slice_type,
    is_tagged_union,
    is_tuple_type,
    list_element_type,
    optional_inner_type,
    split_annotated,
    tuple_element_types,
)

logger = get_logger()


class Serializer:
    """Writes values to a sink using the wire format."""

    def __init__(self, sink: Sink | None = None) -> None:
        self.sink = sink if sink is not None else BytesSink()

    def finalize(self) -> bytes:
        """Bytes written so far; only available for in-memory sinks."""
        if not isinstance(self.sink, BytesSink):
            raise TypeError("finalize() needs a BytesSink")
        return self.sink.getvalue()

    def write_iter(self, values: Iterable[Any], length: int, annotation: Any) -> None:
        """Write a length-prefixed sequence from any iterable yielding `length` values."""
        write_int(self.sink, length, SEQUENCE_LENGTH_SIZE, signed=False)
        count = 0
        for value in values:
            self.dump(value, annotation)
            count += 1
        if count != length:
            raise ValueError(f"Iterable yielded {count} values, {length} were announced")

    def _write_text(self, value: str) -> None:
        encoded = value.encode("utf-8")
        if TEXT_TERMINATOR in encoded:
            raise EmbeddedNulError(f"at offset {encoded.index(TEXT_TERMINATOR)}")
        self.sink.write(encoded)
        self.sink.write_byte(TEXT_TERMINATOR)

    def _write_sequence(self, values: Any, elem_annotation: Any) -> None:
        write_int(self.sink, len(values), SEQUENCE_LENGTH_SIZE, signed=False)
        for val in values:
            self.dump(val, elem_annotation)

    def _write_array(self, values: Any, elem_annotation: Any, length: int) -> None:
        if len(values) != length:
            raise ValueError(f"Fixed array expects {length} elements, got {len(values)}")
        for val in values:
            self.dump(val, elem_annotation)

    def _write_tuple(self, values: tuple, elem_annotations: tuple[Any, ...]) -> None:
        if len(elem_annotations) > MAX_TUPLE_ARITY:
            raise TypeError(f"Tuples are limited to {MAX_TUPLE_ARITY} elements")
        if len(values) != len(elem_annotations):
            raise ValueError(f"Tuple expects {len(elem_annotations)} elements, got {len(values)}")
        for val, ann in zip(values, elem_annotations):
            self.dump(val, ann)

    def _write_optional(self, value: Any, inner: Any) -> None:
        if value is None:
            write_bool(self.sink, False)
        else:
            write_bool(self.sink, True)
            self.dump(value, inner)

    def _write_enum(self, value: Enum) -> None:
        members = list(type(value))
        write_int(self.sink, members.index(value), TAG_SIZE, signed=False)

    def serialize_model(self, model: BaseModel) -> None:
        """Write every non-skipped field of `model` in declaration order."""
        if isinstance(model, TaggedUnion):
            self.serialize_variant(model)
            return
        self._write_fields(model)

    def serialize_variant(self, value: TaggedUnion) -> None:
        variant = type(value)
        if variant.__union__ is None:
            raise TypeError(f"{variant.__name__} is a union; only its variants can be dumped")
        if variant.__never__ is not None:
            union_name = variant.__union__.__name__
            logger.error("dumping forbidden variant", union=union_name, variant=variant.__name__)
            raise NeverVariantError(union_name, variant.__name__, "dumped", variant.__never__)
        if variant.__skip__:
            return
        write_int(self.sink, variant.ordinal(), TAG_SIZE, signed=False)
        self._write_fields(value)

    def _write_fields(self, model: BaseModel) -> None:
        for field_name, field_info in type(model).model_fields.items():
            if is_skipped(field_info):
                continue
            self.dump(getattr(model, field_name), field_annotation(field_info))

    def dump(self, value: Any, annotation: Any) -> None:
        """Write `value` as the type described by `annotation`."""
        base, _ = split_annotated(annotation)
        wire_type = get_wire_type(annotation)
        fixed = get_fixed_array(annotation)
        if wire_type is not None:
            write_scalar(self.sink, value, wire_type)
        elif fixed is not None:
            self._write_array(value, list_element_type(base), fixed.length)
        elif base is bool:
            write_bool(self.sink, value)
        elif base is str:
            self._write_text(value)
        elif base is int:
            write_scalar(self.sink, value, DEFAULT_INT)
        elif base is float:
            write_scalar(self.sink, value, DEFAULT_FLOAT)
        elif optional_inner_type(base) is not None:
            self._write_optional(value, optional_inner_type(base))
        elif is_list_type(base) or is_slice_type(base):
            self._write_sequence(value, list_element_type(base))
        elif is_tuple_type(base):
            self._write_tuple(value, tuple_element_types(base))
        elif is_enum(base):
            self._write_enum(value)
        elif is_tagged_union(base) or is_pydantic_model(base):
            self.serialize_model(value)
        else:
            raise TypeError(f"Cannot resolve wire format for {annotation}")
