"""Deserializer: wire bytes → Python values."""

from __future__ import annotations

from enum import Enum
from typing import Any, Type, TypeVar

from pydantic import BaseModel
from structlog import get_logger

from loaddump.constants import MAX_TUPLE_ARITY, TAG_SIZE, TEXT_TERMINATOR
from loaddump.errors import InvalidTagError, InvalidUtf8Error, NeverVariantError, UnknownError
from loaddump.scalar import read_bool, read_int, read_scalar
from loaddump.sequence import SequenceIterator
from loaddump.stream import BytesSource, Source
from loaddump.types import (
    DEFAULT_FLOAT,
    DEFAULT_INT,
    TaggedUnion,
    field_annotation,
    get_fixed_array,
    get_wire_type,
    has_default,
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
    zero_value,
)

logger = get_logger()

T = TypeVar("T", bound=BaseModel)


class Deserializer:
    """Reads values from a source using the wire format."""

    def __init__(self, source: Source | bytes | bytearray) -> None:
        self.source = source if isinstance(source, Source) else BytesSource(source)

    def iter_sequence(self, elem_annotation: Any) -> SequenceIterator[Any]:
        """Read a sequence length and return a lazy iterator over its elements."""
        return SequenceIterator.from_source(self.source, lambda _: self.load(elem_annotation))

    def _read_text(self) -> str:
        raw = self.source.read_until(TEXT_TERMINATOR)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidUtf8Error(str(exc)) from exc

    def _read_sequence(self, elem_annotation: Any) -> list:
        result = []
        for value in self.iter_sequence(elem_annotation):
            result.append(value)
        return result

    def _read_array(self, elem_annotation: Any, length: int) -> list:
        result = []
        for _ in range(length):
            result.append(self.load(elem_annotation))
        if len(result) != length:
            raise UnknownError(f"fixed array built {len(result)} of {length} elements")
        return result

    def _read_tuple(self, elem_annotations: tuple[Any, ...]) -> tuple:
        if len(elem_annotations) > MAX_TUPLE_ARITY:
            raise TypeError(f"Tuples are limited to {MAX_TUPLE_ARITY} elements")
        return tuple(self.load(ann) for ann in elem_annotations)

    def _read_optional(self, inner: Any) -> Any:
        if read_bool(self.source):
            return self.load(inner)
        return None

    def _read_enum(self, enum_type: type[Enum]) -> Enum:
        members = list(enum_type)
        tag = read_int(self.source, TAG_SIZE, signed=False)
        if tag >= len(members):
            logger.error("tag out of range", union=enum_type.__name__, tag=tag)
            raise InvalidTagError(enum_type.__name__, tag)
        return members[tag]

    def deserialize_model(self, model_type: Type[T]) -> T:
        """Construct `model_type` field by field; skipped fields get their default."""
        if is_tagged_union(model_type):
            return self.deserialize_variant(model_type)  # type: ignore[return-value]
        return self._read_fields(model_type)

    def deserialize_variant(self, union_type: type[TaggedUnion]) -> TaggedUnion:
        union_type = union_type.union_type()
        variants = union_type.__variants__
        tag = read_int(self.source, TAG_SIZE, signed=False)
        if tag >= len(variants):
            logger.error("tag out of range", union=union_type.__name__, tag=tag)
            raise InvalidTagError(union_type.__name__, tag)
        variant = variants[tag]
        if variant.__never__ is not None:
            logger.error("loading forbidden variant", union=union_type.__name__, variant=variant.__name__)
            raise NeverVariantError(union_type.__name__, variant.__name__, "loaded", variant.__never__)
        return self._read_fields(variant)

    def _read_fields(self, model_type: Type[T]) -> T:
        kwargs: dict[str, Any] = {}
        for field_name, field_info in model_type.model_fields.items():
            annotation = field_annotation(field_info)
            if not is_skipped(field_info):
                kwargs[field_name] = self.load(annotation)
            elif not has_default(field_info):
                kwargs[field_name] = zero_value(annotation)
        return model_type(**kwargs)

    def load(self, annotation: Any) -> Any:
        """Read one value of the type described by `annotation`."""
        base, _ = split_annotated(annotation)
        wire_type = get_wire_type(annotation)
        fixed = get_fixed_array(annotation)
        if wire_type is not None:
            return read_scalar(self.source, wire_type)
        elif fixed is not None:
            return self._read_array(list_element_type(base), fixed.length)
        elif base is bool:
            return read_bool(self.source)
        elif base is str:
            return self._read_text()
        elif base is int:
            return read_scalar(self.source, DEFAULT_INT)
        elif base is float:
            return read_scalar(self.source, DEFAULT_FLOAT)
        elif optional_inner_type(base) is not None:
            return self._read_optional(optional_inner_type(base))
        elif is_list_type(base):
            return self._read_sequence(list_element_type(base))
        elif is_slice_type(base):
            return tuple(self._read_sequence(list_element_type(base)))
        elif is_tuple_type(base):
            return self._read_tuple(tuple_element_types(base))
        elif is_enum(base):
            return self._read_enum(base)
        elif is_tagged_union(base) or is_pydantic_model(base):
            return self.deserialize_model(base)
        else:
            raise TypeError(f"Cannot resolve wire format for {annotation}")
