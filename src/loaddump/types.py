"""Type annotation helpers for mapping Python/pydantic types to wire types."""

from __future__ import annotations

import enum
import types
from typing import Annotated, Any, Callable, ClassVar, Optional, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from loaddump.constants import DEFAULT_FLOAT_SIZE, DEFAULT_INT_SIZE

T = TypeVar("T")


def is_list_type(annotation: Any) -> bool:
    return get_origin(annotation) is list


def list_element_type(annotation: Any) -> Any:
    args = get_args(annotation)
    return args[0] if args else Any


def is_slice_type(annotation: Any) -> bool:
    """`tuple[T, ...]`: a boxed slice, encoded like a growable sequence."""
    args = get_args(annotation)
    return get_origin(annotation) is tuple and len(args) == 2 and args[1] is Ellipsis


def is_tuple_type(annotation: Any) -> bool:
    """`tuple[A, B, C]` (or `tuple[()]`): a fixed heterogeneous group."""
    return get_origin(annotation) is tuple and not is_slice_type(annotation)


def tuple_element_types(annotation: Any) -> tuple[Any, ...]:
    args = get_args(annotation)
    if args == ((),):
        return ()
    return args


def optional_inner_type(annotation: Any) -> Any | None:
    """Return T for `Optional[T]` / `T | None`, else None."""
    if get_origin(annotation) not in (Union, types.UnionType):
        return None
    args = [a for a in get_args(annotation) if a is not type(None)]
    if len(args) != 1 or len(args) == len(get_args(annotation)):
        return None
    return args[0]


def is_pydantic_model(tp: Any) -> bool:
    try:
        return isinstance(tp, type) and issubclass(tp, BaseModel)
    except TypeError:
        return False


def is_enum(tp: Any) -> bool:
    try:
        return isinstance(tp, type) and issubclass(tp, enum.Enum)
    except TypeError:
        return False


def is_tagged_union(tp: Any) -> bool:
    try:
        return isinstance(tp, type) and issubclass(tp, TaggedUnion)
    except TypeError:
        return False


# Extended type annotations for explicit wire sizes.
# Users annotate fields like:  value: Annotated[int, UInt16]


class WireType:
    """Marker for explicit wire type annotation."""

    def __init__(self, name: str, size: int, signed: bool = False, fmt: str | None = None):
        self.name = name
        self.size = size
        self.signed = signed
        self.fmt = fmt  # set for floating point types only

    @property
    def is_float(self) -> bool:
        return self.fmt is not None

    def __repr__(self) -> str:
        return self.name


UInt8 = WireType("UInt8", 1)
Int8 = WireType("Int8", 1, signed=True)
UInt16 = WireType("UInt16", 2)
Int16 = WireType("Int16", 2, signed=True)
UInt32 = WireType("UInt32", 4)
Int32 = WireType("Int32", 4, signed=True)
UInt64 = WireType("UInt64", 8)
Int64 = WireType("Int64", 8, signed=True)
UInt128 = WireType("UInt128", 16)
Int128 = WireType("Int128", 16, signed=True)
Float32 = WireType("Float32", 4, fmt="<f")
Float64 = WireType("Float64", 8, fmt="<d")

DEFAULT_INT = {4: Int32, 8: Int64}[DEFAULT_INT_SIZE]
DEFAULT_FLOAT = {4: Float32, 8: Float64}[DEFAULT_FLOAT_SIZE]


class FixedArray:
    """Marker for a list with exactly `length` elements and no length prefix.

    Usage:  values: Annotated[list[int], FixedArray(3)]
    """

    def __init__(self, length: int):
        if length < 0:
            raise ValueError("FixedArray length cannot be negative")
        self.length = length

    def __repr__(self) -> str:
        return f"FixedArray({self.length})"


class _Indirection:
    def __repr__(self) -> str:
        return "Indirection"


class _Skip:
    def __repr__(self) -> str:
        return "Skip"


Indirection = _Indirection()

# Owned indirection. It adds no bytes; it only documents recursive slots.
Box = Annotated[T, Indirection]

# Field marker: never written, defaulted on load.
Skip = _Skip()


def split_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Strip (possibly nested) `Annotated` wrappers into (base, metadata)."""
    metadata: tuple[Any, ...] = ()
    while get_origin(annotation) is Annotated:
        metadata = annotation.__metadata__ + metadata
        annotation = annotation.__origin__
    return annotation, metadata


def get_wire_type(annotation: Any) -> WireType | None:
    """Extract WireType from Annotated[int, UInt16] style annotations."""
    _, metadata = split_annotated(annotation)
    for m in metadata:
        if isinstance(m, WireType):
            return m
    return None


def get_fixed_array(annotation: Any) -> FixedArray | None:
    _, metadata = split_annotated(annotation)
    for m in metadata:
        if isinstance(m, FixedArray):
            return m
    return None


def field_annotation(field_info: FieldInfo) -> Any:
    """Rebuild the full annotation of a pydantic field, metadata included."""
    if field_info.metadata:
        return Annotated[(field_info.annotation, *field_info.metadata)]
    return field_info.annotation


def is_skipped(field_info: FieldInfo) -> bool:
    return any(m is Skip for m in field_info.metadata)


def zero_value(annotation: Any) -> Any:
    """Zero/default value used for skipped fields that declare no default."""
    base, _ = split_annotated(annotation)
    fixed = get_fixed_array(annotation)
    if fixed is not None:
        return [zero_value(list_element_type(base)) for _ in range(fixed.length)]
    wt = get_wire_type(annotation)
    if wt is not None:
        return 0.0 if wt.is_float else 0
    if optional_inner_type(base) is not None:
        return None
    if base is bool:
        return False
    if base is int:
        return 0
    if base is float:
        return 0.0
    if base is str:
        return ""
    if is_list_type(base):
        return []
    if is_slice_type(base):
        return ()
    if is_tuple_type(base):
        return tuple(zero_value(t) for t in tuple_element_types(base))
    if is_enum(base):
        return next(iter(base))
    if is_pydantic_model(base) and not is_tagged_union(base):
        return model_defaults(base)
    raise TypeError(f"No zero value for {annotation}; declare a default for the skipped field")


def model_defaults(model_type: type[BaseModel]) -> BaseModel:
    kwargs: dict[str, Any] = {}
    for name, field_info in model_type.model_fields.items():
        if not has_default(field_info):
            kwargs[name] = zero_value(field_annotation(field_info))
    return model_type(**kwargs)


def has_default(field_info: FieldInfo) -> bool:
    return not field_info.is_required()


class TaggedUnion(BaseModel):
    """Base class for enumerations whose variants carry payloads.

    A direct subclass declares the union; its own direct subclasses are the
    variants, numbered in declaration order::

        class Shape(TaggedUnion):
            pass

        class Empty(Shape):
            pass

        class Circle(Shape):
            radius: Annotated[int, UInt32]

    Variants can also be built positionally, e.g. ``Circle(5)``, binding
    arguments to fields in declaration order.
    """

    __variants__: ClassVar[list[type[TaggedUnion]]] = []
    __union__: ClassVar[Optional[type[TaggedUnion]]] = None
    __never__: ClassVar[Optional[str]] = None
    __skip__: ClassVar[bool] = False

    def __init__(self, *args: Any, **data: Any) -> None:
        if args:
            names = list(type(self).model_fields)
            if len(args) > len(names):
                raise TypeError(f"{type(self).__name__} takes {len(names)} positional fields, got {len(args)}")
            for name, value in zip(names, args):
                if name in data:
                    raise TypeError(f"{type(self).__name__} got multiple values for field {name!r}")
                data[name] = value
        super().__init__(**data)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        parent = cls.__bases__[0]
        if parent is TaggedUnion:
            cls.__variants__ = []
            cls.__union__ = None
        elif issubclass(parent, TaggedUnion) and parent.__union__ is None:
            cls.__union__ = parent
            cls.__never__ = None
            cls.__skip__ = False
            parent.__variants__.append(cls)
        else:
            raise TypeError(f"{cls.__name__}: variants of {parent.__name__} cannot be subclassed")

    @classmethod
    def union_type(cls) -> type[TaggedUnion]:
        return cls if cls.__union__ is None else cls.__union__

    @classmethod
    def variants(cls) -> list[type[TaggedUnion]]:
        return cls.union_type().__variants__

    @classmethod
    def ordinal(cls) -> int:
        if cls.__union__ is None:
            raise TypeError(f"{cls.__name__} is a union, not a variant")
        return cls.__union__.__variants__.index(cls)


def never(message: str) -> Callable[[type[T]], type[T]]:
    """Mark a variant as impossible to dump or load.

    Reaching it in either direction raises :class:`~loaddump.errors.NeverVariantError`.
    """

    def decorate(variant: type[T]) -> type[T]:
        _check_variant(variant)
        variant.__never__ = message  # type: ignore[attr-defined]
        return variant

    return decorate


def skip_variant(variant: type[T]) -> type[T]:
    """Mark a variant as never written; it still owns its ordinal."""
    _check_variant(variant)
    variant.__skip__ = True  # type: ignore[attr-defined]
    return variant


def _check_variant(variant: Any) -> None:
    if not is_tagged_union(variant) or variant.__union__ is None:
        raise TypeError(f"{variant!r} is not a TaggedUnion variant")
