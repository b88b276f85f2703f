"""Basic example: dump a model containing a recursive tagged union and load it back."""

from typing import Annotated

from pydantic import BaseModel

from loaddump import Box, FixedArray, TaggedUnion, serialize, deserialize
from loaddump.types import Int32, UInt128


class SampleEnum(TaggedUnion):
    pass


class One(SampleEnum):
    pass


class Struct(SampleEnum):
    f1: Annotated[int, Int32]
    f2: str


class Nested(SampleEnum):
    f0: Annotated[int, UInt128]
    f1: bool
    f2: Box[SampleEnum]


class Sample(BaseModel):
    some_box_arr: tuple[Annotated[int, Int32], ...]
    some_enum: Annotated[list[SampleEnum], FixedArray(3)]
    some_vec: list[str]


def hex_dump(data: bytes, label: str = "") -> None:
    if label:
        print(f"\n  {label}")
    for i in range(0, len(data), 16):
        hex_values = " ".join(f"{b:02x}" for b in data[i : i + 16])
        print(f"  {i:04x}: {hex_values}")


def main() -> None:
    print("=" * 60)
    print("  loaddump: pydantic example")
    print("=" * 60)

    nested = Nested(2**100, True, One())
    print(f"\nNested: {nested!r}")
    data = serialize(nested)
    hex_dump(data, "Bytes:")
    print(f"  Roundtrip: {deserialize(data, SampleEnum)!r}")

    sample = Sample(
        some_box_arr=tuple(range(-10, 10)),
        some_enum=[One(), Struct(-1, "minus one"), nested],
        some_vec=["one", "two", "three"],
    )
    print(f"\nSample: {sample!r}")
    data = serialize(sample)
    hex_dump(data, "Bytes:")

    rt = deserialize(data, Sample)
    print(f"  Roundtrip equal: {rt == sample}")


if __name__ == "__main__":
    main()
