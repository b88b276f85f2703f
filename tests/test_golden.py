"""Golden byte vectors for the wire format."""

from typing import Annotated, Optional

from pydantic import BaseModel

from loaddump import TaggedUnion, serialize, deserialize
from loaddump.types import Int32, Int64, UInt8, UInt16, UInt128


# ── Models ────────────────────────────────────────────────────────────


class Status(TaggedUnion):
    pass


class Idle(Status):
    pass


class Fault(Status):
    code: Annotated[int, Int32]
    reason: str


class Telemetry(BaseModel):
    node: Annotated[int, UInt16]
    label: str
    status: Status
    samples: list[Annotated[int, UInt8]]
    limit: Optional[Annotated[int, Int64]]
    pair: tuple[bool, Annotated[int, UInt128]]


# ── Golden byte vectors ──────────────────────────────────────────────

TELEMETRY = bytes(
    [
        0x02, 0x01,                                      # node
        0x6F, 0x6B, 0x00,                                # label "ok"
        0x01, 0x00, 0x00, 0x00,                          # status tag: Fault
        0xFF, 0xFF, 0xFF, 0xFF,                          # code -1
        0x68, 0x6F, 0x74, 0x00,                          # reason "hot"
        0x03, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,  # samples count
        0x01, 0x02, 0x03,
        0x00,                                            # limit absent
        0x01,                                            # pair.0
        0x01, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,  # pair.1
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
    ]
)

TELEMETRY_IDLE = bytes(
    [
        0x00, 0x00,
        0x00,
        0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x01, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0x7F,
        0x00,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
    ]
)


# ── Tests ─────────────────────────────────────────────────────────────


def test_telemetry_matches_expected_wire_bytes():
    t = Telemetry(
        node=0x0102,
        label="ok",
        status=Fault(code=-1, reason="hot"),
        samples=[1, 2, 3],
        limit=None,
        pair=(True, 1),
    )
    data = serialize(t)

    assert data == TELEMETRY, _diff(TELEMETRY, data)


def test_idle_telemetry_matches_expected_wire_bytes():
    t = Telemetry(
        node=0,
        label="",
        status=Idle(),
        samples=[],
        limit=2**63 - 1,
        pair=(False, 0),
    )
    data = serialize(t)

    assert data == TELEMETRY_IDLE, _diff(TELEMETRY_IDLE, data)


def test_telemetry_roundtrip():
    t = deserialize(TELEMETRY, Telemetry)
    assert t.node == 0x0102
    assert t.label == "ok"
    assert t.status == Fault(code=-1, reason="hot")
    assert t.samples == [1, 2, 3]
    assert t.limit is None
    assert t.pair == (True, 1)


def test_idle_telemetry_roundtrip():
    t = deserialize(TELEMETRY_IDLE, Telemetry)
    assert isinstance(t.status, Idle)
    assert t.limit == 2**63 - 1
    assert t.pair == (False, 0)


# ── Helpers ───────────────────────────────────────────────────────────


def _diff(expected: bytes, actual: bytes) -> str:
    lines = ["Byte mismatch:"]
    max_len = max(len(expected), len(actual))
    for i in range(max_len):
        e = f"0x{expected[i]:02X}" if i < len(expected) else "---"
        a = f"0x{actual[i]:02X}" if i < len(actual) else "---"
        marker = " <<" if e != a else ""
        lines.append(f"  [{i:3d}] expected={e}  actual={a}{marker}")
    lines.append(f"  expected len={len(expected)}, actual len={len(actual)}")
    return "\n".join(lines)
