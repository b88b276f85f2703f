"""Fail-fast, forward-only decoding of length-prefixed sequences."""

from __future__ import annotations

from typing import Callable, Generic, Iterator, TypeVar

from structlog import get_logger

from loaddump.constants import SEQUENCE_LENGTH_SIZE
from loaddump.scalar import read_int
from loaddump.stream import Source

logger = get_logger()

T = TypeVar("T")


class SequenceIterator(Generic[T]):
    """Decodes `n_elems` values from `source`, one per step.

    The first failing step raises its error and marks the iterator as failed;
    from then on it is exhausted and only raises ``StopIteration``. A failed
    sequence must be treated as a failed load, never as a shorter sequence.
    """

    def __init__(self, source: Source, decode: Callable[[Source], T], n_elems: int) -> None:
        self.source = source
        self.decode = decode
        self.n_elems = n_elems
        self.read_elems = 0
        self.failed = False

    @classmethod
    def from_source(cls, source: Source, decode: Callable[[Source], T]) -> SequenceIterator[T]:
        """Read the u64 element count and return an iterator over the elements."""
        n_elems = read_int(source, SEQUENCE_LENGTH_SIZE, signed=False)
        return cls(source, decode, n_elems)

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self.failed or self.read_elems >= self.n_elems:
            raise StopIteration
        try:
            value = self.decode(self.source)
        except Exception as exc:
            self.failed = True
            logger.debug("sequence decode failed", index=self.read_elems, n_elems=self.n_elems, error=str(exc))
            raise
        self.read_elems += 1
        return value
