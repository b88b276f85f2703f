"""Error taxonomy.

Recoverable failures derive from :class:`LoadDumpError` and carry an
:class:`ErrorKind`. Logic errors and structurally corrupt tagged unions raise
:class:`FatalError`, which is kept out of that hierarchy so that handlers for
ordinary stream failures never catch them.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    STREAM_READ = "Cannot read from stream"
    STREAM_WRITE = "Cannot write to stream"
    INVALID_UTF8 = "Invalid UTF-8 detected in input"
    EMBEDDED_NUL = "Text contains an embedded NUL byte"
    UNKNOWN = "Unknown error"

    def __str__(self) -> str:
        return self.value


class LoadDumpError(Exception):
    """Base class for recoverable dump/load failures."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = str(self.kind) if detail is None else f"{self.kind}: {detail}"
        super().__init__(message)


class StreamReadError(LoadDumpError):
    kind = ErrorKind.STREAM_READ


class StreamWriteError(LoadDumpError):
    kind = ErrorKind.STREAM_WRITE


class InvalidUtf8Error(LoadDumpError):
    kind = ErrorKind.INVALID_UTF8


class EmbeddedNulError(LoadDumpError):
    kind = ErrorKind.EMBEDDED_NUL


class UnknownError(LoadDumpError):
    """An internal invariant could not be upheld."""

    kind = ErrorKind.UNKNOWN


class FatalError(RuntimeError):
    """Unrecoverable condition: a forbidden variant or an impossible tag."""


class NeverVariantError(FatalError):
    def __init__(self, type_name: str, variant_name: str, action: str, message: str) -> None:
        self.type_name = type_name
        self.variant_name = variant_name
        super().__init__(f"{type_name}::{variant_name} cannot be {action}: {message}")


class InvalidTagError(FatalError):
    def __init__(self, type_name: str, tag: int) -> None:
        self.type_name = type_name
        self.tag = tag
        super().__init__(f"{tag} is out of {type_name} values range")
