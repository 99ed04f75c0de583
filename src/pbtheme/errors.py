"""Error types shared by the theme decoder and the bitmap encoder."""
from __future__ import annotations

from enum import Enum
from typing import Any


class FormatErrorKind(Enum):
    BAD_MAGIC = "bad_magic"
    UNSUPPORTED_VERSION = "unsupported_version"
    TRUNCATED = "truncated"
    DECOMPRESSION = "decompression"
    IO = "io"


class EncodeErrorKind(Enum):
    DIMENSIONS_TOO_LARGE = "dimensions_too_large"
    IMAGE = "image"
    IO = "io"


_PREFIXES = {
    FormatErrorKind.BAD_MAGIC: "Bad format",
    FormatErrorKind.UNSUPPORTED_VERSION: "Bad format",
    FormatErrorKind.TRUNCATED: "Bad format",
    FormatErrorKind.DECOMPRESSION: "Decompress",
    FormatErrorKind.IO: "I/O error",
    EncodeErrorKind.DIMENSIONS_TOO_LARGE: "Bad format",
    EncodeErrorKind.IMAGE: "Image error",
    EncodeErrorKind.IO: "I/O error",
}


class _KindedError(Exception):
    def __init__(
        self,
        kind: Any,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.field = field
        self.value = value

    def __str__(self) -> str:
        return f"{_PREFIXES[self.kind]}: {self.message}"


class FormatError(_KindedError):
    """Raised when a theme container cannot be decoded or a resource extracted.

    ``kind`` is always a :class:`FormatErrorKind`; ``field`` and ``value``
    name the offending header field when there is one.
    """

    def __init__(
        self,
        kind: FormatErrorKind,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        if not isinstance(kind, FormatErrorKind):
            raise TypeError(f"FormatError kind must be FormatErrorKind, got {kind!r}")
        super().__init__(kind, message, field, value)


class EncodeError(_KindedError):
    """Raised when an image cannot be turned into a raw bitmap resource."""

    def __init__(
        self,
        kind: EncodeErrorKind,
        message: str,
        field: str | None = None,
        value: Any = None,
    ):
        if not isinstance(kind, EncodeErrorKind):
            raise TypeError(f"EncodeError kind must be EncodeErrorKind, got {kind!r}")
        super().__init__(kind, message, field, value)


class ResourceNotFoundError(LookupError):
    """Raised when a theme holds no resource with the requested name."""
