"""Decoder for the PocketBook theme container header and resource table.

Layout (all integers little-endian):

* 15 bytes  magic ``PocketBookTheme``
* 1 byte    version, always 1
* 4 bytes   table length ``L``
* ``L - 32`` bytes of resource entries, then the zlib payloads

Each entry is ``uncompressed_size``, ``payload_offset`` and
``compressed_size`` (u32 each) followed by a NUL padded name. The first entry
is the theme configuration and carries no name field at all.
"""
from __future__ import annotations

import struct
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, List

from .errors import FormatError, FormatErrorKind

MAGIC = b"PocketBookTheme"
SUPPORTED_VERSION = 1
# Observed table length bias; the length field counts a 32 byte preamble.
TABLE_LENGTH_BIAS = 32
NAME_GROUP_SIZE = 4

ENTRY_STRUCT = struct.Struct("<III")


@dataclass(frozen=True)
class ResourceDescriptor:
    """One resource table entry. Payload bytes are fetched on demand."""

    uncompressed_size: int
    payload_offset: int
    compressed_size: int
    name: str = ""

    @property
    def is_configuration(self) -> bool:
        return self.name == ""


def read_exact(reader: BinaryIO, size: int, what: str) -> bytes:
    """Read exactly ``size`` bytes or raise a ``TRUNCATED`` error."""

    try:
        data = reader.read(size)
    except OSError as exc:
        raise FormatError(FormatErrorKind.IO, f"reading {what}: {exc}", field=what) from exc
    if len(data) != size:
        raise FormatError(
            FormatErrorKind.TRUNCATED,
            f"unexpected end of file reading {what} ({len(data)} of {size} bytes)",
            field=what,
            value=len(data),
        )
    return data


def _tell(reader: BinaryIO) -> int:
    try:
        return reader.tell()
    except OSError as exc:
        raise FormatError(FormatErrorKind.IO, f"stream position unavailable: {exc}") from exc


def read_name(reader: BinaryIO) -> str:
    """Read a NUL terminated name stored in 4 byte groups."""

    name = bytearray()
    while True:
        group = read_exact(reader, NAME_GROUP_SIZE, "resource name")
        for byte in group:
            if byte == 0:
                return name.decode("latin-1")
            name.append(byte)


def read_descriptor(reader: BinaryIO, first: bool) -> ResourceDescriptor:
    size, offset, compressed_size = ENTRY_STRUCT.unpack(
        read_exact(reader, ENTRY_STRUCT.size, "resource entry")
    )
    name = "" if first else read_name(reader)
    return ResourceDescriptor(
        uncompressed_size=size,
        payload_offset=offset,
        compressed_size=compressed_size,
        name=name,
    )


def read_preamble(reader: BinaryIO) -> int:
    """Validate magic and version; return the position where the table ends."""

    magic = read_exact(reader, len(MAGIC), "magic")
    if magic != MAGIC:
        raise FormatError(
            FormatErrorKind.BAD_MAGIC,
            "File does not start PocketBookTheme",
            field="magic",
            value=magic,
        )
    version = read_exact(reader, 1, "version")[0]
    if version != SUPPORTED_VERSION:
        raise FormatError(
            FormatErrorKind.UNSUPPORTED_VERSION,
            f"Not version {SUPPORTED_VERSION} (found {version})",
            field="version",
            value=version,
        )
    table_length = int.from_bytes(read_exact(reader, 4, "table length"), "little")
    return _tell(reader) + table_length - TABLE_LENGTH_BIAS


def decode(reader: BinaryIO) -> List[ResourceDescriptor]:
    """Parse the container preamble and resource table.

    The reader must be positioned at the start of the container. Offsets and
    sizes are not checked here; a bad entry only fails when it is extracted.
    Any failure aborts the whole table.
    """

    end = read_preamble(reader)
    descriptors: List[ResourceDescriptor] = []
    while _tell(reader) < end:
        descriptors.append(read_descriptor(reader, first=not descriptors))
    return descriptors


@contextmanager
def open_theme(path: str | Path) -> Iterator[BinaryIO]:
    """Open a theme file for reading, reporting failures as ``FormatError``."""

    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise FormatError(FormatErrorKind.IO, f"couldn't open {path}: {exc}") from exc
    with handle:
        yield handle
