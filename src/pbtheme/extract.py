"""Lazy payload extraction for resources described by the table."""
from __future__ import annotations

import io
import warnings
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Sequence

from .container import ResourceDescriptor, read_exact
from .errors import FormatError, FormatErrorKind, ResourceNotFoundError

CONFIG_FILE_NAME = "theme.cfg"


@dataclass
class UnpackOptions:
    """Options for writing extracted resources to disk."""

    output_dir: Path = Path(".")
    force: bool = False
    verify_size: bool = False


def extract(reader: BinaryIO, descriptor: ResourceDescriptor, verify_size: bool = False) -> bytes:
    """Return the inflated payload of ``descriptor``.

    The reader is repositioned to the absolute payload offset, so resources
    may be extracted in any order from the same stream.
    """

    try:
        reader.seek(descriptor.payload_offset, io.SEEK_SET)
    except (OSError, ValueError, OverflowError) as exc:
        raise FormatError(
            FormatErrorKind.IO,
            f"cannot seek to {descriptor.payload_offset}: {exc}",
            field="payload_offset",
            value=descriptor.payload_offset,
        ) from exc

    compressed = read_exact(reader, descriptor.compressed_size, f"payload of {descriptor.name!r}")
    try:
        data = zlib.decompress(compressed)
    except zlib.error as exc:
        raise FormatError(
            FormatErrorKind.DECOMPRESSION,
            f"{descriptor.name!r}: {exc}",
            field="payload",
            value=descriptor.payload_offset,
        ) from exc

    if verify_size and len(data) != descriptor.uncompressed_size:
        warnings.warn(
            f"{descriptor.name or CONFIG_FILE_NAME}: inflated to {len(data)} bytes, "
            f"table declares {descriptor.uncompressed_size}",
            RuntimeWarning,
            stacklevel=2,
        )
    return data


def find_resource(descriptors: Iterable[ResourceDescriptor], name: str) -> Optional[ResourceDescriptor]:
    for descriptor in descriptors:
        if descriptor.name == name:
            return descriptor
    return None


def output_name(descriptor: ResourceDescriptor) -> str:
    return CONFIG_FILE_NAME if descriptor.is_configuration else descriptor.name


def resolve_output_path(output_dir: Path, name: str) -> Path:
    base = output_dir.resolve()
    target = (output_dir / name).resolve()
    if target == base or base not in target.parents:
        raise FormatError(
            FormatErrorKind.IO,
            f"resource name {name!r} would be written outside {output_dir}",
            field="name",
            value=name,
        )
    return target


def unpack_resource(
    reader: BinaryIO,
    descriptors: Sequence[ResourceDescriptor],
    name: str,
    options: UnpackOptions | None = None,
) -> Path:
    """Extract the resource called ``name`` and write it below ``output_dir``."""

    options = options or UnpackOptions()
    descriptor = find_resource(descriptors, name)
    if descriptor is None:
        raise ResourceNotFoundError(f"No resource named {name!r} in theme")

    target = resolve_output_path(Path(options.output_dir), output_name(descriptor))
    if target.exists() and not options.force:
        raise FormatError(
            FormatErrorKind.IO,
            f"{target} already exists (use --force to overwrite)",
            field="output",
            value=str(target),
        )

    data = extract(reader, descriptor, verify_size=options.verify_size)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        raise FormatError(FormatErrorKind.IO, f"Error writing file {target}: {exc}") from exc
    return target
