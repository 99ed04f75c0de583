"""PocketBook theme container tools.

Decode the resource table of a ``.pbt`` theme, extract and sniff individual
resources, and convert images into the device's raw bitmap resources. The
same operations are available from the ``pbtheme`` and ``image2res``
commands.
"""
from pathlib import Path
from typing import List

from .bitmap import encode, encode_file
from .container import ResourceDescriptor, decode, open_theme
from .errors import (
    EncodeError,
    EncodeErrorKind,
    FormatError,
    FormatErrorKind,
    ResourceNotFoundError,
)
from .extract import UnpackOptions, extract, find_resource, unpack_resource
from .listing import ListingEntry, scan
from .sniff import BitmapInfo, Kind, ResourceKind, classify

__all__ = [
    "BitmapInfo",
    "EncodeError",
    "EncodeErrorKind",
    "FormatError",
    "FormatErrorKind",
    "Kind",
    "ListingEntry",
    "ResourceDescriptor",
    "ResourceKind",
    "ResourceNotFoundError",
    "UnpackOptions",
    "classify",
    "decode",
    "encode",
    "encode_file",
    "extract",
    "find_resource",
    "list_theme",
    "open_theme",
    "scan",
    "unpack_resource",
]


def list_theme(theme_path: str | Path) -> List[ListingEntry]:
    """Decode a theme file and classify each of its resources.

    Args:
        theme_path: Path to the ``.pbt`` file.

    Returns:
        One entry per table row, in table order. Resources that fail to
        extract carry their error instead of a kind.
    """

    with open_theme(theme_path) as reader:
        return scan(reader, decode(reader))
