"""Resource listing used by ``pbtheme list``."""
from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Sequence

from .container import ResourceDescriptor
from .errors import FormatError
from .extract import extract
from .sniff import ResourceKind, classify

NAME_WIDTH = 52
SIZE_WIDTH = 10
HEADER = f"{'resource':<{NAME_WIDTH}}  {'size':>{SIZE_WIDTH}}  {'compressed':>{SIZE_WIDTH}}  verbose"
RULE = "-" * 107


@dataclass(frozen=True)
class ListingEntry:
    descriptor: ResourceDescriptor
    kind: Optional[ResourceKind] = None
    error: Optional[FormatError] = None

    @property
    def summary(self) -> str:
        if self.error is not None:
            return f"Error: {self.error}"
        return self.kind.summary if self.kind is not None else ""


def scan(reader: BinaryIO, descriptors: Sequence[ResourceDescriptor]) -> List[ListingEntry]:
    """Extract and classify every resource in table order.

    A resource that fails to extract gets an entry carrying its error; the
    remaining resources are still scanned.
    """

    entries: List[ListingEntry] = []
    for descriptor in descriptors:
        try:
            payload = extract(reader, descriptor)
        except FormatError as exc:
            entries.append(ListingEntry(descriptor, error=exc))
            continue
        entries.append(ListingEntry(descriptor, kind=classify(descriptor.name, payload)))
    return entries


def format_listing(entries: Sequence[ListingEntry]) -> List[str]:
    lines = [HEADER, RULE]
    for entry in entries:
        d = entry.descriptor
        lines.append(
            f"{d.name:<{NAME_WIDTH}}  {d.uncompressed_size:>{SIZE_WIDTH}}  "
            f"{d.compressed_size:>{SIZE_WIDTH}}  {entry.summary}"
        )
    return lines
