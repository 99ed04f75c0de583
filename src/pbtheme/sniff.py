"""Heuristic content sniffing for inflated theme resources.

Theme resources carry no type tag, so the kind is guessed from the resource
name and a few leading bytes. Every label is advisory: a match means the
bytes look plausible, not that the payload is valid.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

MAX_BITMAP_DIMENSION = 4096
MAX_BITMAP_BPP = 256
TRANSPARENT_FLAG = 0x8000
BPP_MASK = 0x7FFF

OPENTYPE_MAGIC = b"OTTO"
TRUETYPE_MAGIC = b"\x00\x01\x00\x00"
JSON_PREFIX = b'{"'


class Kind(Enum):
    CONFIGURATION = "configuration"
    BITMAP = "bitmap"
    TRUETYPE_FONT = "truetype"
    OPENTYPE_FONT = "opentype"
    JSON = "json"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BitmapInfo:
    width: int
    height: int
    bits_per_pixel: int
    transparent: bool


@dataclass(frozen=True)
class ResourceKind:
    """Classification of one payload plus a short human readable summary."""

    kind: Kind
    summary: str
    bitmap: Optional[BitmapInfo] = None

    def __str__(self) -> str:
        return self.summary


def bitmap_header(payload: bytes) -> Optional[BitmapInfo]:
    """Interpret the first six bytes as a device bitmap header, if plausible."""

    if len(payload) <= 8:
        return None
    width = int.from_bytes(payload[0:2], "little")
    height = int.from_bytes(payload[2:4], "little")
    raw_flags = int.from_bytes(payload[4:6], "little")
    bpp = raw_flags & BPP_MASK
    if not (0 < width < MAX_BITMAP_DIMENSION and 0 < height < MAX_BITMAP_DIMENSION):
        return None
    if not 0 < bpp < MAX_BITMAP_BPP:
        return None
    return BitmapInfo(width, height, bpp, raw_flags >= TRANSPARENT_FLAG)


def _is_configuration(name: str, payload: bytes) -> bool:
    return name == ""


def _looks_like_bitmap(name: str, payload: bytes) -> Optional[BitmapInfo]:
    return bitmap_header(payload)


def _looks_like_json(name: str, payload: bytes) -> bool:
    return len(payload) > 2 and payload.startswith(JSON_PREFIX)


def _looks_like_opentype(name: str, payload: bytes) -> bool:
    return len(payload) > 4 and payload.startswith(OPENTYPE_MAGIC)


def _looks_like_truetype(name: str, payload: bytes) -> bool:
    return len(payload) > 4 and payload.startswith(TRUETYPE_MAGIC)


def _bitmap(info: BitmapInfo) -> ResourceKind:
    summary = f"Bitmap {info.width} x {info.height} {info.bits_per_pixel}bpp"
    if info.transparent:
        summary += " transparent"
    return ResourceKind(Kind.BITMAP, summary, info)


def _fixed(kind: Kind, summary: str) -> Callable[[Any], ResourceKind]:
    result = ResourceKind(kind, summary)
    return lambda match: result


# A predicate returns a falsy value or a match that is handed to its classifier.
Predicate = Callable[[str, bytes], Any]
Classifier = Callable[[Any], ResourceKind]

# Evaluated in order; the first matching predicate decides.
RULES: Tuple[Tuple[Predicate, Classifier], ...] = (
    (_is_configuration, _fixed(Kind.CONFIGURATION, "Configuration")),
    (_looks_like_bitmap, _bitmap),
    (_looks_like_json, _fixed(Kind.JSON, "JSON?")),
    (_looks_like_opentype, _fixed(Kind.OPENTYPE_FONT, "OpenType font?")),
    (_looks_like_truetype, _fixed(Kind.TRUETYPE_FONT, "TrueType font?")),
)

UNKNOWN = ResourceKind(Kind.UNKNOWN, "Unknown")


def classify(name: str, payload: bytes) -> ResourceKind:
    for predicate, classifier in RULES:
        match = predicate(name, payload)
        if match:
            return classifier(match)
    return UNKNOWN
