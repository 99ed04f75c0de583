import io
import zlib

from conftest import SAMPLE_RESOURCES, build_theme
from pbtheme import list_theme
from pbtheme.container import decode
from pbtheme.errors import FormatErrorKind
from pbtheme.listing import HEADER, RULE, format_listing, scan
from pbtheme.sniff import Kind


def test_scan_classifies_every_resource(sample_theme):
    reader = io.BytesIO(sample_theme)
    entries = scan(reader, decode(reader))

    assert [entry.kind.kind for entry in entries] == [
        Kind.CONFIGURATION,
        Kind.BITMAP,
        Kind.TRUETYPE_FONT,
        Kind.JSON,
        Kind.UNKNOWN,
    ]
    assert all(entry.error is None for entry in entries)


def test_scan_keeps_going_after_a_broken_resource():
    broken = build_theme(
        [("", b"cfg"), ("broken", b"payload"), ("a.json", b'{"x": 1}')],
        compress=lambda payload: b"\x78\x9c" + payload if payload == b"payload" else zlib.compress(payload),
    )
    reader = io.BytesIO(broken)
    entries = scan(reader, decode(reader))

    assert entries[1].kind is None
    assert entries[1].error.kind is FormatErrorKind.DECOMPRESSION
    assert entries[1].summary.startswith("Error: Decompress")
    assert entries[2].kind.kind is Kind.JSON


def test_format_listing_columns(sample_theme):
    reader = io.BytesIO(sample_theme)
    lines = format_listing(scan(reader, decode(reader)))

    assert lines[0] == HEADER
    assert lines[0].startswith("resource ")
    assert lines[0].endswith("size  compressed  verbose")
    assert lines[1] == RULE
    cover = lines[3]
    assert cover[:52].rstrip() == "book_cover"
    assert cover[54:64] == f"{14:>10}"
    assert cover[78:] == "Bitmap 2 x 1 24bpp"
    assert lines[2].rstrip().endswith("Configuration")
    assert len(lines) == 2 + len(SAMPLE_RESOURCES)


def test_list_theme(sample_theme_path):
    entries = list_theme(sample_theme_path)
    assert [entry.descriptor.name for entry in entries] == [name for name, _ in SAMPLE_RESOURCES]
