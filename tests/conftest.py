import struct
import zlib
from typing import Sequence, Tuple

import pytest

MAGIC = b"PocketBookTheme"


def encode_name(name: str) -> bytes:
    raw = name.encode("latin-1")
    # Always at least one NUL, then pad to a 4 byte boundary.
    padded = raw + b"\x00"
    return padded + b"\x00" * (-len(padded) % 4)


def build_theme(
    resources: Sequence[Tuple[str, bytes]],
    version: int = 1,
    magic: bytes = MAGIC,
    compress=zlib.compress,
) -> bytes:
    """Assemble a theme container; the first resource is the configuration."""

    compressed = [compress(payload) for _, payload in resources]
    entry_sizes = [12 if idx == 0 else 12 + len(encode_name(name)) for idx, (name, _) in enumerate(resources)]
    table_length = sum(entry_sizes)
    offset = 20 + table_length

    table = bytearray()
    for idx, ((name, payload), blob) in enumerate(zip(resources, compressed)):
        table += struct.pack("<III", len(payload), offset, len(blob))
        if idx:
            table += encode_name(name)
        offset += len(blob)

    header = magic + bytes([version]) + struct.pack("<I", table_length + 32)
    return header + bytes(table) + b"".join(compressed)


SAMPLE_BITMAP = struct.pack("<HHHH", 2, 1, 24, 6) + bytes([1, 2, 3, 4, 5, 6])
SAMPLE_RESOURCES = [
    ("", b"[general]\nfont=LiberationSans\n"),
    ("book_cover", SAMPLE_BITMAP),
    ("fonts/Sans.ttf", b"\x00\x01\x00\x00" + b"\x00" * 12),
    ("layout.json", b'{"panel": {"height": 40}}'),
    ("misc", b"\xff\xfe\xfd"),
]


@pytest.fixture
def sample_theme() -> bytes:
    return build_theme(SAMPLE_RESOURCES)


@pytest.fixture
def sample_theme_path(tmp_path, sample_theme):
    path = tmp_path / "Sample.pbt"
    path.write_bytes(sample_theme)
    return path
