"""Encoder for the device's raw 24-bit bitmap resources.

Output layout (little-endian u16 fields):

| Offset | Field          |
|--------|----------------|
| 0      | width          |
| 2      | height         |
| 4      | bits per pixel (always 24) |
| 6      | scanline width (``width * 3``) |
| 8      | ``height`` rows of R, G, B bytes, top to bottom |
"""
from __future__ import annotations

import struct
import warnings
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import EncodeError, EncodeErrorKind

MAX_DIMENSION = 0x7FFF
BITS_PER_PIXEL = 24
BYTES_PER_PIXEL = 3

HEADER_STRUCT = struct.Struct("<HHHH")
WIDE_GRAY_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I")


def check_dimensions(width: int, height: int) -> None:
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise EncodeError(
            EncodeErrorKind.DIMENSIONS_TOO_LARGE,
            f"too big ({width}x{height}, limit {MAX_DIMENSION})",
            field="width" if width > MAX_DIMENSION else "height",
            value=width if width > MAX_DIMENSION else height,
        )


def to_rgb(image: Image.Image) -> Image.Image:
    if image.mode == "RGB":
        return image
    if image.mode in WIDE_GRAY_MODES:
        # 16-bit samples are scaled to 8 bits, not clipped.
        image = image.convert("I").point(lambda v: v * (1 / 257)).convert("L")
    return image.convert("RGB")


def encode(image: Image.Image) -> bytes:
    """Encode ``image`` as a raw bitmap resource.

    Any mode Pillow can convert to RGB is accepted; alpha and extra channels
    are dropped, not composited. 16-bit grayscale is reduced to 8 bits.
    """

    width, height = image.size
    check_dimensions(width, height)

    scanline = width * BYTES_PER_PIXEL
    if scanline > 0xFFFF:
        warnings.warn(
            f"scanline width {scanline} does not fit in 16 bits; header stores {scanline & 0xFFFF}",
            RuntimeWarning,
            stacklevel=2,
        )

    header = HEADER_STRUCT.pack(width, height, BITS_PER_PIXEL, scanline & 0xFFFF)
    return header + to_rgb(image).tobytes()


def default_output_path(src: str | Path) -> Path:
    src = Path(src)
    return src.with_suffix("")


def _open_and_encode(src: Path) -> bytes:
    # Pillow's pixel-count guard is replaced by the resource size limit,
    # checked from the header before any pixel data is decoded.
    previous_limit = Image.MAX_IMAGE_PIXELS
    Image.MAX_IMAGE_PIXELS = None
    try:
        with Image.open(src) as image:
            check_dimensions(*image.size)
            image.load()
            return encode(image)
    finally:
        Image.MAX_IMAGE_PIXELS = previous_limit


def encode_file(src: str | Path, dst: str | Path | None = None, force: bool = False) -> Path:
    """Convert the image at ``src`` and write the resource to ``dst``.

    Nothing is written unless encoding succeeds.
    """

    src = Path(src)
    target = Path(dst) if dst is not None else default_output_path(src)
    if target == src:
        raise EncodeError(
            EncodeErrorKind.IO,
            f"output would overwrite the source image {src}",
            field="output",
            value=str(target),
        )
    if target.exists() and not force:
        raise EncodeError(
            EncodeErrorKind.IO,
            f"{target} already exists (use --force to overwrite)",
            field="output",
            value=str(target),
        )

    try:
        data = _open_and_encode(src)
    except UnidentifiedImageError as exc:
        raise EncodeError(EncodeErrorKind.IMAGE, f"{src}: {exc}") from exc
    except OSError as exc:
        raise EncodeError(EncodeErrorKind.IO, f"{src}: {exc}") from exc

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        raise EncodeError(EncodeErrorKind.IO, f"{target}: {exc}") from exc
    return target
