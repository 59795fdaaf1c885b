"""Minimal PNG writer for raw raster buffers found during extraction.

Only the subset needed to materialize extracted images is produced: 8-bit
RGBA (color type 6), no interlacing, filter type 0 on every scanline and a
single ``IDAT`` chunk.  Grayscale and RGB sources are expanded to RGBA.
"""

from __future__ import annotations

import base64
import struct
import zlib

import numpy as np


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

_CRC_POLYNOMIAL = 0xEDB88320
_BIT_DEPTH = 8
_COLOR_TYPE_RGBA = 6
_COMPRESSION_LEVEL = 1
_MAX_DIMENSION = 0x7FFFFFFF
_OPAQUE = 255


class EncodingError(ValueError):
    """Raised when a pixel buffer cannot be turned into a PNG."""


def _build_crc_table() -> tuple[int, ...]:
    table: list[int] = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ _CRC_POLYNOMIAL if c & 1 else c >> 1
        table.append(c)
    return tuple(table)


_CRC_TABLE = _build_crc_table()


def crc32(data: bytes, crc: int = 0) -> int:
    """Table-driven CRC-32 as used by PNG chunks; ``crc`` continues a running value."""

    table = _CRC_TABLE
    crc ^= 0xFFFFFFFF
    for byte in data:
        crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


def _chunk(chunk_type: bytes, data: bytes) -> bytes:
    checksum = crc32(data, crc32(chunk_type))
    return struct.pack(">I", len(data)) + chunk_type + data + struct.pack(">I", checksum)


def _read_buffer(pixel_data: object) -> np.ndarray:
    try:
        return np.frombuffer(pixel_data, dtype=np.uint8)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"Pixel buffer is not readable as bytes: {exc}") from exc


def infer_components(buffer_length: int, width: int, height: int) -> int:
    """Bytes per pixel implied by the buffer size, never below one."""

    pixel_count = width * height
    if pixel_count <= 0:
        return 4
    return max(1, buffer_length // pixel_count)


def _expand_to_rgba(flat: np.ndarray, pixel_count: int, components: int) -> np.ndarray:
    pixels = flat[: pixel_count * components].reshape(pixel_count, components)
    rgba = np.empty((pixel_count, 4), dtype=np.uint8)

    if components == 4:
        rgba[:] = pixels
        return rgba

    if components == 3:
        rgba[:, :3] = pixels
    else:
        # 1 component is plain grayscale; unknown layouts keep the first byte as gray
        rgba[:, :3] = pixels[:, :1]
    rgba[:, 3] = _OPAQUE
    return rgba


def encode_png(width: int, height: int, pixel_data: bytes) -> bytes:
    """Encode a raw pixel buffer as an RGBA PNG byte stream.

    The component count is inferred from the buffer length: 1 (gray), 3 (RGB)
    and 4 (RGBA) are supported, anything else falls back to the first byte of
    each pixel as gray.  Output is deterministic for identical input.
    """

    if width <= 0 or height <= 0:
        raise EncodingError(f"Invalid image dimensions {width}x{height}")
    if width > _MAX_DIMENSION or height > _MAX_DIMENSION:
        raise EncodingError(f"Image dimensions {width}x{height} exceed PNG limits")

    flat = _read_buffer(pixel_data)
    pixel_count = width * height
    if flat.size < pixel_count:
        raise EncodingError(
            f"Pixel buffer too short: {flat.size} bytes for {width}x{height} image"
        )

    components = infer_components(flat.size, width, height)
    rgba = _expand_to_rgba(flat, pixel_count, components)

    scanlines = np.zeros((height, width * 4 + 1), dtype=np.uint8)
    scanlines[:, 1:] = rgba.reshape(height, width * 4)

    header = struct.pack(
        ">IIBBBBB",
        width,
        height,
        _BIT_DEPTH,
        _COLOR_TYPE_RGBA,
        0,  # compression method
        0,  # filter method
        0,  # interlace method
    )
    compressed = zlib.compress(scanlines.tobytes(), _COMPRESSION_LEVEL)

    return b"".join(
        (
            PNG_SIGNATURE,
            _chunk(b"IHDR", header),
            _chunk(b"IDAT", compressed),
            _chunk(b"IEND", b""),
        )
    )


def png_data_uri(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
