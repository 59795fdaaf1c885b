from __future__ import annotations

import base64
import io
import struct
import zlib

from PIL import Image

from novelizer.encoding.pool import encode_image, encode_images
from novelizer.models import RawImageBlock


def _image(page: int, width: int, height: int, fill: int) -> RawImageBlock:
    return RawImageBlock(
        page_index=page,
        order=0,
        pixel_data=bytes([fill]) * (width * height * 4),
        width=width,
        height=height,
        alt_text=f"Image p.{page + 1}",
    )


def _first_pixel(uri: str) -> tuple[int, ...]:
    payload = base64.b64decode(uri.split(",", 1)[1])
    with Image.open(io.BytesIO(payload)) as image:
        return image.getpixel((0, 0))


def test_results_are_aligned_with_input_order() -> None:
    blocks = [_image(0, 3, 3, 10), _image(1, 0, 3, 20), _image(2, 4, 2, 30)]

    results = encode_images(blocks, max_workers=3)

    assert len(results) == 3
    assert results[1] is None
    assert _first_pixel(results[0]) == (10, 10, 10, 10)
    assert _first_pixel(results[2]) == (30, 30, 30, 30)


def test_single_worker_matches_pool_output() -> None:
    blocks = [_image(page, 5, 5, page * 40) for page in range(4)]

    assert encode_images(blocks, max_workers=1) == encode_images(blocks, max_workers=4)


def test_parallel_encoding_keeps_chunk_checksums_valid() -> None:
    blocks = [_image(page, 64, 48, page * 25) for page in range(8)]

    for uri in encode_images(blocks, max_workers=4):
        png = base64.b64decode(uri.split(",", 1)[1])
        offset = 8
        while offset < len(png):
            (length,) = struct.unpack(">I", png[offset : offset + 4])
            chunk_type = png[offset + 4 : offset + 8]
            data = png[offset + 8 : offset + 8 + length]
            (checksum,) = struct.unpack(">I", png[offset + 8 + length : offset + 12 + length])
            assert checksum == zlib.crc32(chunk_type + data)
            offset += 12 + length


def test_empty_input_returns_empty_list() -> None:
    assert encode_images([], max_workers=4) == []


def test_failed_image_logs_warning(caplog: object) -> None:
    broken = RawImageBlock(page_index=6, order=0, pixel_data=b"\x00", width=10, height=10)

    assert encode_image(broken) is None
    assert "Skipping image on page 6" in caplog.text
