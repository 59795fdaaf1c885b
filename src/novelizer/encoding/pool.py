"""Bounded-concurrency encoding of every image in one document."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Sequence

from novelizer.encoding.png import EncodingError, encode_png, png_data_uri
from novelizer.models import RawImageBlock

logger = logging.getLogger(__name__)


def encode_image(block: RawImageBlock) -> str | None:
    """Return a PNG data URI for ``block``, or ``None`` when it cannot be encoded."""

    try:
        png_bytes = encode_png(block.width, block.height, block.pixel_data)
    except EncodingError as exc:
        logger.warning(
            "Skipping image on page %d (%sx%s): %s",
            block.page_index,
            block.width,
            block.height,
            exc,
        )
        return None
    return png_data_uri(png_bytes)


def encode_images(blocks: Sequence[RawImageBlock], *, max_workers: int = 4) -> list[str | None]:
    """Encode ``blocks`` and return data URIs aligned with the input order."""

    if not blocks:
        return []
    if max_workers <= 1 or len(blocks) == 1:
        return [encode_image(block) for block in blocks]

    # Threads overlap zlib compression only; the pure-Python CRC32 holds the GIL.
    with ThreadPoolExecutor(max_workers=min(max_workers, len(blocks))) as executor:
        return list(executor.map(encode_image, blocks))
