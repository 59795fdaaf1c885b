"""PDF extraction stage producing page-ordered raw text and image blocks."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

import pymupdf

from novelizer.config import ConversionSettings
from novelizer.models import RawBlock, RawImageBlock, RawTextBlock
from novelizer.normalization import normalize_whitespace

logger = logging.getLogger(__name__)

# Images sort ahead of the page text they appear on.
IMAGE_ORDER = 0
TEXT_ORDER = 1


@dataclass(slots=True)
class ExtractionError(Exception):
    """Domain error for unreadable or unparsable source files."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class ExtractedPdf:
    """Raw blocks plus the descriptive metadata found in the PDF itself."""

    source_path: str
    title: str
    author: str | None = None
    page_count: int = 0
    blocks: list[RawBlock] = field(default_factory=list)


def _first_non_empty(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = normalize_whitespace(value)
    return cleaned or None


def _raw_pixels(doc: pymupdf.Document, xref: int) -> pymupdf.Pixmap:
    pix = pymupdf.Pixmap(doc, xref)
    # CMYK and other exotic colorspaces become RGB so the encoder sees 1/3/4 components.
    if pix.colorspace is not None and pix.n - pix.alpha > 3:
        pix = pymupdf.Pixmap(pymupdf.csRGB, pix)
    return pix


class PdfBlockExtractor:
    """Extract page text and large raster images from a PDF in reading order."""

    def __init__(self, settings: ConversionSettings | None = None) -> None:
        self._settings = settings or ConversionSettings()

    def extract(self, path: str | Path) -> ExtractedPdf:
        source = Path(path)
        try:
            doc = pymupdf.open(source)
        except (OSError, RuntimeError, ValueError) as exc:
            raise ExtractionError(source, f"Failed to open PDF: {exc}") from exc

        with doc:
            doc_metadata = doc.metadata or {}
            title = _first_non_empty(doc_metadata.get("title")) or source.stem
            author = _first_non_empty(doc_metadata.get("author"))
            logger.info("Start parse: %s (%d pages)", source, doc.page_count)
            blocks = self._extract_blocks(doc)
            page_count = doc.page_count

        blocks.sort(key=lambda block: (block.page_index, block.order))
        image_count = sum(1 for block in blocks if isinstance(block, RawImageBlock))
        logger.info("Done parse: %s (pages: %d, images: %d)", source, page_count, image_count)

        return ExtractedPdf(
            source_path=str(source),
            title=title,
            author=author,
            page_count=page_count,
            blocks=blocks,
        )

    def _extract_blocks(self, doc: pymupdf.Document) -> list[RawBlock]:
        blocks: list[RawBlock] = []
        total_images = 0

        for page_index, page in enumerate(doc):
            blocks.append(RawTextBlock(page_index=page_index, order=TEXT_ORDER, text=page.get_text("text")))

            if total_images >= self._settings.max_images_total:
                continue

            page_images = self._extract_page_images(doc, page, page_index, self._settings.max_images_total - total_images)
            if page_images:
                logger.info(
                    "Images on page %d: %d (total: %d)",
                    page_index + 1,
                    len(page_images),
                    total_images + len(page_images),
                )
            total_images += len(page_images)
            blocks.extend(page_images)

        return blocks

    def _extract_page_images(
        self,
        doc: pymupdf.Document,
        page: pymupdf.Page,
        page_index: int,
        remaining: int,
    ) -> list[RawImageBlock]:
        limit = min(self._settings.max_images_per_page, remaining)
        images: list[RawImageBlock] = []

        for image_info in page.get_images(full=True):
            if len(images) >= limit:
                break

            xref, _smask, width, height = image_info[:4]
            # Skip icons and screen tones before decoding anything.
            if width * height < self._settings.min_image_area:
                continue

            try:
                pix = _raw_pixels(doc, xref)
            except (RuntimeError, ValueError) as exc:
                logger.warning("Image extraction error on page %d: %s", page_index + 1, exc)
                continue

            images.append(
                RawImageBlock(
                    page_index=page_index,
                    order=IMAGE_ORDER,
                    pixel_data=bytes(pix.samples),
                    width=pix.width,
                    height=pix.height,
                    alt_text=f"Image p.{page_index + 1}",
                )
            )

        return images


def extract_raw_blocks(path: str | Path, *, settings: ConversionSettings | None = None) -> list[RawBlock]:
    """Return the sorted raw blocks of the PDF at *path*."""

    return PdfBlockExtractor(settings).extract(path).blocks
