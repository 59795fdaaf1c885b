"""Chapter assembly: raw page blocks in, structured novel document out."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Iterable
import uuid

from novelizer.config import ConversionSettings
from novelizer.encoding.pool import encode_images
from novelizer.models import (
    Chapter,
    ContentBlock,
    DialogueBlock,
    Document,
    ImageBlock,
    NovelMetadata,
    ParagraphBlock,
    RawBlock,
    RawImageBlock,
    RawTextBlock,
    SceneBreakBlock,
    TocEntry,
)
from novelizer.normalization import normalize_line_endings
from novelizer.structure.headings import resolve_chapter_heading, resolve_section_heading
from novelizer.structure.patterns import PatternMatcher, is_page_line, looks_like_opening_content
from novelizer.structure.segmenter import FragmentKind, TextSegmenter

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


@dataclass(slots=True)
class ConversionError(Exception):
    """Whole-conversion failure caused by malformed input."""

    message: str

    def __str__(self) -> str:
        return self.message


def _new_block_id() -> str:
    return uuid.uuid4().hex


def _validate_blocks(raw_blocks: Iterable[RawBlock]) -> list[RawBlock]:
    try:
        blocks = list(raw_blocks)
    except TypeError as exc:
        raise ConversionError(f"Raw blocks must be an iterable of page blocks: {exc}") from exc

    previous: tuple[int, int] | None = None
    for position, block in enumerate(blocks):
        if not isinstance(block, (RawTextBlock, RawImageBlock)):
            raise ConversionError(f"Unsupported raw block at position {position}: {type(block).__name__}")
        if isinstance(block, RawTextBlock) and not isinstance(block.text, str):
            raise ConversionError(f"Text block at position {position} does not carry a string")

        key = (block.page_index, block.order)
        if previous is not None and key < previous:
            raise ConversionError(
                f"Raw blocks must be sorted by (page_index, order): "
                f"position {position} has {key} after {previous}"
            )
        previous = key

    return blocks


class _ChapterBuilder:
    """Mutable per-conversion state: pending text, chapter in progress and finished chapters."""

    def __init__(self, segmenter: TextSegmenter, id_factory: IdFactory, front_matter_title: str) -> None:
        self._segmenter = segmenter
        self._new_id = id_factory
        self.pending: list[str] = []
        self.blocks: list[ContentBlock] = []
        self.title = front_matter_title
        self.number: int | None = None
        self.counter = 0
        self.chapters: list[Chapter] = []

    def append_text(self, text: str) -> None:
        self.pending.append(text)

    def append_block(self, block: ContentBlock) -> None:
        self.blocks.append(block)

    def flush_pending(self) -> None:
        text = "\n".join(self.pending).strip()
        self.pending = []
        if not text:
            return

        for fragment in self._segmenter.segment(text):
            if fragment.kind is FragmentKind.DIALOGUE:
                self.blocks.append(DialogueBlock(id=self._new_id(), html=fragment.html))
            elif fragment.kind is FragmentKind.SCENE_BREAK:
                self.blocks.append(SceneBreakBlock(id=self._new_id(), html=fragment.html))
            else:
                self.blocks.append(ParagraphBlock(id=self._new_id(), html=fragment.html))

    def push_chapter(self) -> None:
        self.flush_pending()
        if not self.blocks:
            return

        self.counter += 1
        number = self.number if self.number is not None else self.counter
        title = self.title or f"Chapter {number}"
        self.chapters.append(
            Chapter(id=f"chapter-{self.counter}", number=number, title=title, blocks=tuple(self.blocks))
        )
        logger.debug("Pushed chapter-%d %r with %d blocks", self.counter, title, len(self.blocks))

        self.blocks = []
        self.title = ""
        self.number = None

    def start_chapter(self, title: str, number: int | None) -> None:
        self.title = title
        self.number = number


class DocumentAssembler:
    """Walk raw blocks in page order and build chapters, blocks and the TOC."""

    def __init__(
        self,
        metadata: NovelMetadata,
        *,
        settings: ConversionSettings | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._metadata = metadata
        self._settings = settings or ConversionSettings()
        self._id_factory = id_factory or _new_block_id
        self._matcher = PatternMatcher(metadata.language)
        self._segmenter = TextSegmenter(self._matcher)

    @property
    def matcher(self) -> PatternMatcher:
        return self._matcher

    def assemble(self, raw_blocks: Iterable[RawBlock]) -> Document:
        blocks = _validate_blocks(raw_blocks)
        builder = _ChapterBuilder(self._segmenter, self._id_factory, self._settings.front_matter_title)

        images = [block for block in blocks if isinstance(block, RawImageBlock)]
        encoded = iter(encode_images(images, max_workers=self._settings.image_workers))

        for block in blocks:
            if isinstance(block, RawTextBlock):
                self._consume_text(builder, block.text)
                continue

            # Images never land in the middle of a paragraph.
            builder.flush_pending()
            src = next(encoded)
            if src is not None:
                builder.append_block(ImageBlock(id=self._id_factory(), src=src, alt=block.alt_text))

        builder.push_chapter()

        chapters = tuple(builder.chapters)
        toc = tuple(
            TocEntry(id=chapter.id, label=chapter.title, chapter_number=chapter.number)
            for chapter in chapters
            if chapter.title.strip()
        )
        logger.info(
            "Assembled %d chapters from %d raw blocks (%d images)",
            len(chapters),
            len(blocks),
            len(images),
        )
        return Document(metadata=self._metadata, toc=toc, chapters=chapters)

    def _consume_text(self, builder: _ChapterBuilder, text: str) -> None:
        lines = [line.strip() for line in normalize_line_endings(text).split("\n")]
        index = 0

        while index < len(lines):
            line = lines[index]
            if not line or is_page_line(line):
                index += 1
                continue

            chapter = self._matcher.detect_chapter(line)
            if chapter is not None:
                builder.push_chapter()
                resolution = resolve_chapter_heading(
                    lines,
                    index,
                    self._matcher,
                    split_mixed=self._settings.split_mixed_headings,
                )
                builder.start_chapter(resolution.title or line, chapter.number)
                if resolution.remainder:
                    builder.append_text(resolution.remainder)
                index += max(1, resolution.consumed)
                continue

            if not looks_like_opening_content(line):
                section = self._matcher.detect_section(line)
                if section is not None:
                    resolution = resolve_section_heading(lines, index, section.title)
                    builder.push_chapter()
                    builder.start_chapter(resolution.title, None)
                    index += max(1, resolution.consumed)
                    continue

            builder.append_text(line)
            index += 1


def convert_blocks(
    raw_blocks: Iterable[RawBlock],
    metadata: NovelMetadata,
    *,
    settings: ConversionSettings | None = None,
    id_factory: IdFactory | None = None,
) -> Document:
    """Convert page-ordered raw blocks into a structured novel document."""

    assembler = DocumentAssembler(metadata, settings=settings, id_factory=id_factory)
    return assembler.assemble(raw_blocks)
