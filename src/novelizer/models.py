"""Canonical data structures for raw extraction input and the structured novel output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class RawTextBlock:
    """Full text of one page as produced by the extraction stage."""

    page_index: int
    order: int
    text: str


@dataclass(frozen=True, slots=True)
class RawImageBlock:
    """Raster image found on a page, still in raw pixel form."""

    page_index: int
    order: int
    pixel_data: bytes
    width: int
    height: int
    alt_text: str = ""


RawBlock = Union[RawTextBlock, RawImageBlock]


@dataclass(frozen=True, slots=True)
class ParagraphBlock:
    id: str
    html: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": "paragraph", "html": self.html}


@dataclass(frozen=True, slots=True)
class DialogueBlock:
    id: str
    html: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": "dialogue", "html": self.html}


@dataclass(frozen=True, slots=True)
class SceneBreakBlock:
    """Scene separator; serialized as a paragraph so renderers keep two text discriminants."""

    id: str
    html: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": "paragraph", "html": self.html}


@dataclass(frozen=True, slots=True)
class ImageBlock:
    id: str
    src: str
    alt: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": "image", "src": self.src, "alt": self.alt}


ContentBlock = Union[ParagraphBlock, DialogueBlock, SceneBreakBlock, ImageBlock]


@dataclass(frozen=True, slots=True)
class Chapter:
    id: str
    number: int
    title: str
    blocks: tuple[ContentBlock, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "blocks": [block.to_dict() for block in self.blocks],
        }


@dataclass(frozen=True, slots=True)
class TocEntry:
    id: str
    label: str
    chapter_number: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "label": self.label, "chapterNumber": self.chapter_number}


@dataclass(frozen=True, slots=True)
class NovelMetadata:
    """Caller-supplied descriptive fields, copied verbatim into the document."""

    title: str
    language: str
    author: str | None = None
    series: str | None = None
    volume: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"title": self.title, "language": self.language}
        for key in ("author", "series", "volume"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


@dataclass(frozen=True, slots=True)
class Document:
    """Structured novel: metadata, table of contents and ordered chapters."""

    metadata: NovelMetadata
    toc: tuple[TocEntry, ...] = field(default_factory=tuple)
    chapters: tuple[Chapter, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "toc": [entry.to_dict() for entry in self.toc],
            "chapters": [chapter.to_dict() for chapter in self.chapters],
        }
