"""Language detection for choosing the heading and dialogue pattern set (en/fr/ja)."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable

from novelizer.models import RawBlock, RawTextBlock

_LINGUA_TO_ISO: dict[str, str] = {
    "ENGLISH": "en",
    "FRENCH": "fr",
    "JAPANESE": "ja",
}
_SUPPORTED_LANGUAGES = frozenset(_LINGUA_TO_ISO.values())
_FALLBACK_LANGUAGE = "en"
DEFAULT_SAMPLE_PAGES = 3


@lru_cache(maxsize=1)
def _get_detector():
    from lingua import Language, LanguageDetectorBuilder

    return (
        LanguageDetectorBuilder.from_languages(
            Language.ENGLISH,
            Language.FRENCH,
            Language.JAPANESE,
        )
        .with_minimum_relative_distance(0.1)
        .build()
    )


def detect_language(text: str, *, sample_chars: int = 3000) -> str:
    """Return the ISO 639-1 code of *text*, one of ``en``, ``fr`` or ``ja``.

    Only the first *sample_chars* characters are inspected.  Inconclusive or
    unsupported results fall back to ``"en"``.
    """
    if not text:
        return _FALLBACK_LANGUAGE

    sample = text[:sample_chars].strip()
    if not sample:
        return _FALLBACK_LANGUAGE

    result = _get_detector().detect_language_of(sample)
    if result is None:
        return _FALLBACK_LANGUAGE

    iso = _LINGUA_TO_ISO.get(result.name.upper(), _FALLBACK_LANGUAGE)
    return iso if iso in _SUPPORTED_LANGUAGES else _FALLBACK_LANGUAGE


def sample_page_text(blocks: Iterable[RawBlock], *, sample_pages: int = DEFAULT_SAMPLE_PAGES) -> str:
    """Join the text of the first *sample_pages* non-blank pages."""
    pages: list[str] = []
    for block in blocks:
        if len(pages) >= sample_pages:
            break
        if isinstance(block, RawTextBlock) and block.text.strip():
            pages.append(block.text.strip())
    return "\n".join(pages)


def detect_document_language(
    blocks: Iterable[RawBlock],
    *,
    sample_pages: int = DEFAULT_SAMPLE_PAGES,
    sample_chars: int = 3000,
) -> str:
    """Detect the language of an extracted document from its opening pages."""
    return detect_language(sample_page_text(blocks, sample_pages=sample_pages), sample_chars=sample_chars)
