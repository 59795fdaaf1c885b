"""Language-aware heading, footer and dialogue-marker recognition."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re
from types import MappingProxyType
from typing import Mapping


# Section heuristics; tune against real page dumps, not as hard invariants.
SHORT_HEADER_MIN_LENGTH = 3
SHORT_HEADER_MAX_LENGTH = 80
SHORT_HEADER_UPPER_RATIO = 0.7
NEWSWIRE_HEADER_MIN_LENGTH = 10
NEWSWIRE_HEADER_MAX_LENGTH = 160
NEWSWIRE_HEADER_UPPER_RATIO = 0.6
LOOSE_SECTION_MAX_LENGTH = 60

TITLE_LINE_MIN_LENGTH = 3
TITLE_LINE_MAX_LENGTH = 140
TITLE_LINE_MAX_HEAVY_PUNCTUATION = 3
CONTINUATION_UPPER_RATIO = 0.7

STRAIGHT_QUOTE = '"'

_SEP = r"[:：\-–—]"
_ROMAN = r"(?=[ivxlcdm])m{0,3}(?:cm|cd|d?c{0,3})(?:xc|xl|l?x{0,3})(?:ix|iv|v?i{0,3})"

_OPENING_CONTENT_RE = re.compile(r"^[\"“‘«「『]")
_SENTENCE_END_RE = re.compile(r"[.!?]$")
_HEAVY_PUNCT_RE = re.compile(r"[,;:]")
_DIGIT_OR_COMMA_RE = re.compile(r"[0-9,]")
_HEADING_PREFIX_END_RE = re.compile(_SEP + r"\s*$")
_PAGE_LINE_RES = (
    re.compile(r"^page\s*[|:]\s*\d+\s*$", re.IGNORECASE),
    re.compile(r"^page\s+\d+\s*$", re.IGNORECASE),
    re.compile(r"^\d+\s*\|\s*[Pp]\s*a\s*g\s*e\b"),
    re.compile(r"^\d+\s+page\b", re.IGNORECASE),
)


class Language(str, Enum):
    EN = "en"
    FR = "fr"
    JA = "ja"

    @classmethod
    def resolve(cls, code: "str | Language | None") -> "Language":
        """Map a language code to a supported language, defaulting to English."""

        if isinstance(code, Language):
            return code
        if not code:
            return cls.EN
        try:
            return cls(code.strip().lower().split("-")[0])
        except ValueError:
            return cls.EN


@dataclass(frozen=True, slots=True)
class PatternConfig:
    chapter_patterns: tuple[re.Pattern[str], ...]
    section_patterns: tuple[re.Pattern[str], ...]
    loose_section_patterns: tuple[re.Pattern[str], ...]
    dialogue_markers: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ChapterMatch:
    number: int | None
    title: str


@dataclass(frozen=True, slots=True)
class SectionMatch:
    title: str


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


PATTERNS: Mapping[Language, PatternConfig] = MappingProxyType(
    {
        Language.EN: PatternConfig(
            chapter_patterns=_compile(
                r"^chapter\s*(\d+)\s*$",
                rf"^chapter\s*(\d+)\s*{_SEP}?\s*(.*)$",
                rf"^chapter\s+({_ROMAN})\s*(?:{_SEP}\s*(.*))?$",
                rf"^part\s*(\d+)\s*{_SEP}?\s*(.*)$",
            ),
            section_patterns=_compile(
                rf"^(prologue)\b\s*{_SEP}?\s*(.*)$",
                rf"^(epilogue)\b\s*{_SEP}?\s*(.*)$",
                rf"^(author[’']?s?\s+foreword)\b\s*{_SEP}?\s*(.*)$",
                rf"^(afterword)\b\s*{_SEP}?\s*(.*)$",
                rf"^(intermission)\b\s*{_SEP}?\s*(.*)$",
            ),
            loose_section_patterns=_compile(
                r"^(.*\bprologue\b.*)$",
                r"^(.*\bepilogue\b.*)$",
                r"^(.*\bauthor[’']?s?\s+foreword\b.*)$",
                r"^(.*\bafterword\b.*)$",
                r"^(.*\bintermission\b.*)$",
            ),
            dialogue_markers=(STRAIGHT_QUOTE, "“", "‘"),
        ),
        Language.FR: PatternConfig(
            chapter_patterns=_compile(
                r"^chapitre\s*(\d+)\s*$",
                rf"^chapitre\s*(\d+)\s*{_SEP}?\s*(.*)$",
                rf"^chapitre\s+({_ROMAN})\s*(?:{_SEP}\s*(.*))?$",
                rf"^partie\s*(\d+)\s*{_SEP}?\s*(.*)$",
            ),
            section_patterns=_compile(
                rf"^(prologue)\b\s*{_SEP}?\s*(.*)$",
                rf"^(épilogue)\b\s*{_SEP}?\s*(.*)$",
                rf"^(avant[-\s]?propos)\b\s*{_SEP}?\s*(.*)$",
                rf"^(postface)\b\s*{_SEP}?\s*(.*)$",
            ),
            loose_section_patterns=_compile(
                r"^(.*\bprologue\b.*)$",
                r"^(.*\bépilogue\b.*)$",
            ),
            dialogue_markers=("—", "–", "-", "«", "“", STRAIGHT_QUOTE),
        ),
        Language.JA: PatternConfig(
            chapter_patterns=_compile(
                rf"^第(\d+)章\s*{_SEP}?\s*(.*)$",
                rf"^第([一二三四五六七八九十百千〇零]+)章\s*{_SEP}?\s*(.*)$",
                rf"^(\d+)章\s*{_SEP}?\s*(.*)$",
            ),
            section_patterns=_compile(
                rf"^(プロローグ)\s*{_SEP}?\s*(.*)$",
                rf"^(エピローグ)\s*{_SEP}?\s*(.*)$",
                rf"^(あとがき)\s*{_SEP}?\s*(.*)$",
            ),
            loose_section_patterns=_compile(
                r"^(.*プロローグ.*)$",
                r"^(.*エピローグ.*)$",
            ),
            dialogue_markers=("「", "『"),
        ),
    }
)


def _uppercase_ratio(text: str) -> float | None:
    """Share of uppercase among cased letters; ``None`` when the text has no cased letters."""

    cased = [char for char in text if char.isupper() or char.islower()]
    if not cased:
        return None
    upper = sum(1 for char in cased if char.isupper())
    return upper / len(cased)


def is_page_line(line: str) -> bool:
    """Recognize running footers such as ``Page 205`` or ``205 | P a g e``."""

    stripped = line.strip()
    if not stripped:
        return False
    return any(pattern.search(stripped) for pattern in _PAGE_LINE_RES)


def looks_like_opening_content(line: str) -> bool:
    """Lines that open with a quote or end with a comma continue prose, even in caps."""

    stripped = line.strip()
    if not stripped:
        return False
    return bool(_OPENING_CONTENT_RE.match(stripped)) or stripped.endswith(",")


def ends_like_heading_prefix(line: str) -> bool:
    """True for ``Chapter 3:`` style lines whose title follows on the next line."""

    return bool(_HEADING_PREFIX_END_RE.search(line.strip()))


def is_header_continuation(line: str) -> bool:
    """Mostly-uppercase, title-length line that can extend a heading above it."""

    stripped = line.strip()
    if not stripped:
        return False
    if _SENTENCE_END_RE.search(stripped) or looks_like_opening_content(stripped):
        return False
    if not TITLE_LINE_MIN_LENGTH <= len(stripped) <= TITLE_LINE_MAX_LENGTH:
        return False

    ratio = _uppercase_ratio(stripped)
    return ratio is not None and ratio > CONTINUATION_UPPER_RATIO


class PatternMatcher:
    """Classify lines as chapter headings, section headings or neither."""

    def __init__(self, language: "str | Language | None" = Language.EN) -> None:
        self._language = Language.resolve(language)
        self._config = PATTERNS.get(self._language, PATTERNS[Language.EN])

    @property
    def language(self) -> Language:
        return self._language

    @property
    def dialogue_markers(self) -> tuple[str, ...]:
        """Glyphs that may open a quotation, in priority order."""

        return self._config.dialogue_markers

    def detect_chapter(self, line: str) -> ChapterMatch | None:
        stripped = line.strip()
        if not stripped:
            return None

        for pattern in self._config.chapter_patterns:
            match = pattern.match(stripped)
            if match is None:
                continue

            raw_number = (match.group(1) or "").strip()
            number = int(raw_number) if raw_number.isdecimal() else None
            raw_title = match.group(2) if pattern.groups >= 2 else None
            return ChapterMatch(number=number, title=(raw_title or "").strip())

        return None

    def detect_section(self, line: str) -> SectionMatch | None:
        stripped = line.strip()
        if not stripped or looks_like_opening_content(stripped):
            return None

        explicit = self._match_explicit_section(stripped)
        if explicit is not None:
            return explicit if explicit.title else None

        ratio = _uppercase_ratio(stripped)
        if ratio is None:
            return None

        if SHORT_HEADER_MIN_LENGTH <= len(stripped) <= SHORT_HEADER_MAX_LENGTH:
            if ratio > SHORT_HEADER_UPPER_RATIO and not _SENTENCE_END_RE.search(stripped):
                return SectionMatch(title=stripped)

        if NEWSWIRE_HEADER_MIN_LENGTH <= len(stripped) <= NEWSWIRE_HEADER_MAX_LENGTH:
            if ratio > NEWSWIRE_HEADER_UPPER_RATIO and _DIGIT_OR_COMMA_RE.search(stripped):
                return SectionMatch(title=stripped)

        return None

    def _match_explicit_section(self, stripped: str) -> SectionMatch | None:
        # An empty title means the explicit tier matched but rejected the line.
        for pattern in self._config.section_patterns:
            match = pattern.match(stripped)
            if match is None:
                continue
            main = match.group(1).strip()
            rest = (match.group(2) or "").strip()
            title = f"{main}: {rest}" if rest else main
            if looks_like_opening_content(title):
                return SectionMatch(title="")
            return SectionMatch(title=title)

        if len(stripped) > LOOSE_SECTION_MAX_LENGTH or _SENTENCE_END_RE.search(stripped):
            return None
        for pattern in self._config.loose_section_patterns:
            match = pattern.match(stripped)
            if match is not None:
                return SectionMatch(title=match.group(1).strip())

        return None

    def is_likely_chapter_title_line(self, line: str) -> bool:
        """Whether ``line`` may be merged as the title under a ``Chapter N:`` prefix."""

        stripped = line.strip()
        if not stripped:
            return False
        if is_page_line(stripped) or looks_like_opening_content(stripped):
            return False
        if not TITLE_LINE_MIN_LENGTH <= len(stripped) <= TITLE_LINE_MAX_LENGTH:
            return False
        if _SENTENCE_END_RE.search(stripped):
            return False
        return len(_HEAVY_PUNCT_RE.findall(stripped)) <= TITLE_LINE_MAX_HEAVY_PUNCTUATION

    def is_page_line(self, line: str) -> bool:
        return is_page_line(line)

    def looks_like_opening_content(self, line: str) -> bool:
        return looks_like_opening_content(line)
