"""Pure lookahead helpers that turn heading lines into final chapter titles.

Each resolver takes the lines of one page and the index of the heading line
and returns how many lines it consumed, the resolved title, and any body text
that was split off the heading and must go back to the pending text buffer.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Sequence

from novelizer.structure.patterns import (
    PatternMatcher,
    ends_like_heading_prefix,
    is_header_continuation,
    is_page_line,
    looks_like_opening_content,
)

MIXED_LINE_MIN_TOKENS = 6
MIXED_TITLE_MIN_LENGTH = 6
MIXED_REMAINDER_MIN_LENGTH = 20
CAPS_RUN_LENGTH = 3

_NON_ASCII_LETTER_RE = re.compile(r"[^A-Za-z]")
_LOWERCASE_RE = re.compile(r"[a-z]")


@dataclass(frozen=True, slots=True)
class HeadingResolution:
    consumed: int
    title: str
    remainder: str = ""


def _is_all_caps_word(token: str) -> bool:
    letters = _NON_ASCII_LETTER_RE.sub("", token)
    return len(letters) >= 2 and letters.isupper()


def split_title_from_mixed_line(line: str) -> tuple[str, str]:
    """Split ``"The Diary (Part 1) IT WAS THE MORNING after..."`` into title and body.

    The split point is the first run of three all-caps words that is followed
    by lowercase text, with enough title before it and enough body after it.
    Returns ``(title, "")`` when no such split exists.
    """

    stripped = line.strip()
    if not stripped:
        return "", ""

    tokens = stripped.split()
    if len(tokens) < MIXED_LINE_MIN_TOKENS:
        return stripped, ""

    for index in range(len(tokens) - CAPS_RUN_LENGTH + 1):
        run = tokens[index : index + CAPS_RUN_LENGTH]
        if not all(_is_all_caps_word(token) for token in run):
            continue

        remainder = " ".join(tokens[index:])
        if not _LOWERCASE_RE.search(remainder):
            continue

        title = " ".join(tokens[:index])
        if len(title) < MIXED_TITLE_MIN_LENGTH or len(remainder) < MIXED_REMAINDER_MIN_LENGTH:
            continue

        return title, remainder

    return stripped, ""


def _next_content_index(lines: Sequence[str], index: int) -> int:
    """Index of the next line that is neither blank nor a page footer."""

    while index < len(lines):
        candidate = lines[index].strip()
        if candidate and not is_page_line(candidate):
            return index
        index += 1
    return index


def resolve_chapter_heading(
    lines: Sequence[str],
    start: int,
    matcher: PatternMatcher,
    *,
    split_mixed: bool = True,
) -> HeadingResolution:
    """Resolve the title for the chapter heading at ``lines[start]``.

    ``Chapter 3: Title`` and bare ``Chapter 3`` keep the line as-is.  A
    prefix-only ``Chapter 3:`` absorbs the next title-shaped line and at most
    one more heading-shaped line after it.
    """

    heading = lines[start].strip()
    keep_line = HeadingResolution(consumed=1, title=heading)

    match = matcher.detect_chapter(heading)
    if match is None or match.title or not ends_like_heading_prefix(heading):
        return keep_line

    index = _next_content_index(lines, start + 1)
    if index >= len(lines):
        return keep_line

    candidate = lines[index].strip()
    if looks_like_opening_content(candidate):
        return keep_line
    if not matcher.is_likely_chapter_title_line(candidate) and not is_header_continuation(candidate):
        return keep_line

    merged = candidate
    consumed = index - start + 1

    if index + 1 < len(lines):
        following = lines[index + 1].strip()
        if following and not is_page_line(following) and is_header_continuation(following):
            merged = f"{merged} {following}"
            consumed += 1

    title, remainder = split_title_from_mixed_line(merged) if split_mixed else (merged, "")
    final = f"{heading} {title}" if title else heading
    return HeadingResolution(consumed=consumed, title=final.strip(), remainder=remainder)


def resolve_section_heading(lines: Sequence[str], start: int, title: str) -> HeadingResolution:
    """Greedily extend a section title with the heading-shaped lines below it."""

    parts = [title.strip()]
    consumed = 1
    index = _next_content_index(lines, start + 1)

    while index < len(lines) and is_header_continuation(lines[index]):
        parts.append(lines[index].strip())
        consumed = index - start + 1
        index = _next_content_index(lines, index + 1)

    return HeadingResolution(consumed=consumed, title=" ".join(parts).strip())
