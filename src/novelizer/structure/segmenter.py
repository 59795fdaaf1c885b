"""Narration / dialogue / scene-break segmentation of chapter body text."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import re

from novelizer.normalization import escape_html, normalize_line_endings, normalize_whitespace
from novelizer.structure.patterns import STRAIGHT_QUOTE, PatternMatcher, is_page_line

SENTENCE_ENDINGS = (".", "!", "?", "...", "…", "。", "！", "？")

# Only quotation glyphs split a line; dash markers count at line start only.
_SPLITTABLE_OPENERS = frozenset({STRAIGHT_QUOTE, "“", "«", "「", "『"})

_SCENE_GLYPHS = "◊◇◆✦*"
_SCENE_RUN_RE = re.compile(rf"([{_SCENE_GLYPHS}])(?:[ \t]*\1){{2,}}")
_SCENE_BREAK_LINE_RE = re.compile(rf"^(?:[{_SCENE_GLYPHS}]\s*){{3,}}$")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n+")
_QUOTE_NOISE_RE = re.compile(r"^[\"“”«»『』「」]+$")
_TRAILING_CLOSERS_RE = re.compile(r"[”\"'’»」』]+$")


class FragmentKind(str, Enum):
    NARRATION = "narration"
    DIALOGUE = "dialogue"
    SCENE_BREAK = "scene-break"


@dataclass(frozen=True, slots=True)
class Fragment:
    kind: FragmentKind
    html: str


def _render(kind: FragmentKind, text: str) -> Fragment:
    escaped = escape_html(text.strip())
    if kind is FragmentKind.DIALOGUE:
        return Fragment(kind=kind, html=f"<blockquote>{escaped}</blockquote>")
    if kind is FragmentKind.SCENE_BREAK:
        return Fragment(kind=kind, html=f'<p class="scene-break">{escaped}</p>')
    return Fragment(kind=kind, html=f"<p>{escaped}</p>")


def is_sentence_end(line: str) -> bool:
    """Terminal punctuation check that looks through closing quotes and brackets."""

    trimmed = _TRAILING_CLOSERS_RE.sub("", line.strip())
    return trimmed.endswith(SENTENCE_ENDINGS)


def is_scene_break(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and bool(_SCENE_BREAK_LINE_RE.match(stripped))


def is_valid_line(line: str) -> bool:
    """Reject blank lines, bare URLs, quote-only OCR noise and page footers."""

    stripped = line.strip()
    if not stripped:
        return False
    if stripped.startswith(("http://", "https://")):
        return False
    if _QUOTE_NOISE_RE.match(stripped):
        return False
    return not is_page_line(stripped)


def isolate_scene_breaks(text: str) -> str:
    return _SCENE_RUN_RE.sub(lambda match: f"\n{match.group(0)}\n", text)


def _split_line_on_openers(line: str, openers: frozenset[str], straight_quotes: int) -> tuple[list[str], int]:
    """Split ``line`` before each opening glyph; returns pieces and the updated quote count.

    Straight quotes alternate open/close; one at the start of a line always opens.
    """

    pieces: list[str] = []
    current: list[str] = []
    at_line_start = True

    for char in line:
        if char in openers:
            opens = True
            if char == STRAIGHT_QUOTE:
                if at_line_start:
                    straight_quotes = 0
                opens = straight_quotes % 2 == 0
                straight_quotes += 1
            if opens and current:
                pieces.append("".join(current))
                current = []
        current.append(char)
        if not char.isspace():
            at_line_start = False

    if current:
        pieces.append("".join(current))
    return [piece.strip() for piece in pieces if piece.strip()], straight_quotes


class TextSegmenter:
    """Split header-free prose into narration, dialogue and scene-break fragments."""

    def __init__(self, matcher: PatternMatcher) -> None:
        self._markers = matcher.dialogue_markers
        self._openers = frozenset(marker for marker in self._markers if marker in _SPLITTABLE_OPENERS)

    def segment(self, text: str) -> list[Fragment]:
        normalized = normalize_line_endings(text)
        normalized = isolate_scene_breaks(normalized)
        normalized = self.split_on_dialogue_openers(normalized)

        fragments: list[Fragment] = []
        for group in _PARAGRAPH_SPLIT_RE.split(normalized):
            if group.strip():
                fragments.extend(self._segment_group(group))
        return fragments

    def split_on_dialogue_openers(self, text: str) -> str:
        """Put each quotation on its own line, so ``"A" "B"`` becomes two lines."""

        if not self._openers:
            return text
        lines: list[str] = []
        straight_quotes = 0
        for line in text.split("\n"):
            if not line.strip():
                # Quote parity does not carry across paragraph groups.
                straight_quotes = 0
                lines.append("")
                continue
            pieces, straight_quotes = _split_line_on_openers(line, self._openers, straight_quotes)
            lines.extend(pieces)
        return "\n".join(lines)

    def is_dialogue_start(self, line: str) -> bool:
        stripped = line.strip()
        if not stripped:
            return False

        marker = next((candidate for candidate in self._markers if stripped.startswith(candidate)), None)
        if marker is None:
            return False
        if marker != STRAIGHT_QUOTE:
            return True
        # A single straight quote is usually an extraction artifact.
        return stripped.count(STRAIGHT_QUOTE) >= 2

    def clean_stray_quote(self, line: str) -> str:
        """Drop a lone leading straight quote that does not open real dialogue."""

        stripped = line.strip()
        if not stripped.startswith(STRAIGHT_QUOTE) or self.is_dialogue_start(stripped):
            return stripped
        return stripped[1:].strip()

    def _segment_group(self, group: str) -> list[Fragment]:
        lines = [self.clean_stray_quote(line) for line in group.split("\n") if is_valid_line(line)]

        fragments: list[Fragment] = []
        current = ""
        in_dialogue = False

        def flush() -> None:
            nonlocal current, in_dialogue
            if current.strip():
                kind = FragmentKind.DIALOGUE if in_dialogue else FragmentKind.NARRATION
                fragments.append(_render(kind, current))
            current = ""
            in_dialogue = False

        for line in lines:
            if not line:
                continue

            if is_scene_break(line):
                flush()
                fragments.append(_render(FragmentKind.SCENE_BREAK, normalize_whitespace(line)))
                continue

            if self.is_dialogue_start(line):
                flush()
                current = line
                in_dialogue = True
            else:
                current = f"{current} {line}" if current else line

            if is_sentence_end(line):
                flush()

        flush()
        return fragments
