"""Text normalization and markup helpers used by the structure pipeline."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_LINE_ENDING_RE = re.compile(r"\r\n?")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_line_endings(text: str) -> str:
    return _LINE_ENDING_RE.sub("\n", text)


def escape_html(text: str) -> str:
    """Escape the characters that would break the emitted markup.

    Quotes are left alone so dialogue text keeps its original glyphs.
    """

    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
