from __future__ import annotations

import pytest

from novelizer.structure.patterns import (
    Language,
    PatternMatcher,
    ends_like_heading_prefix,
    is_header_continuation,
    is_page_line,
    looks_like_opening_content,
)


def test_unknown_language_falls_back_to_english() -> None:
    assert Language.resolve("de") is Language.EN
    assert Language.resolve(None) is Language.EN
    assert Language.resolve("fr-CA") is Language.FR
    assert PatternMatcher("xx").dialogue_markers == PatternMatcher("en").dialogue_markers


def test_chapter_with_inline_title_yields_number_and_title() -> None:
    match = PatternMatcher("en").detect_chapter("Chapter 7: The Letter")

    assert match is not None
    assert match.number == 7
    assert match.title == "The Letter"


@pytest.mark.parametrize(
    "line,number,title",
    [
        ("CHAPTER 12", 12, ""),
        ("chapter 3 - Into the Woods", 3, "Into the Woods"),
        ("Part 2", 2, ""),
        ("Chapter IV", None, ""),
        ("Chapter IV: Ashes", None, "Ashes"),
        ("Chapter XIV - The Long Night", None, "The Long Night"),
        ("chapter mcmxc", None, ""),
    ],
)
def test_english_chapter_variants(line: str, number: int | None, title: str) -> None:
    match = PatternMatcher("en").detect_chapter(line)

    assert match is not None
    assert match.number == number
    assert match.title == title


def test_french_and_japanese_chapter_patterns() -> None:
    french = PatternMatcher("fr").detect_chapter("Chapitre 3 - La fuite")
    japanese = PatternMatcher("ja").detect_chapter("第3章 旅立ち")
    kanji = PatternMatcher("ja").detect_chapter("第三章")

    assert french is not None and (french.number, french.title) == (3, "La fuite")
    assert japanese is not None and (japanese.number, japanese.title) == (3, "旅立ち")
    assert kanji is not None and (kanji.number, kanji.title) == (None, "")


@pytest.mark.parametrize(
    "line",
    ["", "   ", "The chapter ended.", "Chapters were long", "Chapter mild", "Chapter civil", "Chapter IIII"],
)
def test_non_chapter_lines_return_none(line: str) -> None:
    assert PatternMatcher("en").detect_chapter(line) is None


@pytest.mark.parametrize(
    "line,title",
    [
        ("Prologue", "Prologue"),
        ("Epilogue: Home Again", "Epilogue: Home Again"),
        ("Afterword", "Afterword"),
        ("THE LONG NIGHT", "THE LONG NIGHT"),
        ("NATIONAL MAGIC UNIVERSITY, APRIL 2095.", "NATIONAL MAGIC UNIVERSITY, APRIL 2095."),
    ],
)
def test_section_detection(line: str, title: str) -> None:
    match = PatternMatcher("en").detect_section(line)

    assert match is not None
    assert match.title == title


@pytest.mark.parametrize(
    "line",
    [
        "DEAR RUDEUS GREYRAT,",
        '"WAIT FOR ME"',
        "“STOP RIGHT THERE”",
        "The sky was red.",
        "Prologues are long",
        "Before the prologue ends, nothing.",
        "OK.",
        "",
    ],
)
def test_section_rejections(line: str) -> None:
    assert PatternMatcher("en").detect_section(line) is None


def test_japanese_section_keywords() -> None:
    matcher = PatternMatcher(Language.JA)

    assert matcher.detect_section("プロローグ") is not None
    assert matcher.detect_section("あとがき") is not None
    assert matcher.detect_section("彼は笑った。") is None


def test_likely_chapter_title_line() -> None:
    matcher = PatternMatcher("en")

    assert matcher.is_likely_chapter_title_line("The Diary (Part 1)")
    assert not matcher.is_likely_chapter_title_line("It was late.")
    assert not matcher.is_likely_chapter_title_line("Page 12")
    assert not matcher.is_likely_chapter_title_line("a, b; c: d, e")
    assert not matcher.is_likely_chapter_title_line("“Hello there”")
    assert not matcher.is_likely_chapter_title_line("Hi")


@pytest.mark.parametrize("line", ["Page 205", "page: 12", "Page | 9", "205 | Page", "205 | P a g e", "12 page"])
def test_page_footer_lines(line: str) -> None:
    assert is_page_line(line)
    assert PatternMatcher("en").is_page_line(line)


def test_page_word_in_prose_is_not_a_footer() -> None:
    assert not is_page_line("Page two of the story")
    assert not is_page_line("")


def test_dialogue_markers_per_language() -> None:
    assert PatternMatcher("en").dialogue_markers == ('"', "“", "‘")
    assert PatternMatcher("ja").dialogue_markers == ("「", "『")
    assert "«" in PatternMatcher("fr").dialogue_markers


def test_shared_predicates() -> None:
    assert looks_like_opening_content("«Bonjour»")
    assert looks_like_opening_content("DEAR SIR,")
    assert not looks_like_opening_content("Dear sir")
    assert ends_like_heading_prefix("Chapter 2 -")
    assert ends_like_heading_prefix("Chapter 2:  ")
    assert not ends_like_heading_prefix("Chapter 2")
    assert is_header_continuation("THE SILENT FOREST")
    assert not is_header_continuation("The silent forest")
    assert not is_header_continuation("THE END.")


def test_french_roman_chapter_requires_numeral_shape() -> None:
    matcher = PatternMatcher("fr")

    roman = matcher.detect_chapter("Chapitre IX : Le retour")

    assert roman is not None and (roman.number, roman.title) == (None, "Le retour")
    assert matcher.detect_chapter("Chapitre deux") is None
    assert matcher.detect_chapter("Chapitre mille") is None
