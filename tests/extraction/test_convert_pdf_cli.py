from __future__ import annotations

import json
from pathlib import Path

import pymupdf

from novelizer.cli.convert_pdf import main as convert_cli_main


def _build_pdf(path: Path) -> None:
    doc = pymupdf.open()
    page_one = doc.new_page()
    page_one.insert_text((72, 72), "Chapter 1: Arrival")
    page_one.insert_text((72, 100), "The sky was red.")
    page_two = doc.new_page()
    page_two.insert_text((72, 72), '"Stop!" she shouted.')
    page_two.insert_text((72, 100), '"Why?" he asked.')
    doc.save(str(path))
    doc.close()


def test_cli_prints_document_json(tmp_path: Path, capsys: object) -> None:
    source = tmp_path / "arrival.pdf"
    _build_pdf(source)

    exit_code = convert_cli_main(["--path", str(source), "--language", "en", "--author", "A. Writer"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["metadata"] == {"title": "arrival", "language": "en", "author": "A. Writer"}
    assert payload["toc"] == [{"id": "chapter-1", "label": "Chapter 1: Arrival", "chapterNumber": 1}]
    chapter = payload["chapters"][0]
    assert [block["type"] for block in chapter["blocks"]] == ["paragraph", "dialogue", "dialogue"]
    assert chapter["blocks"][0]["html"] == "<p>The sky was red.</p>"


def test_cli_writes_output_file(tmp_path: Path, capsys: object) -> None:
    source = tmp_path / "arrival.pdf"
    target = tmp_path / "arrival.json"
    _build_pdf(source)

    exit_code = convert_cli_main(
        ["--path", str(source), "--language", "en", "--title", "Arrival", "--output", str(target)]
    )

    assert exit_code == 0
    assert capsys.readouterr().out == ""
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["metadata"]["title"] == "Arrival"
    assert len(payload["chapters"]) == 1


def test_cli_reports_unreadable_source(tmp_path: Path, capsys: object) -> None:
    source = tmp_path / "broken.pdf"
    source.write_bytes(b"not a pdf at all")

    exit_code = convert_cli_main(["--path", str(source), "--language", "en"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["source_path"] == str(source)
    assert payload["error"] == "Conversion error"
