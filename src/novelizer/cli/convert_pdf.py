"""CLI command converting a PDF into the structured novel JSON document."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

from novelizer.config import ConversionSettings
from novelizer.extraction.language_detection import detect_document_language
from novelizer.extraction.pdf_source import ExtractionError, PdfBlockExtractor
from novelizer.models import NovelMetadata
from novelizer.structure.assembler import ConversionError, convert_blocks

logger = logging.getLogger(__name__)


def _error_payload(path: Path, error: Exception) -> dict[str, str]:
    return {"source_path": str(path), "error": "Conversion error", "details": str(error)}


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
        stream=sys.stderr,
    )

    parser = argparse.ArgumentParser(description="Convert a PDF novel into chapters, blocks and a table of contents")
    parser.add_argument("--path", required=True, help="Source PDF file")
    parser.add_argument("--title", default=None, help="Title override (defaults to PDF metadata or file name)")
    parser.add_argument("--language", default=None, help="Language code override: en, fr or ja")
    parser.add_argument("--author", default=None)
    parser.add_argument("--series", default=None)
    parser.add_argument("--volume", default=None)
    parser.add_argument("--output", default=None, help="Write JSON here instead of stdout")
    args = parser.parse_args(argv)

    source_path = Path(args.path)

    try:
        settings = ConversionSettings.from_env()
    except ValueError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    try:
        extracted = PdfBlockExtractor(settings).extract(source_path)
        language = args.language or detect_document_language(extracted.blocks)
        metadata = NovelMetadata(
            title=args.title or extracted.title,
            language=language,
            author=args.author or extracted.author,
            series=args.series,
            volume=args.volume,
        )
        document = convert_blocks(extracted.blocks, metadata, settings=settings)
    except (ExtractionError, ConversionError) as exc:
        logger.error("Conversion failed for %s: %s", source_path, exc)
        print(json.dumps(_error_payload(source_path, exc), ensure_ascii=False, indent=2))
        return 1

    payload = json.dumps(document.to_dict(), ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        logger.info("Wrote %d chapters to %s", len(document.chapters), args.output)
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
