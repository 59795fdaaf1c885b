"""Extraction collaborators feeding the structure pipeline."""

from .language_detection import detect_document_language, detect_language
from .pdf_source import ExtractedPdf, ExtractionError, PdfBlockExtractor, extract_raw_blocks

__all__ = [
    "ExtractedPdf",
    "ExtractionError",
    "PdfBlockExtractor",
    "detect_document_language",
    "detect_language",
    "extract_raw_blocks",
]
