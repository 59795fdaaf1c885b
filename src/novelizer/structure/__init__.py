"""Structure pipeline interfaces."""

from .assembler import ConversionError, DocumentAssembler, convert_blocks
from .patterns import Language, PatternMatcher
from .segmenter import Fragment, FragmentKind, TextSegmenter

__all__ = [
    "ConversionError",
    "DocumentAssembler",
    "Fragment",
    "FragmentKind",
    "Language",
    "PatternMatcher",
    "TextSegmenter",
    "convert_blocks",
]
