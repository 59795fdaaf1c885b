"""Convert extracted page text and images into a chaptered novel document."""

from .config import ConversionSettings
from .models import Document, NovelMetadata, RawImageBlock, RawTextBlock
from .structure import ConversionError, convert_blocks

__all__ = [
    "ConversionError",
    "ConversionSettings",
    "Document",
    "NovelMetadata",
    "RawImageBlock",
    "RawTextBlock",
    "convert_blocks",
]
