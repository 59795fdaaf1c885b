"""Raster encoding interfaces."""

from .png import EncodingError, encode_png, png_data_uri
from .pool import encode_images

__all__ = ["EncodingError", "encode_images", "encode_png", "png_data_uri"]
