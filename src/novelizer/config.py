"""Runtime configuration for conversion and extraction."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping


DEFAULT_IMAGE_WORKERS = 4
DEFAULT_FRONT_MATTER_TITLE = "Prologue"
DEFAULT_SPLIT_MIXED_HEADINGS = True
DEFAULT_MAX_IMAGES_TOTAL = 40
DEFAULT_MAX_IMAGES_PER_PAGE = 3
DEFAULT_MIN_IMAGE_AREA = 200_000

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_bool(*, name: str, raw_value: str) -> bool:
    lowered = raw_value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of: true, false, 1, 0, yes, no, on, off")


@dataclass(frozen=True, slots=True)
class ConversionSettings:
    """Validated settings shared by the assembler, image pool and PDF extraction."""

    image_workers: int = DEFAULT_IMAGE_WORKERS
    front_matter_title: str = DEFAULT_FRONT_MATTER_TITLE
    split_mixed_headings: bool = DEFAULT_SPLIT_MIXED_HEADINGS
    max_images_total: int = DEFAULT_MAX_IMAGES_TOTAL
    max_images_per_page: int = DEFAULT_MAX_IMAGES_PER_PAGE
    min_image_area: int = DEFAULT_MIN_IMAGE_AREA

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ConversionSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        workers_raw = source.get("NOVELIZER_IMAGE_WORKERS", str(DEFAULT_IMAGE_WORKERS)).strip()
        front_matter_title = source.get("NOVELIZER_FRONT_MATTER_TITLE", DEFAULT_FRONT_MATTER_TITLE).strip()
        split_raw = source.get("NOVELIZER_SPLIT_MIXED_HEADINGS", "true").strip()
        total_raw = source.get("NOVELIZER_MAX_IMAGES_TOTAL", str(DEFAULT_MAX_IMAGES_TOTAL)).strip()
        per_page_raw = source.get("NOVELIZER_MAX_IMAGES_PER_PAGE", str(DEFAULT_MAX_IMAGES_PER_PAGE)).strip()
        area_raw = source.get("NOVELIZER_MIN_IMAGE_AREA", str(DEFAULT_MIN_IMAGE_AREA)).strip()

        if not workers_raw:
            raise ValueError("NOVELIZER_IMAGE_WORKERS cannot be empty")
        if not split_raw:
            raise ValueError("NOVELIZER_SPLIT_MIXED_HEADINGS cannot be empty")
        if not total_raw:
            raise ValueError("NOVELIZER_MAX_IMAGES_TOTAL cannot be empty")
        if not per_page_raw:
            raise ValueError("NOVELIZER_MAX_IMAGES_PER_PAGE cannot be empty")
        if not area_raw:
            raise ValueError("NOVELIZER_MIN_IMAGE_AREA cannot be empty")

        return cls(
            image_workers=_parse_positive_int(name="NOVELIZER_IMAGE_WORKERS", raw_value=workers_raw),
            front_matter_title=front_matter_title,
            split_mixed_headings=_parse_bool(name="NOVELIZER_SPLIT_MIXED_HEADINGS", raw_value=split_raw),
            max_images_total=_parse_positive_int(name="NOVELIZER_MAX_IMAGES_TOTAL", raw_value=total_raw, minimum=0),
            max_images_per_page=_parse_positive_int(
                name="NOVELIZER_MAX_IMAGES_PER_PAGE",
                raw_value=per_page_raw,
                minimum=0,
            ),
            min_image_area=_parse_positive_int(name="NOVELIZER_MIN_IMAGE_AREA", raw_value=area_raw, minimum=0),
        )
