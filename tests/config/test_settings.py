from __future__ import annotations

import pytest

from novelizer.config import (
    DEFAULT_FRONT_MATTER_TITLE,
    DEFAULT_IMAGE_WORKERS,
    DEFAULT_MAX_IMAGES_TOTAL,
    ConversionSettings,
)


def test_settings_defaults_from_empty_env() -> None:
    settings = ConversionSettings.from_env({})

    assert settings.image_workers == DEFAULT_IMAGE_WORKERS
    assert settings.front_matter_title == DEFAULT_FRONT_MATTER_TITLE
    assert settings.split_mixed_headings is True
    assert settings.max_images_total == DEFAULT_MAX_IMAGES_TOTAL
    assert settings == ConversionSettings()


def test_settings_load_overrides() -> None:
    settings = ConversionSettings.from_env(
        {
            "NOVELIZER_IMAGE_WORKERS": "8",
            "NOVELIZER_FRONT_MATTER_TITLE": " Front Matter ",
            "NOVELIZER_SPLIT_MIXED_HEADINGS": "off",
            "NOVELIZER_MAX_IMAGES_TOTAL": "0",
            "NOVELIZER_MAX_IMAGES_PER_PAGE": "1",
            "NOVELIZER_MIN_IMAGE_AREA": "1000",
        }
    )

    assert settings.image_workers == 8
    assert settings.front_matter_title == "Front Matter"
    assert settings.split_mixed_headings is False
    assert settings.max_images_total == 0
    assert settings.max_images_per_page == 1
    assert settings.min_image_area == 1000


def test_settings_reject_invalid_values() -> None:
    with pytest.raises(ValueError, match="NOVELIZER_IMAGE_WORKERS must be >= 1"):
        ConversionSettings.from_env({"NOVELIZER_IMAGE_WORKERS": "0"})

    with pytest.raises(ValueError, match="NOVELIZER_IMAGE_WORKERS must be an integer"):
        ConversionSettings.from_env({"NOVELIZER_IMAGE_WORKERS": "many"})

    with pytest.raises(ValueError, match="NOVELIZER_SPLIT_MIXED_HEADINGS"):
        ConversionSettings.from_env({"NOVELIZER_SPLIT_MIXED_HEADINGS": "maybe"})

    with pytest.raises(ValueError, match="NOVELIZER_MIN_IMAGE_AREA cannot be empty"):
        ConversionSettings.from_env({"NOVELIZER_MIN_IMAGE_AREA": "  "})
