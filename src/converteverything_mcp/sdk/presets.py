"""
Conversion options and named presets.

Options are an open bag keyed by format category. Known keys are checked by
per-category models; unknown keys pass through untouched so new remote
parameters keep working.
"""

from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, ValidationError

from .exceptions import InvalidInputError
from .formats import get_format_category


class _Options(BaseModel):
    model_config = ConfigDict(extra="allow")


class AudioOptions(_Options):
    bitrate: Optional[Union[str, int]] = None  # e.g. "128k", "320k"
    sample_rate: Optional[int] = Field(default=None, gt=0)
    channels: Optional[int] = Field(default=None, ge=1)
    normalize: Optional[bool] = None


class VideoOptions(_Options):
    resolution: Optional[str] = None  # e.g. "1920x1080"
    fps: Optional[Union[PositiveInt, PositiveFloat]] = None
    crf: Optional[int] = Field(default=None, ge=0, le=51)  # lower is better
    preset: Optional[str] = None  # encoder speed preset
    audio_bitrate: Optional[Union[str, int]] = None
    remove_audio: Optional[bool] = None


class ImageOptions(_Options):
    quality: Optional[int] = Field(default=None, ge=1, le=100)
    max_dimension: Optional[int] = Field(default=None, gt=0)
    strip_metadata: Optional[bool] = None
    dpi: Optional[int] = Field(default=None, gt=0)
    ico_size: Optional[int] = None


class DocumentOptions(_Options):
    pdf_quality: Optional[str] = None  # screen, ebook, printer, prepress
    page_size: Optional[str] = None
    orientation: Optional[str] = None


class EbookOptions(_Options):
    epub_version: Optional[str] = None
    embed_fonts: Optional[bool] = None
    smarten_punctuation: Optional[bool] = None


OPTION_MODELS: Dict[str, Type[_Options]] = {
    "audio": AudioOptions,
    "video": VideoOptions,
    "image": ImageOptions,
    "document": DocumentOptions,
    "ebook": EbookOptions,
}

# Category -> preset section; ebooks share the document defaults.
PRESET_CATEGORY_MAP: Dict[str, str] = {
    "audio": "audio",
    "video": "video",
    "image": "image",
    "document": "document",
    "ebook": "document",
}

PRESET_CONFIGS: Dict[str, Dict[str, Any]] = {
    "web-optimized": {
        "description": "Smaller files optimized for web delivery",
        "options": {
            "audio": {"bitrate": "128k", "sample_rate": 44100, "channels": 2},
            "video": {"crf": 28, "preset": "fast", "resolution": "1280x720"},
            "image": {"quality": 80, "max_dimension": 1920, "strip_metadata": True},
            "document": {"pdf_quality": "screen"},
        },
    },
    "high-quality": {
        "description": "Maximum quality, larger file sizes",
        "options": {
            "audio": {"bitrate": "320k", "sample_rate": 48000, "channels": 2},
            "video": {"crf": 18, "preset": "slow"},
            "image": {"quality": 95, "strip_metadata": False},
            "document": {"pdf_quality": "prepress"},
        },
    },
    "smallest-size": {
        "description": "Aggressive compression for minimum file size",
        "options": {
            "audio": {"bitrate": "64k", "sample_rate": 22050, "channels": 1},
            "video": {"crf": 35, "preset": "ultrafast", "resolution": "854x480"},
            "image": {"quality": 60, "max_dimension": 1024, "strip_metadata": True},
            "document": {"pdf_quality": "screen"},
        },
    },
    "balanced": {
        "description": "Good balance of quality and file size",
        "options": {
            "audio": {"bitrate": "192k", "sample_rate": 44100, "channels": 2},
            "video": {"crf": 23, "preset": "medium"},
            "image": {"quality": 85, "strip_metadata": False},
            "document": {"pdf_quality": "ebook"},
        },
    },
    "print-ready": {
        "description": "Optimized for printing (300 DPI, high quality)",
        "options": {
            "image": {"quality": 100, "dpi": 300, "strip_metadata": False},
            "document": {"pdf_quality": "printer", "page_size": "a4"},
        },
    },
    "archive": {
        "description": "Archival quality, preserves maximum detail",
        "options": {
            "audio": {"bitrate": "320k", "sample_rate": 48000},
            "video": {"crf": 15, "preset": "veryslow"},
            "image": {"quality": 100, "strip_metadata": False},
            "document": {"pdf_quality": "prepress"},
        },
    },
}

PRESET_NAMES = tuple(PRESET_CONFIGS)


def get_preset_options(preset: str, category: str) -> Optional[Dict[str, Any]]:
    """Get a copy of a preset's defaults for a format category."""
    config = PRESET_CONFIGS.get(preset)
    if config is None:
        raise InvalidInputError(
            f"Unknown preset: {preset}. Available presets: {', '.join(PRESET_NAMES)}",
            {"preset": preset},
        )

    key = PRESET_CATEGORY_MAP.get(category)
    if key is None or key not in config["options"]:
        return None
    return dict(config["options"][key])


def validate_options(category: Optional[str], options: Dict[str, Any]) -> Dict[str, Any]:
    """Check known keys for the category; unknown keys are kept as-is."""
    model = OPTION_MODELS.get(category or "")
    if model is None:
        return dict(options)

    try:
        return model.model_validate(options).model_dump(exclude_none=True)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidInputError(
            f"Invalid {category} options: {problems}", {"options": options}
        )


def resolve_options(
    target_format: str,
    preset: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Optional[Dict[str, Any]]:
    """
    Merge preset defaults with caller overrides for a target format.

    Caller values win per key. Returns None when there is nothing to send.

    Example:
        >>> resolve_options("mp3", "web-optimized", {"bitrate": "96k"})
        {'bitrate': '96k', 'sample_rate': 44100, 'channels': 2}
    """
    category = get_format_category(target_format.lstrip("."))
    merged: Dict[str, Any] = {}

    if preset:
        merged.update(get_preset_options(preset, category or "") or {})

    if overrides:
        merged.update(overrides)

    if not merged:
        return None

    return validate_options(category, merged)
