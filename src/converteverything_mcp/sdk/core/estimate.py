"""
Heuristic output size estimation.

Hand-tuned ratios only; the remote service decides the real size.
"""

import re
from typing import Any, Mapping, Optional

from ..models import SizeEstimate

CD_QUALITY_KBPS = 1400  # uncompressed 16-bit stereo at 44.1 kHz, rounded
DEFAULT_BITRATE = "192k"
DEFAULT_KBPS = 192
DEFAULT_IMAGE_QUALITY = 85

LOSSY_AUDIO_TARGETS = ("mp3", "aac", "ogg", "opus")
LOSSLESS_AUDIO_SOURCES = ("wav", "flac", "aiff")
LOSSLESS_AUDIO_TARGETS = ("wav", "flac")
LOSSY_AUDIO_SOURCES = ("mp3", "aac", "ogg")
VIDEO_TARGETS = ("mp4", "webm", "mkv")
LOSSY_IMAGE_TARGETS = ("jpg", "jpeg", "webp")
LOSSLESS_IMAGE_SOURCES = ("png", "bmp", "tiff")
OFFICE_SOURCES = ("docx", "doc", "pptx")

_LEADING_NUMBER = re.compile(r"^\s*(\d+)")


def _parse_kbps(bitrate: Any) -> int:
    if isinstance(bitrate, (int, float)) and bitrate > 0:
        return int(bitrate)
    match = _LEADING_NUMBER.match(str(bitrate))
    kbps = int(match.group(1)) if match else 0
    return kbps or DEFAULT_KBPS


def _parse_number(value: Any, default: Optional[float] = None) -> Optional[float]:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(str(value).strip())
    except ValueError:
        return default
    return int(number) if number.is_integer() else number


def estimate_output_size(
    input_size: int,
    source_format: str,
    target_format: str,
    options: Optional[Mapping[str, Any]] = None,
) -> SizeEstimate:
    """
    Estimate converted size from the format pair and quality options.

    Rules are checked audio, video, image, document; a later match replaces
    an earlier one.

    Example:
        >>> estimate_output_size(150_000_000, "wav", "mp3", {"bitrate": "128k"})
        SizeEstimate(estimated_size=13714286, confidence='high', notes='Based on 128k bitrate')
    """
    src = source_format.lower().lstrip(".")
    tgt = target_format.lower().lstrip(".")
    options = options or {}

    ratio = 1.0
    confidence = "medium"
    notes = ""

    # Audio
    if tgt in LOSSY_AUDIO_TARGETS:
        if src in LOSSLESS_AUDIO_SOURCES:
            bitrate = options.get("bitrate") or DEFAULT_BITRATE
            ratio = _parse_kbps(bitrate) / CD_QUALITY_KBPS
            confidence = "high"
            notes = f"Based on {bitrate} bitrate"
    elif tgt in LOSSLESS_AUDIO_TARGETS:
        if src in LOSSY_AUDIO_SOURCES:
            ratio = 8.0 if src == "mp3" else 6.0
            confidence = "medium"
            notes = "Expanding lossy to lossless format"

    # Video
    if tgt in VIDEO_TARGETS:
        crf = _parse_number(options.get("crf"))
        if crf is not None:
            if crf < 20:
                ratio, label = 1.5, "high quality, larger file"
            elif crf > 28:
                ratio, label = 0.5, "lower quality, smaller file"
            else:
                ratio, label = 1.0, "balanced"
            confidence = "medium"
            notes = f"CRF {crf}: {label}"

    # Image
    if tgt in LOSSY_IMAGE_TARGETS:
        quality = _parse_number(options.get("quality")) or DEFAULT_IMAGE_QUALITY
        if src in LOSSLESS_IMAGE_SOURCES:
            ratio = 0.1 + (quality / 100) * 0.3
            confidence = "high"
            notes = f"Quality {quality}%"
    elif tgt == "png":
        if src in LOSSY_IMAGE_TARGETS:
            ratio = 3.0
            confidence = "medium"
            notes = "Lossless format, larger file expected"

    # Document
    if tgt == "pdf" and src in OFFICE_SOURCES:
        ratio = 0.8
        confidence = "low"
        notes = "Depends heavily on document content"

    return SizeEstimate(
        estimated_size=round(input_size * ratio),
        confidence=confidence,
        notes=notes,
    )
