"""
Static format registry.

Maps file extensions to conversion categories and MIME types. Pure lookups,
no I/O.
"""

from typing import Dict, List, Optional

FORMAT_CATEGORY_DESCRIPTIONS: Dict[str, str] = {
    "audio": "Audio formats for music, podcasts, and sound effects",
    "video": "Video formats for streaming, editing, and archiving",
    "image": "Image formats for web, print, and photography",
    "document": "Document formats for office, publishing, and data",
    "ebook": "Ebook formats for readers and tablets",
    "data": "Data interchange formats",
    "3d": "3D model formats for printing, gaming, and CAD",
    "font": "Font formats for web and desktop",
    "archive": "Archive and compression formats",
    "cad": "CAD drawing formats",
}

CATEGORIES: List[str] = list(FORMAT_CATEGORY_DESCRIPTIONS)

_FORMATS_BY_CATEGORY: Dict[str, List[str]] = {
    "audio": [
        "mp3", "wav", "flac", "aac", "ogg", "m4a", "wma", "aiff", "midi", "mid",
        "opus", "ac3", "amr", "ape",
    ],
    "video": [
        "mp4", "avi", "mkv", "mov", "webm", "wmv", "flv", "m4v", "3gp", "ts",
        "vob", "mts", "mpeg", "m2ts", "divx",
    ],
    "image": [
        "jpg", "jpeg", "png", "gif", "webp", "bmp", "tiff", "tif", "svg", "ico",
        "heic",
    ],
    "document": [
        "pdf", "docx", "doc", "xlsx", "xls", "pptx", "ppt", "txt", "md", "html",
        "htm", "rtf", "odt", "odp", "ods", "docm", "xlsm",
    ],
    "ebook": ["epub", "mobi", "azw3"],
    "data": ["json", "csv", "xml", "yaml", "yml", "tsv"],
    "3d": [
        "obj", "stl", "ply", "gltf", "glb", "dae", "off", "fbx", "3ds", "blend",
        "usdz", "step", "stp", "iges", "igs", "ifc",
    ],
    "font": ["ttf", "otf", "woff", "woff2", "eot"],
    "archive": ["zip", "tar", "gz", "bz2", "7z"],
    "cad": ["dxf"],
}

FORMAT_CATEGORIES: Dict[str, str] = {
    fmt: category
    for category, formats in _FORMATS_BY_CATEGORY.items()
    for fmt in formats
}

MIME_TYPES: Dict[str, str] = {
    # Audio
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "flac": "audio/flac",
    "aac": "audio/aac",
    "ogg": "audio/ogg",
    "m4a": "audio/mp4",
    "wma": "audio/x-ms-wma",
    # Video
    "mp4": "video/mp4",
    "avi": "video/x-msvideo",
    "mkv": "video/x-matroska",
    "mov": "video/quicktime",
    "webm": "video/webm",
    "wmv": "video/x-ms-wmv",
    # Image
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "heic": "image/heic",
    "tiff": "image/tiff",
    "tif": "image/tiff",
    # Document
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "doc": "application/msword",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "xls": "application/vnd.ms-excel",
    "txt": "text/plain",
    "html": "text/html",
    "md": "text/markdown",
    # Data
    "json": "application/json",
    "csv": "text/csv",
    "xml": "application/xml",
    "yaml": "application/x-yaml",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def get_format_category(fmt: str) -> Optional[str]:
    """Get the category for a given format, or None if unknown."""
    return FORMAT_CATEGORIES.get(fmt.lower())


def is_format_supported(fmt: str) -> bool:
    """Check if a format is in the registry (case-insensitive)."""
    return fmt.lower() in FORMAT_CATEGORIES


def get_formats_by_category(category: str) -> List[str]:
    """Get all formats for a category, sorted."""
    return sorted(fmt for fmt, cat in FORMAT_CATEGORIES.items() if cat == category)


def get_format_category_info(category: str) -> Dict[str, object]:
    """Get formats and description for a category."""
    return {
        "formats": get_formats_by_category(category),
        "description": FORMAT_CATEGORY_DESCRIPTIONS.get(category, ""),
    }


def guess_mime_type(fmt: str) -> str:
    """Map an extension (without dot) to its MIME type."""
    return MIME_TYPES.get(fmt.lower(), DEFAULT_MIME_TYPE)
