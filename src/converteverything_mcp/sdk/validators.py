"""
Validation utilities for client operations.

Everything here runs before a request is issued: a failure means no network
call is made.
"""

import os
import re
from pathlib import Path
from typing import Union
from urllib.parse import urlparse

from .exceptions import ConfigurationError, InvalidInputError, UnsupportedFormatError
from .formats import is_format_supported

API_KEY_PREFIX = "ce_"
API_KEY_HELP_URL = "https://converteverything.io/api-keys"

LOOPBACK_HOSTS = {"localhost", "127.0.0.1", "::1"}

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

UNSAFE_FILENAME_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")

MAX_FILENAME_LENGTH = 255
FALLBACK_FILENAME = "file"


def validate_api_key(api_key: str) -> str:
    """Check the credential format; never echoes the key back."""
    if not api_key:
        raise ConfigurationError("API key is required")

    if not api_key.startswith(API_KEY_PREFIX):
        raise ConfigurationError(
            f"Invalid API key format. Keys should start with '{API_KEY_PREFIX}'. "
            f"Get your API key at {API_KEY_HELP_URL}"
        )

    return api_key


def normalize_base_url(url: str) -> str:
    """Strip trailing slashes and force https unless the host is loopback."""
    sanitized = url.strip().rstrip("/")
    parsed = urlparse(sanitized)

    if parsed.scheme.lower() not in ("http", "https") or not parsed.hostname:
        raise ConfigurationError(f"Invalid base URL: {url}")

    if parsed.scheme.lower() == "http" and parsed.hostname not in LOOPBACK_HOSTS:
        sanitized = "https" + sanitized[len(parsed.scheme):]

    return sanitized


def is_valid_uuid(value: str) -> bool:
    """Check for the canonical 8-4-4-4-12 hex UUID form."""
    return isinstance(value, str) and bool(UUID_PATTERN.match(value))


def validate_conversion_id(conversion_id: str) -> str:
    """Reject anything that is not a UUID."""
    if not is_valid_uuid(conversion_id):
        raise InvalidInputError(
            "Invalid conversion ID format", {"conversion_id": conversion_id}
        )
    return conversion_id


def normalize_format(target_format: str) -> str:
    """Lower-case, drop one leading dot, and require a registered format."""
    normalized = (target_format or "").strip().lower()
    if normalized.startswith("."):
        normalized = normalized[1:]

    if not normalized or not is_format_supported(normalized):
        raise UnsupportedFormatError(
            f"Unsupported target format: {target_format}. "
            "Use get_supported_formats to see available formats.",
            {"target_format": target_format},
        )

    return normalized


def validate_file_path(file_path: Union[str, Path]) -> Path:
    """
    Resolve a user-supplied path to the real path of an existing regular file.

    Resolution plus the existence check is what keeps traversal out; the
    ``..`` check after symlink resolution is a second line only.
    """
    raw = str(file_path)
    if "\0" in raw:
        raise InvalidInputError("Invalid file path: contains null bytes")

    absolute = Path(os.path.abspath(raw))

    if not absolute.exists():
        raise InvalidInputError(f"File not found: {file_path}")

    if not absolute.is_file():
        raise InvalidInputError(f"Path is not a file: {file_path}")

    real_path = Path(os.path.realpath(absolute))

    if not real_path.is_absolute() or ".." in real_path.parts:
        raise InvalidInputError("Invalid file path: potential directory traversal")

    return real_path


def validate_save_path(save_path: Union[str, Path], filename: str) -> Path:
    """
    Work out where a downloaded file may be written.

    An existing directory gets the sanitized ``filename`` appended; anything
    else must have an existing parent directory.
    """
    raw = str(save_path)
    if "\0" in raw:
        raise InvalidInputError("Invalid save path: contains null bytes")

    if ".." in Path(raw).parts:
        raise InvalidInputError("Invalid save path: contains directory traversal")

    resolved = Path(os.path.abspath(raw))

    if resolved.is_dir():
        return resolved / sanitize_filename(filename)

    if not resolved.parent.is_dir():
        raise InvalidInputError(
            f"Parent directory does not exist: {resolved.parent}"
        )

    return resolved


def sanitize_filename(filename: str) -> str:
    """Reduce a filename to a safe basename for upload or saving."""
    name = re.split(r"[\\/]", filename or "")[-1]

    name = UNSAFE_FILENAME_CHARS.sub("", name)

    if len(name) > MAX_FILENAME_LENGTH:
        stem, dot, ext = name.rpartition(".")
        if dot and stem:
            suffix = dot + ext
            name = stem[: MAX_FILENAME_LENGTH - len(suffix)] + suffix
        name = name[:MAX_FILENAME_LENGTH]

    if name in ("", ".", ".."):
        name = FALLBACK_FILENAME

    return name
