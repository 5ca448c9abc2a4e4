"""
Pure functions for remote API operations.

Functions for building requests, interpreting responses, and computing retry
behaviour without I/O dependencies.
"""

import base64
import binascii
import json
import random
import re
import string
import time
from pathlib import PurePath
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import httpx

from ..exceptions import InvalidInputError

CLIENT_NAME = "converteverything-mcp"

RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})
RATE_LIMIT_STATUS = 429
DEFAULT_RATE_LIMIT_WAIT = 60  # seconds reported when no Retry-After was sent

CORRELATION_HEADER = "X-Correlation-ID"

_DATA_URL_PREFIX = re.compile(r"^data:[^;]+;base64,")
_CONTENT_DISPOSITION_FILENAME = re.compile(r'filename="?([^";\n]+)"?')
_ID_ALPHABET = string.ascii_lowercase + string.digits


def build_user_agent(version: str) -> str:
    """Descriptive client identifier sent with every request."""
    return f"{CLIENT_NAME}/{version} (Python)"


def build_auth_headers(api_key: str, user_agent: str) -> Dict[str, str]:
    """Build authentication headers."""
    return {
        "Authorization": f"Bearer {api_key}",
        "User-Agent": user_agent,
        "Accept": "application/json",
    }


def generate_correlation_id() -> str:
    """Unique tag for one logical call, shared by all of its attempts."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=7))
    return f"mcp-{int(time.time() * 1000)}-{suffix}"


def is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Read a Retry-After header given in whole seconds; ignore anything else."""
    if not value:
        return None
    try:
        seconds = int(value.strip())
    except ValueError:
        return None
    return seconds if seconds > 0 else None


def calculate_retry_delay(
    attempt: int, base_delay: float, retry_after: Optional[int] = None
) -> float:
    """Server hint if given, otherwise exponential backoff: base * 2**attempt."""
    if retry_after:
        return float(retry_after)
    return base_delay * (2**attempt)


def extract_error_message(response: httpx.Response) -> Tuple[str, Optional[str]]:
    """Return (message, detail) for a failed response."""
    fallback = f"API error: {response.status_code} {response.reason_phrase}".rstrip()
    try:
        payload = response.json()
    except ValueError:
        return fallback, None

    detail = payload.get("detail") if isinstance(payload, dict) else None
    if isinstance(detail, str) and detail:
        return detail, detail
    if detail:
        # Validation errors arrive as a list of objects
        rendered = json.dumps(detail)
        return rendered, rendered
    return fallback, None


def with_correlation_id(message: str, correlation_id: str) -> str:
    return f"{message} (correlation-id: {correlation_id})"


def decode_payload(data: Union[bytes, bytearray, str]) -> bytes:
    """Accept raw bytes, plain base64, or a data URL."""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)

    encoded = "".join(_DATA_URL_PREFIX.sub("", data.strip()).split())
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidInputError("Invalid base64 data")


def encode_options(options: Optional[Mapping[str, Any]]) -> Optional[str]:
    """JSON-encode a non-empty options bag for the multipart form."""
    if not options:
        return None
    return json.dumps(dict(options))


def filename_from_content_disposition(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    match = _CONTENT_DISPOSITION_FILENAME.search(header)
    return match.group(1).strip() if match else None


def derive_output_filename(
    content_disposition: Optional[str],
    original_filename: Optional[str],
    target_format: str,
) -> str:
    """Header filename if present, else the original stem with the new extension."""
    from_header = filename_from_content_disposition(content_disposition)
    if from_header:
        return from_header

    if original_filename:
        stem = PurePath(original_filename).stem or original_filename
        return f"{stem}.{target_format}"

    return f"converted.{target_format}"


def paginate(page: int, per_page: int) -> Tuple[int, int, int, int]:
    """Clamp page >= 1 and per_page to [1, 100]; return (page, per_page, skip, limit)."""
    page = max(1, int(page))
    per_page = min(100, max(1, int(per_page)))
    return page, per_page, (page - 1) * per_page, per_page
