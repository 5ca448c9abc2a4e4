"""
Configuration management for the client.
"""

import logging
from dataclasses import dataclass, field

from .exceptions import ConfigurationError
from .validators import normalize_base_url, validate_api_key

DEFAULT_BASE_URL = "https://converteverything.io"
DEFAULT_TIMEOUT = 300.0  # seconds, large uploads can be slow
DEFAULT_MAX_RETRIES = 3

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class ClientConfig:
    """
    Explicit configuration handed to ConvertEverythingClient.

    The api key and base URL are validated when the config is built, so an
    invalid credential or malformed address fails before any request is made.

    Attributes:
        api_key: Pre-issued credential, must start with ``ce_``
        base_url: Service root, normalized to https without trailing slashes
        timeout: Hard per-request timeout in seconds
        max_retries: Retries allowed beyond the initial attempt

    Example:
        >>> config = ClientConfig(api_key="ce_abc123")
        >>> config.base_url
        'https://converteverything.io'
    """

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES

    def __post_init__(self) -> None:
        validate_api_key(self.api_key)
        object.__setattr__(
            self, "base_url", normalize_base_url(self.base_url or DEFAULT_BASE_URL)
        )

        if self.timeout is None or self.timeout <= 0:
            raise ConfigurationError("Timeout must be a positive number of seconds")
        if self.max_retries is None or self.max_retries < 0:
            raise ConfigurationError("max_retries cannot be negative")


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the package.

    Logs go to stderr; stdout carries the protocol stream when serving over stdio.
    """
    resolved = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("converteverything_mcp")
    logger.setLevel(resolved)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(f"converteverything_mcp.sdk.{name}")
