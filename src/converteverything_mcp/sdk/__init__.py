"""
ConvertEverything SDK

Async Python client for the ConvertEverything conversion API.
"""

from .. import __version__
from .client import ConvertEverythingClient
from .config import ClientConfig, setup_logging
from .models import (
    BatchItem,
    BatchResult,
    CancelResult,
    ConversionJob,
    ConversionList,
    ConversionStatus,
    DownloadResult,
    FileInfo,
    SizeEstimate,
    SupportedFormats,
    UsageInfo,
)
from .exceptions import (
    ConvertEverythingError,
    ConfigurationError,
    InvalidInputError,
    UnsupportedFormatError,
    FileSizeError,
    NetworkError,
    RequestTimeoutError,
    APIError,
    RateLimitError,
    ConversionStateError,
    ConversionTimeoutError,
)

__all__ = [
    "__version__",
    "ConvertEverythingClient",
    "ClientConfig",
    "setup_logging",
    "BatchItem",
    "BatchResult",
    "CancelResult",
    "ConversionJob",
    "ConversionList",
    "ConversionStatus",
    "DownloadResult",
    "FileInfo",
    "SizeEstimate",
    "SupportedFormats",
    "UsageInfo",
    "ConvertEverythingError",
    "ConfigurationError",
    "InvalidInputError",
    "UnsupportedFormatError",
    "FileSizeError",
    "NetworkError",
    "RequestTimeoutError",
    "APIError",
    "RateLimitError",
    "ConversionStateError",
    "ConversionTimeoutError",
]
