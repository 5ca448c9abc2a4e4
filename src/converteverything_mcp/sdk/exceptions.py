"""
Custom exceptions for the ConvertEverything client.
"""

from typing import Dict, Any, Optional


class ConvertEverythingError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ConvertEverythingError):
    """Raised when the client is constructed with a bad credential or base URL."""

    pass


class InvalidInputError(ConvertEverythingError):
    """Raised when local validation rejects an argument before any request."""

    pass


class UnsupportedFormatError(InvalidInputError):
    """Raised when a target format is not in the format registry."""

    pass


class FileSizeError(InvalidInputError):
    """Raised when a payload exceeds the absolute upload ceiling."""

    pass


class NetworkError(ConvertEverythingError):
    """Raised when no HTTP response could be obtained."""

    pass


class RequestTimeoutError(NetworkError):
    """Raised when every attempt of a call exceeded the request timeout."""

    pass


class APIError(ConvertEverythingError):
    """Raised when the remote service answered with a failure status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ):
        super().__init__(
            message,
            {
                "status_code": status_code,
                "detail": detail,
                "correlation_id": correlation_id,
            },
        )
        self.status_code = status_code
        self.detail = detail
        self.correlation_id = correlation_id


class RateLimitError(APIError):
    """Raised when the rate limit is still hit after all retries."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[int] = None,
        correlation_id: Optional[str] = None,
    ):
        super().__init__(message, status_code=429, correlation_id=correlation_id)
        self.retry_after = retry_after
        self.details["retry_after"] = retry_after


class ConversionStateError(ConvertEverythingError):
    """Raised when an operation is invalid for the job's current status."""

    pass


class ConversionTimeoutError(ConvertEverythingError):
    """Raised when waiting for a conversion exceeds the allowed time."""

    def __init__(self, message: str, last_status: Optional[str] = None):
        super().__init__(message, {"last_status": last_status})
        self.last_status = last_status
