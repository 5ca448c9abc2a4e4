"""
Core pure functions for the client.

This package contains I/O-free functions for request building, retry
decisions, response interpretation and size estimation.
"""

from .remote import (
    RETRYABLE_STATUS_CODES,
    build_auth_headers,
    build_user_agent,
    generate_correlation_id,
    is_retryable_status,
    parse_retry_after,
    calculate_retry_delay,
    extract_error_message,
    with_correlation_id,
    decode_payload,
    encode_options,
    filename_from_content_disposition,
    derive_output_filename,
    paginate,
)

from .estimate import estimate_output_size

__all__ = [
    # Remote functions
    "RETRYABLE_STATUS_CODES",
    "build_auth_headers",
    "build_user_agent",
    "generate_correlation_id",
    "is_retryable_status",
    "parse_retry_after",
    "calculate_retry_delay",
    "extract_error_message",
    "with_correlation_id",
    "decode_payload",
    "encode_options",
    "filename_from_content_disposition",
    "derive_output_filename",
    "paginate",
    # Estimation
    "estimate_output_size",
]
