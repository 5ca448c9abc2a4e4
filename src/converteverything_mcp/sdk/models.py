"""
Data models for conversion jobs and API responses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ConversionStatus(str, Enum):
    """Lifecycle status of a remote conversion job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    EXPIRED = "expired"


TERMINAL_STATUSES = frozenset({ConversionStatus.COMPLETED, ConversionStatus.FAILED})


@dataclass
class ConversionJob:
    """
    Snapshot of a remote conversion job.

    The remote service is the only writer; the client builds these from
    submission, status and list responses and never mutates them.

    Attributes:
        id: Job UUID
        status: One of ConversionStatus values (raw string kept if unknown)
        source_format: Detected input format
        target_format: Requested output format
        original_filename: Name of the uploaded file
        created_at: ISO timestamp of submission
        started_at: ISO timestamp processing began, once reached
        completed_at: ISO timestamp of completion, once reached
        error_message: Failure reason, only for failed jobs
        download_url: Time-limited locator, only for completed jobs
        download_expires_at: ISO expiry of download_url

    Example:
        >>> job = await client.get_conversion_status(job_id)
        >>> if job.is_terminal:
        ...     print(job.status, job.download_url)
    """

    id: str
    status: str
    source_format: str = ""
    target_format: str = ""
    original_filename: str = ""
    created_at: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    error_message: Optional[str] = None
    download_url: Optional[str] = None
    download_expires_at: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (s.value for s in TERMINAL_STATUSES)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversionJob":
        return cls(
            id=str(data.get("id", "")),
            status=str(data.get("status", ConversionStatus.PENDING.value)),
            source_format=data.get("source_format") or "",
            target_format=data.get("target_format") or "",
            original_filename=data.get("original_filename") or "",
            created_at=data.get("created_at"),
            started_at=data.get("started_at"),
            completed_at=data.get("completed_at"),
            error_message=data.get("error_message"),
            download_url=data.get("download_url"),
            download_expires_at=data.get("download_expires_at"),
        )


@dataclass
class SupportedFormats:
    """Category to format-list mapping reported by the service."""

    formats: Dict[str, List[str]]
    total_formats: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SupportedFormats":
        formats = {
            category: list(values)
            for category, values in (data.get("formats") or {}).items()
            if isinstance(values, list)
        }
        total = data.get("total_formats")
        if total is None:
            total = sum(len(values) for values in formats.values())
        return cls(formats=formats, total_formats=int(total))


@dataclass
class UsageInfo:
    """
    Current consumption and tier limits.

    ``conversions_limit`` and ``conversions_remaining`` are None for an
    unlimited tier (the service reports the limit as -1).
    """

    tier: str
    conversions_used: int
    conversions_limit: Optional[int]
    conversions_remaining: Optional[int]
    storage_used_bytes: int = 0
    storage_used_mb: float = 0.0
    max_file_size_bytes: int = 0
    max_file_size_mb: float = 0.0
    file_retention_hours: int = 0

    @property
    def is_unlimited(self) -> bool:
        return self.conversions_limit is None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UsageInfo":
        limit = data.get("conversions_limit")
        unlimited = limit is None or int(limit) < 0
        remaining = data.get("conversions_remaining")
        return cls(
            tier=str(data.get("tier", "unknown")),
            conversions_used=int(data.get("conversions_used", 0)),
            conversions_limit=None if unlimited else int(limit),
            conversions_remaining=(
                None if unlimited or remaining is None else int(remaining)
            ),
            storage_used_bytes=int(data.get("storage_used_bytes", 0)),
            storage_used_mb=float(data.get("storage_used_mb", 0)),
            max_file_size_bytes=int(data.get("max_file_size_bytes", 0)),
            max_file_size_mb=float(data.get("max_file_size_mb", 0)),
            file_retention_hours=int(data.get("file_retention_hours", 0)),
        )


@dataclass
class ConversionList:
    """One page of the conversion history."""

    conversions: List[ConversionJob]
    total: int
    page: int
    per_page: int

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], page: int, per_page: int
    ) -> "ConversionList":
        conversions = [
            ConversionJob.from_dict(item) for item in data.get("conversions") or []
        ]
        return cls(
            conversions=conversions,
            total=int(data.get("total", len(conversions))),
            page=int(data.get("page", page)),
            per_page=int(data.get("per_page", per_page)),
        )


@dataclass
class DownloadResult:
    """Bytes of a completed conversion."""

    data: bytes
    filename: str
    content_type: str


@dataclass
class CancelResult:
    """Outcome of a cancel/delete request; failures are data, not exceptions."""

    success: bool
    message: str


@dataclass
class FileInfo:
    """Local file metadata."""

    filename: str
    size: int
    format: str
    mime_type: str


@dataclass
class SizeEstimate:
    """Heuristic output size; an approximation, not a guarantee."""

    estimated_size: int
    confidence: str
    notes: str = ""


@dataclass
class BatchItem:
    """Per-file outcome of a batch submission."""

    file_path: str
    target_format: str
    job: Optional[ConversionJob] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.job is not None


@dataclass
class BatchResult:
    """All outcomes of a batch submission, in input order."""

    items: List[BatchItem] = field(default_factory=list)

    @property
    def succeeded(self) -> List[BatchItem]:
        return [item for item in self.items if item.ok]

    @property
    def failed(self) -> List[BatchItem]:
        return [item for item in self.items if not item.ok]
