"""
Async client for the ConvertEverything conversion API.

Every operation validates its inputs locally first; a rejected argument never
costs a request.
"""

import asyncio
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

import httpx

from .. import __version__
from .config import ClientConfig, get_logger
from .core.estimate import estimate_output_size
from .core.remote import (
    build_user_agent,
    decode_payload,
    derive_output_filename,
    encode_options,
    paginate,
)
from .exceptions import (
    APIError,
    ConversionStateError,
    ConversionTimeoutError,
    ConvertEverythingError,
    FileSizeError,
)
from .formats import guess_mime_type
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
from .presets import resolve_options
from .transport import ResilientTransport, Sleep
from .validators import (
    normalize_format,
    sanitize_filename,
    validate_conversion_id,
    validate_file_path,
)

FORMAT_CACHE_TTL = 3600  # seconds
MAX_FILE_SIZE = 10 * 1024 * 1024 * 1024  # 10 GiB, tier limits are enforced remotely

DEFAULT_POLL_INTERVAL = 2.0  # seconds
DEFAULT_WAIT_TIMEOUT = 300.0  # seconds

logger = get_logger("client")


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ConvertEverythingClient:
    """
    Typed operations against the remote conversion service.

    Args:
        config: Validated ClientConfig
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
        sleep: Coroutine used for retry and polling delays
        clock: Monotonic clock in seconds, used for the format cache and polling

    Example:
        >>> async with ConvertEverythingClient(ClientConfig(api_key="ce_...")) as client:
        ...     job = await client.convert_file("song.wav", "mp3", preset="web-optimized")
        ...     job = await client.wait_for_conversion(job.id)
        ...     result = await client.download_file(job.id)
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.user_agent = build_user_agent(__version__)
        self._sleep = sleep
        self._clock = clock
        self._http = ResilientTransport(
            config, self.user_agent, http_transport=transport, sleep=sleep
        )
        self._format_cache: Optional[Tuple[SupportedFormats, float]] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self._http.aclose()

    # Formats and account

    async def get_supported_formats(self, skip_cache: bool = False) -> SupportedFormats:
        """Category to format mapping, cached for an hour unless ``skip_cache``."""
        now = self._clock()
        if not skip_cache and self._format_cache is not None:
            formats, captured_at = self._format_cache
            if now - captured_at < FORMAT_CACHE_TTL:
                logger.debug("Format list served from cache")
                return formats

        data = await self._http.request_json("GET", "/convert/formats")
        formats = SupportedFormats.from_dict(data or {})
        self._format_cache = (formats, now)
        logger.debug("Format list refreshed (%d formats)", formats.total_formats)
        return formats

    def clear_format_cache(self) -> None:
        self._format_cache = None

    async def get_usage(self) -> UsageInfo:
        data = await self._http.request_json("GET", "/user/usage")
        return UsageInfo.from_dict(data or {})

    # Submission

    async def convert_file(
        self,
        file_path: Union[str, Path],
        target_format: str,
        options: Optional[Dict[str, Any]] = None,
        preset: Optional[str] = None,
    ) -> ConversionJob:
        """Submit a local file for conversion."""
        real_path = validate_file_path(file_path)
        fmt = normalize_format(target_format)
        resolved = resolve_options(fmt, preset, options)

        data = await asyncio.to_thread(real_path.read_bytes)
        return await self._submit(data, real_path.name, fmt, resolved)

    async def convert_file_buffer(
        self,
        data: Union[bytes, bytearray, str],
        filename: str,
        target_format: str,
        options: Optional[Dict[str, Any]] = None,
        preset: Optional[str] = None,
    ) -> ConversionJob:
        """
        Submit in-memory content for conversion.

        ``data`` may be raw bytes, a base64 string or a base64 data URL.
        """
        payload = decode_payload(data)
        fmt = normalize_format(target_format)
        resolved = resolve_options(fmt, preset, options)
        return await self._submit(payload, filename, fmt, resolved)

    async def _submit(
        self,
        payload: bytes,
        filename: str,
        target_format: str,
        options: Optional[Dict[str, Any]],
    ) -> ConversionJob:
        if len(payload) > MAX_FILE_SIZE:
            raise FileSizeError(
                "File too large. Maximum size is 10GB.", {"size": len(payload)}
            )

        name = sanitize_filename(filename)
        form: Dict[str, str] = {"output_format": target_format}
        encoded = encode_options(options)
        if encoded:
            form["options"] = encoded

        logger.info(
            "Submitting %s (%d bytes) for conversion to %s", name, len(payload), target_format
        )
        data = await self._http.request_json(
            "POST",
            "/convert",
            files={"file": (name, payload)},
            data=form,
        )
        return ConversionJob.from_dict(data or {})

    async def batch_convert(
        self,
        files: Iterable[Tuple[Union[str, Path], str]],
        options: Optional[Dict[str, Any]] = None,
        preset: Optional[str] = None,
    ) -> BatchResult:
        """
        Submit several files one after another.

        A failing item is recorded and the rest are still attempted.
        """
        result = BatchResult()
        for file_path, target_format in files:
            item = BatchItem(file_path=str(file_path), target_format=target_format)
            try:
                item.job = await self.convert_file(
                    file_path, target_format, options=options, preset=preset
                )
            except ConvertEverythingError as e:
                logger.warning("Batch item %s failed: %s", file_path, e.message)
                item.error = e.message
            result.items.append(item)

        logger.info(
            "Batch finished: %d submitted, %d failed",
            len(result.succeeded),
            len(result.failed),
        )
        return result

    # Job lifecycle

    async def get_conversion_status(self, conversion_id: str) -> ConversionJob:
        validate_conversion_id(conversion_id)
        data = await self._http.request_json("GET", f"/convert/{conversion_id}")
        return ConversionJob.from_dict(data or {})

    async def wait_for_conversion(
        self,
        conversion_id: str,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> ConversionJob:
        """
        Poll until the job is completed or failed.

        Raises ConversionTimeoutError with the last seen status once ``timeout``
        seconds have elapsed without reaching a terminal state.
        """
        validate_conversion_id(conversion_id)
        interval = DEFAULT_POLL_INTERVAL if poll_interval is None else poll_interval
        limit = DEFAULT_WAIT_TIMEOUT if timeout is None else timeout
        started = self._clock()

        while True:
            job = await self.get_conversion_status(conversion_id)
            if job.is_terminal:
                logger.info("Conversion %s finished: %s", conversion_id, job.status)
                return job

            elapsed = self._clock() - started
            if elapsed >= limit:
                raise ConversionTimeoutError(
                    f"Conversion timed out after {limit:g}s. Current status: {job.status}",
                    last_status=job.status,
                )

            logger.debug(
                "Conversion %s is %s after %.1fs", conversion_id, job.status, elapsed
            )
            await self._sleep(interval)

    async def download_file(self, conversion_id: str) -> DownloadResult:
        """Fetch the output of a completed conversion."""
        validate_conversion_id(conversion_id)
        job = await self.get_conversion_status(conversion_id)

        if job.status != ConversionStatus.COMPLETED.value:
            message = f"Conversion is not complete. Status: {job.status}"
            if job.error_message:
                message += f". Error: {job.error_message}"
            raise ConversionStateError(message, {"status": job.status})

        if not job.download_url:
            raise ConversionStateError("Download URL not available")

        if job.download_expires_at:
            expires_at = _parse_timestamp(job.download_expires_at)
            if expires_at is not None and expires_at < datetime.now(timezone.utc):
                raise ConversionStateError("Download link has expired")

        response = await self._http.fetch(job.download_url)
        if not response.is_success:
            raise APIError(
                f"Download failed: {response.status_code} {response.reason_phrase}".rstrip(),
                status_code=response.status_code,
            )

        filename = sanitize_filename(
            derive_output_filename(
                response.headers.get("Content-Disposition"),
                job.original_filename,
                job.target_format,
            )
        )
        return DownloadResult(
            data=response.content,
            filename=filename,
            content_type=response.headers.get("Content-Type")
            or "application/octet-stream",
        )

    async def list_conversions(self, page: int = 1, per_page: int = 10) -> ConversionList:
        page, per_page, skip, limit = paginate(page, per_page)
        data = await self._http.request_json(
            "GET", "/convert/list", params={"skip": skip, "limit": limit}
        )
        return ConversionList.from_dict(data or {}, page, per_page)

    async def cancel_conversion(self, conversion_id: str) -> CancelResult:
        """
        Delete a conversion that is not currently processing.

        Remote failures are reported in the result instead of raised.
        """
        validate_conversion_id(conversion_id)
        try:
            job = await self.get_conversion_status(conversion_id)
            if job.status == ConversionStatus.PROCESSING.value:
                return CancelResult(
                    success=False,
                    message="Cannot cancel in-progress conversion. "
                    "Please wait for it to complete or fail.",
                )
            await self._http.request_json("DELETE", f"/convert/{conversion_id}")
        except ConvertEverythingError as e:
            return CancelResult(success=False, message=e.message)

        logger.info("Conversion %s deleted", conversion_id)
        return CancelResult(success=True, message="Conversion deleted successfully")

    async def retry_conversion(
        self, conversion_id: str, new_options: Optional[Dict[str, Any]] = None
    ) -> ConversionJob:
        """
        Explain how to resubmit a failed conversion.

        Source bytes are not retained, so this always raises: either the job
        is not failed, or the error carries resubmission guidance.
        """
        validate_conversion_id(conversion_id)
        job = await self.get_conversion_status(conversion_id)

        if job.status != ConversionStatus.FAILED.value:
            raise ConversionStateError(
                f"Can only retry failed conversions. Current status: {job.status}",
                {"status": job.status},
            )

        raise ConversionStateError(
            f"To retry conversion {conversion_id}, please re-upload the original file "
            f"({job.original_filename}) and convert to {job.target_format} again. "
            f"Original error: {job.error_message or 'Unknown'}",
            {"status": job.status, "new_options": new_options},
        )

    # Local helpers

    async def get_file_info(self, file_path: Union[str, Path]) -> FileInfo:
        real_path = validate_file_path(file_path)
        stat = await asyncio.to_thread(real_path.stat)
        fmt = real_path.suffix.lower().lstrip(".")
        return FileInfo(
            filename=real_path.name,
            size=stat.st_size,
            format=fmt,
            mime_type=guess_mime_type(fmt),
        )

    def estimate_output_size(
        self,
        input_size: int,
        source_format: str,
        target_format: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> SizeEstimate:
        return estimate_output_size(input_size, source_format, target_format, options)
