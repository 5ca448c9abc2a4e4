"""
MCP tool handlers.

Each handler takes a client and parsed arguments, calls one client operation
and renders the result as text for the model. Errors propagate to the server,
which reports them as tool errors.
"""

import asyncio
import base64
import json
import logging
from pathlib import Path

from ..sdk.client import ConvertEverythingClient
from ..sdk.models import ConversionJob, ConversionStatus
from ..sdk.presets import PRESET_CONFIGS, resolve_options
from ..sdk.validators import validate_save_path
from .models import (
    BatchConvertArgs,
    ConversionIdArgs,
    ConvertBase64Args,
    ConvertFileArgs,
    DownloadFileArgs,
    EstimateOutputSizeArgs,
    FilePathArgs,
    ListConversionsArgs,
    WaitForConversionArgs,
)

logger = logging.getLogger(__name__)

KB = 1024
MB = 1024 * KB
GB = 1024 * MB


def format_size(size: int) -> str:
    """Human-readable byte count."""
    if size < KB:
        return f"{size} bytes"
    if size < MB:
        return f"{size / KB:.1f} KB"
    if size < GB:
        return f"{size / MB:.1f} MB"
    return f"{size / GB:.2f} GB"


def _job_summary(job: ConversionJob) -> str:
    return (
        f"  ID: {job.id}\n"
        f"  Status: {job.status}\n"
        f"  From: {job.source_format} → {job.target_format}\n"
        f"  File: {job.original_filename}\n"
    )


def _limit_text(value) -> str:
    return "Unlimited" if value is None else str(value)


async def handle_get_supported_formats(client: ConvertEverythingClient) -> str:
    formats = await client.get_supported_formats()
    text = f"Supported Formats ({formats.total_formats} total):\n\n"
    for category, values in formats.formats.items():
        if values:
            text += f"{category.upper()}: {', '.join(values)}\n"
    return text


async def handle_get_usage(client: ConvertEverythingClient) -> str:
    usage = await client.get_usage()
    return (
        "API Usage:\n"
        f"  Tier: {usage.tier}\n"
        f"  Daily conversions: {usage.conversions_used} / "
        f"{_limit_text(usage.conversions_limit)}\n"
        f"  Remaining: {_limit_text(usage.conversions_remaining)}\n"
        f"  Max file size: {usage.max_file_size_mb:g} MB\n"
        f"  File retention: {usage.file_retention_hours} hours"
    )


def render_presets(header: str = "Available Presets:") -> str:
    text = f"{header}\n\n"
    for name, config in PRESET_CONFIGS.items():
        text += f"{name}:\n  {config['description']}\n"
        for category, options in config["options"].items():
            text += f"  {category}: {json.dumps(options)}\n"
        text += "\n"
    return text


async def handle_list_presets() -> str:
    return render_presets()


async def handle_convert_file(
    client: ConvertEverythingClient, args: ConvertFileArgs
) -> str:
    job = await client.convert_file(
        args.file_path, args.target_format, options=args.options, preset=args.preset
    )
    text = "Conversion started:\n" + _job_summary(job)
    if args.preset:
        text += f"  Preset: {args.preset}\n"
    text += (
        "\nUse wait_for_conversion to wait for completion, "
        "or get_conversion_status to check progress."
    )
    return text


async def handle_convert_base64(
    client: ConvertEverythingClient, args: ConvertBase64Args
) -> str:
    job = await client.convert_file_buffer(
        args.data,
        args.filename,
        args.target_format,
        options=args.options,
        preset=args.preset,
    )
    text = "Conversion started:\n" + _job_summary(job)
    if args.preset:
        text += f"  Preset: {args.preset}\n"
    return text


async def handle_batch_convert(
    client: ConvertEverythingClient, args: BatchConvertArgs
) -> str:
    result = await client.batch_convert(
        [(f.file_path, f.target_format) for f in args.files],
        options=args.options,
        preset=args.preset,
    )
    succeeded, failed = result.succeeded, result.failed

    text = (
        "Batch conversion started:\n"
        f"  Total: {len(result.items)}\n"
        f"  Started: {len(succeeded)}\n"
        f"  Failed: {len(failed)}\n\n"
    )
    if succeeded:
        text += "Conversions:\n"
        for item in succeeded:
            text += f"  {Path(item.file_path).name} → {item.job.id}\n"
    if failed:
        text += "\nErrors:\n"
        for item in failed:
            text += f"  {Path(item.file_path).name}: {item.error}\n"
    return text


async def handle_get_conversion_status(
    client: ConvertEverythingClient, args: ConversionIdArgs
) -> str:
    job = await client.get_conversion_status(args.conversion_id)
    text = "Conversion Status:\n" + _job_summary(job)
    if job.created_at:
        text += f"  Created: {job.created_at}\n"
    if job.started_at:
        text += f"  Started: {job.started_at}\n"
    if job.completed_at:
        text += f"  Completed: {job.completed_at}\n"
    if job.error_message:
        text += f"  Error: {job.error_message}\n"
    if job.download_url:
        text += "\nFile is ready for download. Use download_file to get the converted file."
        if job.download_expires_at:
            text += f"\nDownload expires: {job.download_expires_at}"
    return text


async def handle_wait_for_conversion(
    client: ConvertEverythingClient, args: WaitForConversionArgs
) -> str:
    job = await client.wait_for_conversion(
        args.conversion_id, poll_interval=args.poll_interval, timeout=args.timeout
    )
    text = f"Conversion {job.status}:\n" + _job_summary(job)
    if job.completed_at:
        text += f"  Completed: {job.completed_at}\n"
    if job.error_message:
        text += f"  Error: {job.error_message}\n"
    if job.status == ConversionStatus.COMPLETED.value:
        text += "\nFile is ready! Use download_file to get the converted file."
    return text


async def handle_download_file(
    client: ConvertEverythingClient, args: DownloadFileArgs
) -> str:
    result = await client.download_file(args.conversion_id)
    size = len(result.data)

    if args.save_path:
        target = validate_save_path(args.save_path, result.filename)
        await asyncio.to_thread(target.write_bytes, result.data)
        logger.info("Saved conversion %s to %s", args.conversion_id, target)
        return f"File saved to: {target}\nSize: {size} bytes\nType: {result.content_type}"

    encoded = base64.b64encode(result.data).decode("ascii")
    return (
        f"Filename: {result.filename}\n"
        f"Size: {size} bytes\n"
        f"Type: {result.content_type}\n"
        f"Data (base64):\n{encoded}"
    )


async def handle_list_conversions(
    client: ConvertEverythingClient, args: ListConversionsArgs
) -> str:
    result = await client.list_conversions(args.page, args.per_page)
    text = (
        f"Recent Conversions (page {result.page}, "
        f"{len(result.conversions)} of {result.total}):\n\n"
    )
    if not result.conversions:
        return text + "No conversions found."

    for job in result.conversions:
        text += f"{job.id}\n"
        text += f"  {job.original_filename}: {job.source_format} → {job.target_format}\n"
        text += f"  Status: {job.status}"
        if job.created_at:
            text += f" | Created: {job.created_at}"
        text += "\n\n"
    return text


async def handle_cancel_conversion(
    client: ConvertEverythingClient, args: ConversionIdArgs
) -> str:
    result = await client.cancel_conversion(args.conversion_id)
    mark = "✓" if result.success else "✗"
    return f"{mark} {result.message}"


async def handle_get_file_info(
    client: ConvertEverythingClient, args: FilePathArgs
) -> str:
    info = await client.get_file_info(args.file_path)
    return (
        "File Information:\n"
        f"  Name: {info.filename}\n"
        f"  Size: {format_size(info.size)} ({info.size} bytes)\n"
        f"  Format: {info.format.upper()}\n"
        f"  MIME Type: {info.mime_type}"
    )


async def handle_estimate_output_size(
    client: ConvertEverythingClient, args: EstimateOutputSizeArgs
) -> str:
    info = await client.get_file_info(args.file_path)
    options = resolve_options(args.target_format, args.preset, args.options)
    estimate = client.estimate_output_size(
        info.size, info.format, args.target_format, options
    )

    text = (
        "Output Size Estimate:\n"
        f"  Input: {format_size(info.size)} ({info.format.upper()})\n"
        f"  Target: {args.target_format.upper()}\n"
        f"  Estimated Output: {format_size(estimate.estimated_size)}\n"
        f"  Confidence: {estimate.confidence}\n"
    )
    if estimate.notes:
        text += f"  Notes: {estimate.notes}"
    return text
