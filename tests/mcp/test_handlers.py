"""Tests for MCP tool handlers."""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest

from converteverything_mcp.mcp.handlers import (
    format_size,
    handle_batch_convert,
    handle_cancel_conversion,
    handle_convert_file,
    handle_download_file,
    handle_estimate_output_size,
    handle_get_conversion_status,
    handle_get_file_info,
    handle_get_supported_formats,
    handle_get_usage,
    handle_list_conversions,
    handle_list_presets,
    handle_wait_for_conversion,
)
from converteverything_mcp.mcp.models import (
    BatchConvertArgs,
    ConversionIdArgs,
    ConvertFileArgs,
    DownloadFileArgs,
    EstimateOutputSizeArgs,
    FilePathArgs,
    ListConversionsArgs,
    WaitForConversionArgs,
)
from converteverything_mcp.sdk.exceptions import InvalidInputError
from converteverything_mcp.sdk.models import (
    BatchItem,
    BatchResult,
    CancelResult,
    ConversionJob,
    ConversionList,
    DownloadResult,
    SupportedFormats,
    UsageInfo,
)
from tests.helpers.network import JOB_ID, OTHER_JOB_ID, job_payload


def make_job(**overrides):
    return ConversionJob.from_dict(job_payload(**overrides))


@pytest.fixture
def mock_client():
    """MagicMock standing in for ConvertEverythingClient."""
    client = MagicMock()
    for name in (
        "get_supported_formats",
        "get_usage",
        "convert_file",
        "convert_file_buffer",
        "batch_convert",
        "get_conversion_status",
        "wait_for_conversion",
        "download_file",
        "list_conversions",
        "cancel_conversion",
        "get_file_info",
    ):
        setattr(client, name, AsyncMock())
    return client


@pytest.mark.unit
class TestFormatSize:
    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 bytes"),
            (1023, "1023 bytes"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (3 * 1024**3, "3.00 GB"),
        ],
    )
    def test_units(self, size, expected):
        assert format_size(size) == expected


@pytest.mark.unit
class TestAccountHandlers:
    @pytest.mark.asyncio
    async def test_supported_formats(self, mock_client):
        mock_client.get_supported_formats.return_value = SupportedFormats(
            formats={"audio": ["mp3", "wav"], "video": []}, total_formats=2
        )

        text = await handle_get_supported_formats(mock_client)

        assert text.startswith("Supported Formats (2 total):")
        assert "AUDIO: mp3, wav" in text
        assert "VIDEO" not in text

    @pytest.mark.asyncio
    async def test_usage_unlimited(self, mock_client):
        mock_client.get_usage.return_value = UsageInfo(
            tier="enterprise",
            conversions_used=12,
            conversions_limit=None,
            conversions_remaining=None,
            max_file_size_mb=10240,
            file_retention_hours=168,
        )

        text = await handle_get_usage(mock_client)

        assert "Tier: enterprise" in text
        assert "Daily conversions: 12 / Unlimited" in text
        assert "Remaining: Unlimited" in text
        assert "Max file size: 10240 MB" in text

    @pytest.mark.asyncio
    async def test_list_presets(self):
        text = await handle_list_presets()

        assert text.startswith("Available Presets:")
        assert "web-optimized:" in text
        assert '"bitrate": "128k"' in text


@pytest.mark.unit
class TestSubmissionHandlers:
    @pytest.mark.asyncio
    async def test_convert_file(self, mock_client):
        mock_client.convert_file.return_value = make_job()
        args = ConvertFileArgs(
            file_path="/music/song.wav", target_format="mp3", preset="web-optimized"
        )

        text = await handle_convert_file(mock_client, args)

        mock_client.convert_file.assert_awaited_once_with(
            "/music/song.wav", "mp3", options=None, preset="web-optimized"
        )
        assert text.startswith("Conversion started:")
        assert f"ID: {JOB_ID}" in text
        assert "From: wav → mp3" in text
        assert "Preset: web-optimized" in text
        assert "wait_for_conversion" in text

    @pytest.mark.asyncio
    async def test_batch_summary(self, mock_client):
        mock_client.batch_convert.return_value = BatchResult(
            items=[
                BatchItem("/a/one.wav", "mp3", job=make_job()),
                BatchItem("/a/two.wav", "mp3", error="File not found: /a/two.wav"),
                BatchItem("/a/three.wav", "flac", job=make_job(id=OTHER_JOB_ID)),
            ]
        )
        args = BatchConvertArgs(
            files=[
                {"file_path": "/a/one.wav", "target_format": "mp3"},
                {"file_path": "/a/two.wav", "target_format": "mp3"},
                {"file_path": "/a/three.wav", "target_format": "flac"},
            ]
        )

        text = await handle_batch_convert(mock_client, args)

        files = mock_client.batch_convert.await_args.args[0]
        assert files[1] == ("/a/two.wav", "mp3")
        assert "Total: 3" in text
        assert "Started: 2" in text
        assert "Failed: 1" in text
        assert f"one.wav → {JOB_ID}" in text
        assert "two.wav: File not found" in text


@pytest.mark.unit
class TestLifecycleHandlers:
    @pytest.mark.asyncio
    async def test_status_with_download(self, mock_client):
        mock_client.get_conversion_status.return_value = make_job(
            status="completed",
            completed_at="2026-01-01T10:01:00Z",
            download_url="https://cdn.test/x",
            download_expires_at="2026-01-02T10:01:00Z",
        )

        text = await handle_get_conversion_status(
            mock_client, ConversionIdArgs(conversion_id=JOB_ID)
        )

        assert "Status: completed" in text
        assert "Completed: 2026-01-01T10:01:00Z" in text
        assert "ready for download" in text
        assert "Download expires: 2026-01-02T10:01:00Z" in text

    @pytest.mark.asyncio
    async def test_status_failed(self, mock_client):
        mock_client.get_conversion_status.return_value = make_job(
            status="failed", error_message="Unsupported codec"
        )

        text = await handle_get_conversion_status(
            mock_client, ConversionIdArgs(conversion_id=JOB_ID)
        )

        assert "Error: Unsupported codec" in text
        assert "download_file" not in text

    @pytest.mark.asyncio
    async def test_wait_passes_timing(self, mock_client):
        mock_client.wait_for_conversion.return_value = make_job(status="completed")
        args = WaitForConversionArgs(conversion_id=JOB_ID, timeout=60, poll_interval=5)

        text = await handle_wait_for_conversion(mock_client, args)

        mock_client.wait_for_conversion.assert_awaited_once_with(
            JOB_ID, poll_interval=5, timeout=60
        )
        assert text.startswith("Conversion completed:")
        assert "File is ready!" in text

    @pytest.mark.asyncio
    async def test_download_inline_base64(self, mock_client):
        mock_client.download_file.return_value = DownloadResult(
            data=b"ID3audio", filename="song.mp3", content_type="audio/mpeg"
        )

        text = await handle_download_file(
            mock_client, DownloadFileArgs(conversion_id=JOB_ID)
        )

        assert "Filename: song.mp3" in text
        assert "Size: 8 bytes" in text
        assert text.endswith(base64.b64encode(b"ID3audio").decode())

    @pytest.mark.asyncio
    async def test_download_to_directory(self, mock_client, tmp_path):
        mock_client.download_file.return_value = DownloadResult(
            data=b"ID3audio", filename="song.mp3", content_type="audio/mpeg"
        )

        text = await handle_download_file(
            mock_client, DownloadFileArgs(conversion_id=JOB_ID, save_path=str(tmp_path))
        )

        saved = tmp_path / "song.mp3"
        assert saved.read_bytes() == b"ID3audio"
        assert text.startswith(f"File saved to: {saved}")

    @pytest.mark.asyncio
    async def test_download_to_explicit_file(self, mock_client, tmp_path):
        mock_client.download_file.return_value = DownloadResult(
            data=b"ID3", filename="song.mp3", content_type="audio/mpeg"
        )
        target = tmp_path / "renamed.mp3"

        await handle_download_file(
            mock_client, DownloadFileArgs(conversion_id=JOB_ID, save_path=str(target))
        )

        assert target.read_bytes() == b"ID3"

    @pytest.mark.asyncio
    async def test_download_traversal_rejected(self, mock_client, tmp_path):
        mock_client.download_file.return_value = DownloadResult(
            data=b"ID3", filename="song.mp3", content_type="audio/mpeg"
        )

        with pytest.raises(InvalidInputError, match="directory traversal"):
            await handle_download_file(
                mock_client,
                DownloadFileArgs(
                    conversion_id=JOB_ID, save_path=f"{tmp_path}/../escape.mp3"
                ),
            )

    @pytest.mark.asyncio
    async def test_list_conversions(self, mock_client):
        mock_client.list_conversions.return_value = ConversionList(
            conversions=[make_job(status="completed")], total=1, page=1, per_page=10
        )

        text = await handle_list_conversions(mock_client, ListConversionsArgs())

        mock_client.list_conversions.assert_awaited_once_with(1, 10)
        assert "Recent Conversions (page 1, 1 of 1)" in text
        assert "song.wav: wav → mp3" in text
        assert "Status: completed | Created: 2026-01-01T10:00:00Z" in text

    @pytest.mark.asyncio
    async def test_list_conversions_empty(self, mock_client):
        mock_client.list_conversions.return_value = ConversionList(
            conversions=[], total=0, page=3, per_page=10
        )

        text = await handle_list_conversions(mock_client, ListConversionsArgs(page=3))

        assert text.endswith("No conversions found.")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("success,mark", [(True, "✓"), (False, "✗")])
    async def test_cancel(self, mock_client, success, mark):
        mock_client.cancel_conversion.return_value = CancelResult(success, "Done")

        text = await handle_cancel_conversion(
            mock_client, ConversionIdArgs(conversion_id=JOB_ID)
        )

        assert text == f"{mark} Done"


@pytest.mark.unit
class TestLocalHandlers:
    @pytest.mark.asyncio
    async def test_file_info(self, client, wav_file):
        text = await handle_get_file_info(client, FilePathArgs(file_path=str(wav_file)))

        assert "Name: song.wav" in text
        assert "Size: 64 bytes (64 bytes)" in text
        assert "Format: WAV" in text
        assert "MIME Type: audio/wav" in text

    @pytest.mark.asyncio
    async def test_estimate_uses_preset(self, client, api, tmp_path):
        source = tmp_path / "big.wav"
        source.write_bytes(b"\x00" * 1_400_000)
        args = EstimateOutputSizeArgs(
            file_path=str(source), target_format="mp3", preset="smallest-size"
        )

        text = await handle_estimate_output_size(client, args)

        assert "Input: 1.3 MB (WAV)" in text
        assert "Target: MP3" in text
        assert "Estimated Output: 62.5 KB" in text
        assert "Confidence: high" in text
        assert "Notes: Based on 64k bitrate" in text
        assert api.requests == []
