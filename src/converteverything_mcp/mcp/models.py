"""Argument models for MCP tool calls."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolArgs(BaseModel):
    """Base for tool arguments; unexpected keys are ignored."""

    model_config = ConfigDict(extra="ignore")


class NoArgs(ToolArgs):
    pass


class ConvertFileArgs(ToolArgs):
    file_path: str = Field(min_length=1, description="Path to the file to convert")
    target_format: str = Field(
        min_length=1, max_length=10, description="Target format (e.g., 'mp3', 'pdf')"
    )
    options: Optional[Dict[str, Any]] = None
    preset: Optional[str] = None


class ConvertBase64Args(ToolArgs):
    data: str = Field(min_length=1, description="Base64-encoded file data")
    filename: str = Field(min_length=1, max_length=255)
    target_format: str = Field(min_length=1, max_length=10)
    options: Optional[Dict[str, Any]] = None
    preset: Optional[str] = None


class BatchFile(ToolArgs):
    file_path: str = Field(min_length=1)
    target_format: str = Field(min_length=1, max_length=10)


class BatchConvertArgs(ToolArgs):
    files: List[BatchFile] = Field(min_length=1, max_length=50)
    options: Optional[Dict[str, Any]] = None
    preset: Optional[str] = None


class ConversionIdArgs(ToolArgs):
    conversion_id: str = Field(min_length=1)


class WaitForConversionArgs(ConversionIdArgs):
    timeout: Optional[float] = Field(default=None, gt=0, description="Seconds")
    poll_interval: Optional[float] = Field(default=None, gt=0, description="Seconds")


class DownloadFileArgs(ConversionIdArgs):
    save_path: Optional[str] = None


class ListConversionsArgs(ToolArgs):
    page: int = 1
    per_page: int = 10


class FilePathArgs(ToolArgs):
    file_path: str = Field(min_length=1)


class EstimateOutputSizeArgs(ToolArgs):
    file_path: str = Field(min_length=1)
    target_format: str = Field(min_length=1, max_length=10)
    options: Optional[Dict[str, Any]] = None
    preset: Optional[str] = None
