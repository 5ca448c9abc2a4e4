"""
MCP server exposing the ConvertEverything API over stdio.

The API client is created lazily on the first call that needs it, from the
settings passed to ``configure``.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, GetPromptResult, Prompt, Resource, TextContent, Tool
from pydantic import ValidationError

from .. import __version__
from ..core.config import Settings
from ..sdk.client import ConvertEverythingClient
from ..sdk.exceptions import ConfigurationError, ConvertEverythingError
from . import handlers
from .models import (
    BatchConvertArgs,
    ConversionIdArgs,
    ConvertBase64Args,
    ConvertFileArgs,
    DownloadFileArgs,
    EstimateOutputSizeArgs,
    FilePathArgs,
    ListConversionsArgs,
    NoArgs,
    ToolArgs,
    WaitForConversionArgs,
)
from .resources import (
    PROMPTS,
    RESOURCES,
    SUBSCRIPTION_URI,
    build_prompt,
    render_static_resource,
    render_subscription,
)
from .tools import TOOLS

SERVER_NAME = "converteverything-mcp"

MISSING_KEY_MESSAGE = (
    "API key required. Use --api-key or set CONVERTEVERYTHING_API_KEY. "
    "Get your key at https://converteverything.io/api-keys"
)

logger = logging.getLogger(__name__)

server = Server(SERVER_NAME, version=__version__)

_settings: Optional[Settings] = None
_client: Optional[ConvertEverythingClient] = None


def configure(settings: Optional[Settings]) -> None:
    """Set startup settings and drop any client built from earlier ones."""
    global _settings, _client
    _settings = settings
    _client = None


def get_client() -> ConvertEverythingClient:
    """Get or create the API client."""
    global _client
    if _client is None:
        if _settings is None or not _settings.api_key:
            raise ConfigurationError(MISSING_KEY_MESSAGE)
        _client = ConvertEverythingClient(_settings.to_client_config())
        logger.info("API client created for %s", _client.config.base_url)
    return _client


async def close_client() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None


# name -> (argument model, handler, needs client)
ToolEntry = Tuple[Type[ToolArgs], Callable[..., Awaitable[str]], bool]

TOOL_HANDLERS: Dict[str, ToolEntry] = {
    "get_supported_formats": (NoArgs, handlers.handle_get_supported_formats, True),
    "get_usage": (NoArgs, handlers.handle_get_usage, True),
    "list_presets": (NoArgs, handlers.handle_list_presets, False),
    "convert_file": (ConvertFileArgs, handlers.handle_convert_file, True),
    "convert_base64": (ConvertBase64Args, handlers.handle_convert_base64, True),
    "batch_convert": (BatchConvertArgs, handlers.handle_batch_convert, True),
    "get_conversion_status": (
        ConversionIdArgs,
        handlers.handle_get_conversion_status,
        True,
    ),
    "wait_for_conversion": (
        WaitForConversionArgs,
        handlers.handle_wait_for_conversion,
        True,
    ),
    "download_file": (DownloadFileArgs, handlers.handle_download_file, True),
    "list_conversions": (ListConversionsArgs, handlers.handle_list_conversions, True),
    "cancel_conversion": (ConversionIdArgs, handlers.handle_cancel_conversion, True),
    "get_file_info": (FilePathArgs, handlers.handle_get_file_info, True),
    "estimate_output_size": (
        EstimateOutputSizeArgs,
        handlers.handle_estimate_output_size,
        True,
    ),
}


def format_validation_error(error: ValidationError) -> str:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
        for err in error.errors()
    )
    return f"Invalid arguments: {problems}"


def _error_result(message: str) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=f"Error: {message}")], isError=True
    )


@server.list_tools()
async def list_tools() -> list[Tool]:
    return TOOLS


@server.call_tool()
async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
    """Dispatch a tool call; failures come back as an error result, never raised."""
    entry = TOOL_HANDLERS.get(name)
    if entry is None:
        return _error_result(f"Unknown tool: {name}")

    model, handler, needs_client = entry
    try:
        args = model.model_validate(arguments or {})
        call_args = [] if model is NoArgs else [args]
        if needs_client:
            call_args.insert(0, get_client())
        text = await handler(*call_args)
    except ValidationError as e:
        return _error_result(format_validation_error(e))
    except ConvertEverythingError as e:
        logger.info("Tool %s failed: %s", name, e.message)
        return _error_result(e.message)
    except OSError as e:
        logger.warning("Tool %s failed on local I/O: %s", name, e)
        return _error_result(str(e))

    return CallToolResult(content=[TextContent(type="text", text=text)])


@server.list_resources()
async def list_resources() -> list[Resource]:
    return RESOURCES


@server.read_resource()
async def read_resource(uri) -> list[ReadResourceContents]:
    """Render a resource as plain text; subscription info is fetched live."""
    uri_text = str(uri).rstrip("/")

    if uri_text == SUBSCRIPTION_URI:
        try:
            usage = await get_client().get_usage()
            text = render_subscription(usage)
        except ConvertEverythingError as e:
            text = f"Error fetching subscription info: {e.message}"
    else:
        text = render_static_resource(uri_text)
        if text is None:
            raise ValueError(f"Unknown resource: {uri_text}")

    return [ReadResourceContents(content=text, mime_type="text/plain")]


@server.list_prompts()
async def list_prompts() -> list[Prompt]:
    return PROMPTS


@server.get_prompt()
async def get_prompt(
    name: str, arguments: Optional[Dict[str, str]] = None
) -> GetPromptResult:
    return build_prompt(name, arguments)


async def run_stdio(settings: Settings) -> None:
    """Serve over stdin/stdout until the host disconnects."""
    configure(settings)
    logger.info("ConvertEverything MCP server v%s running on stdio", __version__)
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )
    finally:
        await close_client()
