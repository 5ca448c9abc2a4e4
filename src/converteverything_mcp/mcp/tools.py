"""MCP tool definitions."""

from mcp.types import Tool

from ..sdk.formats import CATEGORIES
from ..sdk.presets import PRESET_NAMES

_PRESET_HELP = "Preset: " + ", ".join(PRESET_NAMES)

_OPTIONS_SCHEMA = {
    "type": "object",
    "description": "Conversion settings (bitrate, quality, crf, etc.)",
}

_CONVERSION_ID_SCHEMA = {"type": "string", "description": "The conversion ID (UUID)"}

_EMPTY_SCHEMA = {"type": "object", "properties": {}, "required": []}


GET_SUPPORTED_FORMATS_TOOL = Tool(
    name="get_supported_formats",
    description=(
        "Get a list of all supported file formats for conversion, organized by "
        f"category ({', '.join(CATEGORIES)})."
    ),
    inputSchema=_EMPTY_SCHEMA,
)

GET_USAGE_TOOL = Tool(
    name="get_usage",
    description=(
        "Get your current API usage statistics and limits. Shows daily conversions "
        "used, daily limit, maximum file size for your tier, and your subscription tier."
    ),
    inputSchema=_EMPTY_SCHEMA,
)

LIST_PRESETS_TOOL = Tool(
    name="list_presets",
    description=(
        "List available conversion presets with their settings. "
        f"Presets: {', '.join(PRESET_NAMES)}."
    ),
    inputSchema=_EMPTY_SCHEMA,
)

CONVERT_FILE_TOOL = Tool(
    name="convert_file",
    description=(
        "Convert a local file from one format to another. Supports 93+ formats. "
        "Use 'preset' for quick settings or 'options' for fine-grained control."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "file_path": {"type": "string", "description": "Path to the file to convert"},
            "target_format": {
                "type": "string",
                "description": "Target format (e.g., 'mp3', 'pdf', 'png')",
            },
            "options": _OPTIONS_SCHEMA,
            "preset": {"type": "string", "enum": list(PRESET_NAMES), "description": _PRESET_HELP},
        },
        "required": ["file_path", "target_format"],
    },
)

CONVERT_BASE64_TOOL = Tool(
    name="convert_base64",
    description=(
        "Convert a file provided as base64-encoded data (a data URL prefix is "
        "accepted). Useful for in-memory files."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "data": {"type": "string", "description": "Base64-encoded file data"},
            "filename": {
                "type": "string",
                "description": "Original filename with extension",
            },
            "target_format": {"type": "string", "description": "Target format"},
            "options": _OPTIONS_SCHEMA,
            "preset": {"type": "string", "enum": list(PRESET_NAMES), "description": _PRESET_HELP},
        },
        "required": ["data", "filename", "target_format"],
    },
)

BATCH_CONVERT_TOOL = Tool(
    name="batch_convert",
    description=(
        "Convert multiple files at once (1 to 50). Provide an array of file paths "
        "and target formats. Returns a conversion ID for each file that was started "
        "and the error for each file that was not."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "files": {
                "type": "array",
                "minItems": 1,
                "maxItems": 50,
                "items": {
                    "type": "object",
                    "properties": {
                        "file_path": {"type": "string"},
                        "target_format": {"type": "string"},
                    },
                    "required": ["file_path", "target_format"],
                },
                "description": "Array of {file_path, target_format} objects",
            },
            "options": _OPTIONS_SCHEMA,
            "preset": {
                "type": "string",
                "enum": list(PRESET_NAMES),
                "description": "Preset to apply to all files",
            },
        },
        "required": ["files"],
    },
)

GET_CONVERSION_STATUS_TOOL = Tool(
    name="get_conversion_status",
    description=(
        "Check the status of a conversion. "
        "Returns: pending, processing, completed, or failed."
    ),
    inputSchema={
        "type": "object",
        "properties": {"conversion_id": _CONVERSION_ID_SCHEMA},
        "required": ["conversion_id"],
    },
)

WAIT_FOR_CONVERSION_TOOL = Tool(
    name="wait_for_conversion",
    description=(
        "Wait for a conversion to complete, polling until done. "
        "Returns the final status when complete or failed."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "conversion_id": _CONVERSION_ID_SCHEMA,
            "timeout": {
                "type": "number",
                "description": "Max wait time in seconds (default: 300)",
            },
            "poll_interval": {
                "type": "number",
                "description": "Poll interval in seconds (default: 2)",
            },
        },
        "required": ["conversion_id"],
    },
)

DOWNLOAD_FILE_TOOL = Tool(
    name="download_file",
    description=(
        "Download a completed conversion. Saves to disk when save_path is given, "
        "otherwise returns the data as base64."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "conversion_id": _CONVERSION_ID_SCHEMA,
            "save_path": {
                "type": "string",
                "description": "Optional file or existing directory to save into",
            },
        },
        "required": ["conversion_id"],
    },
)

LIST_CONVERSIONS_TOOL = Tool(
    name="list_conversions",
    description="List your recent conversions with pagination.",
    inputSchema={
        "type": "object",
        "properties": {
            "page": {"type": "integer", "description": "Page number (default: 1)"},
            "per_page": {
                "type": "integer",
                "description": "Items per page (default: 10, max: 100)",
            },
        },
        "required": [],
    },
)

CANCEL_CONVERSION_TOOL = Tool(
    name="cancel_conversion",
    description=(
        "Cancel and delete a conversion. In-progress conversions cannot be "
        "cancelled; wait for them to complete or fail."
    ),
    inputSchema={
        "type": "object",
        "properties": {"conversion_id": _CONVERSION_ID_SCHEMA},
        "required": ["conversion_id"],
    },
)

GET_FILE_INFO_TOOL = Tool(
    name="get_file_info",
    description=(
        "Get file information including size, format, and MIME type before conversion."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "file_path": {"type": "string", "description": "Path to the file to analyze"},
        },
        "required": ["file_path"],
    },
)

ESTIMATE_OUTPUT_SIZE_TOOL = Tool(
    name="estimate_output_size",
    description=(
        "Estimate the output file size after conversion based on format and options. "
        "This is a heuristic approximation."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "file_path": {"type": "string", "description": "Path to the source file"},
            "target_format": {"type": "string", "description": "Target format"},
            "options": _OPTIONS_SCHEMA,
            "preset": {"type": "string", "enum": list(PRESET_NAMES), "description": _PRESET_HELP},
        },
        "required": ["file_path", "target_format"],
    },
)

TOOLS = [
    GET_SUPPORTED_FORMATS_TOOL,
    GET_USAGE_TOOL,
    LIST_PRESETS_TOOL,
    CONVERT_FILE_TOOL,
    CONVERT_BASE64_TOOL,
    BATCH_CONVERT_TOOL,
    GET_CONVERSION_STATUS_TOOL,
    WAIT_FOR_CONVERSION_TOOL,
    DOWNLOAD_FILE_TOOL,
    LIST_CONVERSIONS_TOOL,
    CANCEL_CONVERSION_TOOL,
    GET_FILE_INFO_TOOL,
    ESTIMATE_OUTPUT_SIZE_TOOL,
]
