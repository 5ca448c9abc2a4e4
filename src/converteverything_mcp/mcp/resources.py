"""MCP resources and prompt templates."""

from typing import Dict, Optional

from mcp.types import GetPromptResult, Prompt, PromptArgument, PromptMessage, Resource, TextContent

from ..sdk.formats import CATEGORIES, FORMAT_CATEGORY_DESCRIPTIONS, get_formats_by_category
from ..sdk.models import UsageInfo
from .handlers import render_presets

URI_SCHEME = "converteverything://"
FORMATS_URI = f"{URI_SCHEME}formats"
PRESETS_URI = f"{URI_SCHEME}presets"
SUBSCRIPTION_URI = f"{URI_SCHEME}subscription"
CATEGORY_URI_PREFIX = f"{FORMATS_URI}/"

PRICING_URL = "https://converteverything.io/pricing"

RESOURCES = [
    Resource(
        uri=FORMATS_URI,
        name="Supported Formats",
        description="Complete list of all 93+ supported file formats by category",
        mimeType="text/plain",
    ),
    *[
        Resource(
            uri=f"{CATEGORY_URI_PREFIX}{category}",
            name=f"{category.capitalize()} Formats",
            description=f"Supported {category} formats: "
            + ", ".join(get_formats_by_category(category)[:5])
            + ", etc.",
            mimeType="text/plain",
        )
        for category in ("audio", "video", "image", "document")
    ],
    Resource(
        uri=PRESETS_URI,
        name="Conversion Presets",
        description="Available presets: web-optimized, high-quality, smallest-size, etc.",
        mimeType="text/plain",
    ),
    Resource(
        uri=SUBSCRIPTION_URI,
        name="Subscription Info",
        description="Your current subscription tier, limits, and usage",
        mimeType="text/plain",
    ),
]


def render_all_formats() -> str:
    text = "SUPPORTED FORMATS (93+ total)\n\n"
    for category in CATEGORIES:
        text += f"{category.upper()}: {', '.join(get_formats_by_category(category))}\n"
        text += f"  {FORMAT_CATEGORY_DESCRIPTIONS[category]}\n\n"
    return text


def render_category(category: str) -> str:
    if category not in FORMAT_CATEGORY_DESCRIPTIONS:
        raise ValueError(f"Unknown format category: {category}")
    return (
        f"{category.upper()} FORMATS\n\n"
        f"{FORMAT_CATEGORY_DESCRIPTIONS[category]}\n\n"
        f"Formats: {', '.join(get_formats_by_category(category))}\n"
    )


def render_subscription(usage: UsageInfo) -> str:
    limit = "Unlimited" if usage.conversions_limit is None else usage.conversions_limit
    remaining = (
        "Unlimited"
        if usage.conversions_remaining is None
        else usage.conversions_remaining
    )
    return (
        "SUBSCRIPTION INFO\n\n"
        f"Tier: {usage.tier.upper()}\n\n"
        "Daily Conversions:\n"
        f"  Used: {usage.conversions_used}\n"
        f"  Limit: {limit}\n"
        f"  Remaining: {remaining}\n\n"
        f"Max File Size: {usage.max_file_size_mb:g} MB\n"
        f"File Retention: {usage.file_retention_hours} hours\n\n"
        f"Upgrade: {PRICING_URL}"
    )


def render_static_resource(uri: str) -> Optional[str]:
    """Text for resources that need no API call; None if ``uri`` is not one."""
    if uri == FORMATS_URI:
        return render_all_formats()
    if uri == PRESETS_URI:
        return render_presets("CONVERSION PRESETS")
    if uri.startswith(CATEGORY_URI_PREFIX):
        return render_category(uri[len(CATEGORY_URI_PREFIX):])
    return None


# Prompts

PROMPTS = [
    Prompt(
        name="convert-for-web",
        description="Convert files to web-optimized formats",
        arguments=[
            PromptArgument(
                name="file_path",
                description="Path to the file or folder to convert",
                required=True,
            ),
        ],
    ),
    Prompt(
        name="batch-convert-folder",
        description="Convert all files in a folder to a target format",
        arguments=[
            PromptArgument(
                name="folder_path",
                description="Path to the folder containing files",
                required=True,
            ),
            PromptArgument(
                name="target_format",
                description="Target format for all files",
                required=True,
            ),
        ],
    ),
    Prompt(
        name="optimize-images",
        description="Optimize images for web or print",
        arguments=[
            PromptArgument(
                name="file_path",
                description="Path to the image or folder of images",
                required=True,
            ),
            PromptArgument(
                name="purpose",
                description="Purpose: 'web' for smaller files, 'print' for high quality",
                required=False,
            ),
        ],
    ),
    Prompt(
        name="convert-video-for-streaming",
        description="Convert video to streaming-friendly format (MP4/WebM)",
        arguments=[
            PromptArgument(
                name="file_path", description="Path to the video file", required=True
            ),
            PromptArgument(
                name="quality",
                description="Quality level: 'low', 'medium', 'high'",
                required=False,
            ),
        ],
    ),
    Prompt(
        name="document-to-pdf",
        description="Convert documents to PDF format",
        arguments=[
            PromptArgument(
                name="file_path", description="Path to the document file", required=True
            ),
            PromptArgument(
                name="quality",
                description="PDF quality: 'screen', 'ebook', 'printer', 'prepress'",
                required=False,
            ),
        ],
    ),
]

_PROMPTS_BY_NAME = {prompt.name: prompt for prompt in PROMPTS}

VIDEO_CRF_BY_QUALITY = {"high": 18, "medium": 23, "low": 28}


def _prompt_text(name: str, args: Dict[str, str]) -> str:
    if name == "convert-for-web":
        return (
            f'I need to convert the file at "{args["file_path"]}" to a web-optimized format.\n\n'
            "Please:\n"
            "1. First use get_file_info to check the file details\n"
            "2. Determine the best web format (e.g., JPG/WebP for images, MP4 for video, "
            "MP3 for audio)\n"
            '3. Use the "web-optimized" preset for optimal web delivery\n'
            "4. Convert the file and let me know when it's ready"
        )

    if name == "batch-convert-folder":
        target = args["target_format"]
        return (
            f'Please convert all files in the folder "{args["folder_path"]}" '
            f"to {target} format.\n\n"
            "Steps:\n"
            "1. List all files in the folder\n"
            "2. Filter for convertible files\n"
            f"3. Use batch_convert to convert them all to {target}\n"
            "4. Report the results when complete"
        )

    if name == "optimize-images":
        purpose = args.get("purpose") or "web"
        preset = "print-ready" if purpose == "print" else "web-optimized"
        return (
            f'Optimize the images at "{args["file_path"]}" for {purpose} use.\n\n'
            "Please:\n"
            "1. Check the image(s) using get_file_info\n"
            f'2. Use the "{preset}" preset\n'
            "3. Convert to the appropriate format (WebP/JPG for web, PNG/TIFF for print)\n"
            "4. Report the size savings"
        )

    if name == "convert-video-for-streaming":
        quality = args.get("quality") or "medium"
        crf = VIDEO_CRF_BY_QUALITY.get(quality, VIDEO_CRF_BY_QUALITY["medium"])
        return (
            f'Convert the video at "{args["file_path"]}" to MP4 format optimized '
            "for streaming.\n\n"
            "Requirements:\n"
            "1. Get the video file info first\n"
            f"2. Convert to MP4 with CRF {crf} ({quality} quality)\n"
            '3. Use the "fast" preset for quicker encoding\n'
            "4. Wait for completion and report the result"
        )

    # document-to-pdf
    pdf_quality = args.get("quality") or "ebook"
    return (
        f'Convert the document at "{args["file_path"]}" to PDF format.\n\n'
        "Settings:\n"
        f'1. Use PDF quality: "{pdf_quality}"\n'
        "2. Convert to PDF\n"
        "3. Report when complete with the file size"
    )


def build_prompt(name: str, arguments: Optional[Dict[str, str]] = None) -> GetPromptResult:
    """Render a prompt template; raises ValueError for unknown prompts or missing arguments."""
    prompt = _PROMPTS_BY_NAME.get(name)
    if prompt is None:
        raise ValueError(f"Unknown prompt: {name}")

    args = dict(arguments or {})
    for argument in prompt.arguments or []:
        if argument.required and not args.get(argument.name):
            raise ValueError(f"Missing required argument: {argument.name}")

    return GetPromptResult(
        description=prompt.description,
        messages=[
            PromptMessage(
                role="user",
                content=TextContent(type="text", text=_prompt_text(name, args)),
            )
        ],
    )
