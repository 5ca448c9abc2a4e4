import argparse
import asyncio
import sys

from . import __version__
from .core.config import Settings, get_settings
from .mcp.server import run_stdio
from .sdk.config import setup_logging

PROG = "converteverything-mcp"

EPILOG = """\
environment variables:
  CONVERTEVERYTHING_API_KEY     API key (alternative to --api-key)
  CONVERTEVERYTHING_BASE_URL    Base URL (alternative to --base-url)

get an API key:
  1. Sign up at https://converteverything.io/register
  2. Subscribe to a paid plan
  3. Create a key at https://converteverything.io/api-keys
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="MCP server for ConvertEverything.io - convert files between 93+ formats",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-k", "--api-key", help="ConvertEverything.io API key")
    parser.add_argument(
        "-u", "--base-url", help="Custom API URL (default: https://converteverything.io)"
    )
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "-v", "--version", action="version", version=f"{PROG} v{__version__}"
    )
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command line flags win over environment and .env values."""
    updates = {}
    if args.api_key:
        updates["api_key"] = args.api_key
    if args.base_url:
        updates["base_url"] = args.base_url
    if args.timeout:
        updates["timeout_seconds"] = args.timeout
    if args.debug:
        updates["debug"] = True
    return settings.model_copy(update=updates) if updates else settings


def main():
    args = build_parser().parse_args()
    settings = apply_overrides(get_settings(), args)

    setup_logging(settings.effective_log_level)

    if not settings.api_key:
        print(
            "Warning: no API key configured. Use --api-key or set "
            "CONVERTEVERYTHING_API_KEY; tools that call the API will fail.",
            file=sys.stderr,
        )

    try:
        asyncio.run(run_stdio(settings))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
