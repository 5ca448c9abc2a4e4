"""
ConvertEverything MCP server.

Exposes the ConvertEverything file conversion API to MCP hosts as tools,
resources and prompts.
"""

__version__ = "1.2.0"
