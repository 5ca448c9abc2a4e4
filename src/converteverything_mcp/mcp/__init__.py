"""MCP adapter: tools, resources and prompts over the ConvertEverything client."""
