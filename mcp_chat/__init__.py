"""Chat client that routes model tool calls to an MCP server."""
