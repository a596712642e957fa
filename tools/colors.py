"""Color tools for the MCP server"""

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from managers.color_sources import ColorSource

logger = logging.getLogger("MCP_Server")

TOOL_NAME = "get-colors-for-mood"


def register_color_tools(mcp: FastMCP, source: ColorSource):
    """Register the mood color tool on an MCP server."""

    @mcp.tool(name=TOOL_NAME, description="Gets colors for a mood")
    def get_colors_for_mood(
        mood: Annotated[str, Field(description="User's mood")],
        count: Annotated[int, Field(ge=1, description="How many colors to return")] = 1,
    ) -> str:
        logger.info(f"get-colors-for-mood called: mood={mood!r}, count={count}")
        return source.get_colors(mood, count)
