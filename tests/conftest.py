"""Pytest configuration and fixtures"""

from unittest.mock import Mock

import pytest

from managers.color_sources import StaticPaletteSource
from mcp_chat.llm_client import CompletionReply, ToolCall
from mcp_chat.mcp_client import ToolOutput
from mcp_chat.orchestrator import Orchestrator, RuntimeConfig
from mcp_chat.tool_registry import ToolDescriptor


COLOR_TOOL_SCHEMA = {
    "type": "object",
    "properties": {
        "mood": {"type": "string", "description": "User's mood"},
        "count": {"type": "integer", "minimum": 1, "default": 1, "description": "How many colors to return"},
    },
    "required": ["mood"],
}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def static_source():
    return StaticPaletteSource()


@pytest.fixture
def color_tool():
    return ToolDescriptor(
        name="get-colors-for-mood",
        description="Gets colors for a mood",
        input_schema=COLOR_TOOL_SCHEMA,
    )


class FakeMcpClient:
    """In-process stand-in for a connected MCP server."""

    def __init__(self, tools, source=None):
        self.tools = list(tools)
        self.source = source or StaticPaletteSource()
        self.calls = []

    async def list_tools(self):
        return self.tools

    async def call_tool(self, name, arguments=None):
        self.calls.append((name, arguments))
        args = arguments or {}
        return ToolOutput(text=self.source.get_colors(args["mood"], args.get("count", 1)))


@pytest.fixture
def fake_mcp(color_tool, static_source):
    return FakeMcpClient([color_tool], static_source)


@pytest.fixture
def llm():
    return Mock()


@pytest.fixture
def orchestrator(llm, fake_mcp):
    return Orchestrator(RuntimeConfig(max_history_pairs=10), llm, fake_mcp)


def text_reply(content):
    return CompletionReply(content=content)


def tool_reply(*calls, content=None):
    return CompletionReply(
        content=content,
        tool_calls=[ToolCall(id=f"call_{i}", name=name, arguments=args) for i, (name, args) in enumerate(calls)],
    )
