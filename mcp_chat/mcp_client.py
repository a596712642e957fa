"""MCP client wrappers (stdio)."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
import sys
from typing import Any, Dict, List, Optional

from mcp.client.session import ClientSession
from mcp.client.stdio import StdioServerParameters, stdio_client
from mcp.types import CallToolResult, TextContent

from .tool_registry import ToolDescriptor


@dataclass(frozen=True)
class McpServerConfig:
    command: str
    args: list[str]
    env: Optional[dict[str, str]] = None
    cwd: Optional[str] = None


@dataclass(frozen=True)
class ToolOutput:
    text: str
    is_error: bool = False


def server_config_for_script(script_path: str, env: Optional[Dict[str, str]] = None) -> McpServerConfig:
    """Pick the interpreter for a server script by its extension."""
    is_py = script_path.endswith(".py")
    is_js = script_path.endswith(".js")
    if not is_py and not is_js:
        raise ValueError("Server script must be a .js or .py file")
    command = sys.executable if is_py else "node"
    cwd = os.path.dirname(os.path.abspath(script_path))
    return McpServerConfig(command=command, args=[script_path], env=env, cwd=cwd)


class McpToolClient:
    """Tool discovery and invocation over an initialized MCP session."""

    def __init__(self, session: Optional[ClientSession] = None):
        self._session = session

    def _require_session(self) -> ClientSession:
        if not self._session:
            raise RuntimeError("MCP session not initialized")
        return self._session

    async def list_tools(self) -> List[ToolDescriptor]:
        result = await self._require_session().list_tools()
        return [
            ToolDescriptor(
                name=tool.name,
                description=tool.description or "",
                input_schema=dict(tool.inputSchema or {}),
            )
            for tool in result.tools
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolOutput:
        result = await self._require_session().call_tool(name=name, arguments=arguments or {})
        return ToolOutput(text=_content_to_text(result), is_error=bool(result.isError))


class McpStdioClient(McpToolClient):
    def __init__(self, config: McpServerConfig):
        super().__init__()
        self._config = config
        self._streams = None
        self._session_cm: Optional[ClientSession] = None

    async def __aenter__(self) -> "McpStdioClient":
        params = StdioServerParameters(
            command=self._config.command,
            args=self._config.args,
            env=self._config.env,
            cwd=self._config.cwd,
        )
        self._streams = stdio_client(params, errlog=sys.stderr)
        read_stream, write_stream = await self._streams.__aenter__()
        try:
            self._session_cm = ClientSession(read_stream, write_stream)
            self._session = await self._session_cm.__aenter__()
            await self._session.initialize()
        except BaseException:
            await self.__aexit__(*sys.exc_info())
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session_cm:
            await self._session_cm.__aexit__(exc_type, exc, tb)
        if self._streams:
            await self._streams.__aexit__(exc_type, exc, tb)
        self._session = None
        self._session_cm = None
        self._streams = None


def _content_to_text(result: CallToolResult) -> str:
    parts = []
    for block in result.content:
        if isinstance(block, TextContent):
            parts.append(block.text)
        elif hasattr(block, "text"):
            parts.append(str(block.text))
    return "\n".join(parts).strip()
