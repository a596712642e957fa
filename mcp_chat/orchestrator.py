"""Core tool-calling turn loop."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

import anyio

from .conversation import Transcript
from .llm_client import CompletionReply, OpenAIChatClient, ToolCall
from .mcp_client import ToolOutput
from .tool_registry import ToolDescriptor, ToolRegistry, parse_tool_arguments

logger = logging.getLogger("MCP_Client")


@dataclass(frozen=True)
class RuntimeConfig:
    max_history_pairs: int = 10
    system_prompt: str = "You are a helpful assistant."
    followup_model: Optional[str] = None


class McpClient(Protocol):
    async def list_tools(self) -> List[ToolDescriptor]:
        ...

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolOutput:
        ...


@dataclass(frozen=True)
class InitialPass:
    """Outcome of the first completion request of a turn."""
    reply: CompletionReply
    tool_call: Optional[ToolCall] = None
    dropped_calls: List[ToolCall] = field(default_factory=list)

    @classmethod
    def from_reply(cls, reply: CompletionReply) -> "InitialPass":
        if not reply.tool_calls:
            return cls(reply)
        first, *rest = reply.tool_calls
        return cls(reply, first, list(rest))


@dataclass
class TurnOutput:
    lines: List[str] = field(default_factory=list)

    def add(self, text: Optional[str]) -> None:
        if text:
            self.lines.append(text)

    def render(self) -> str:
        return "\n".join(self.lines)


class Orchestrator:
    def __init__(
        self,
        config: RuntimeConfig,
        llm_client: OpenAIChatClient,
        mcp_client: McpClient | None,
    ) -> None:
        self.config = config
        self.llm_client = llm_client
        self.mcp_client = mcp_client
        self.transcript = Transcript(config.system_prompt)
        self.tools = ToolRegistry()
        self.last_turn_events: List[Dict[str, object]] = []

    async def connect_tools(self) -> List[str]:
        """Discover the server's tools; the list is fixed for the session."""
        if not self.mcp_client:
            raise RuntimeError("MCP client not initialized")
        self.tools = ToolRegistry(await self.mcp_client.list_tools())
        return self.tools.names

    async def handle_user_turn(self, user_text: str) -> str:
        if not self.mcp_client:
            raise RuntimeError("MCP client not initialized")

        self.last_turn_events = []
        before_len = len(self.transcript)
        output = TurnOutput()
        self.transcript.append("user", user_text)
        try:
            initial = await self._request_initial()
            self._record_text(initial.reply.content, output)
            if initial.tool_call is not None:
                await self._run_tool_call(initial.tool_call, output)
                followup = await self._request_followup()
                self._record_text(followup.content, output)
        except BaseException:
            self.transcript.rollback(before_len)
            raise

        self.transcript.trim(self.config.max_history_pairs)
        return output.render()

    async def _request_initial(self) -> InitialPass:
        reply = await self._complete(self.tools.to_openai() or None, None)
        initial = InitialPass.from_reply(reply)
        for dropped in initial.dropped_calls:
            logger.warning("Ignoring additional tool call %s (%s); only the first call is executed", dropped.name, dropped.id)
        return initial

    async def _request_followup(self) -> CompletionReply:
        # No tool list: the follow-up must answer in text.
        return await self._complete(None, self.config.followup_model)

    async def _complete(self, tools: Optional[List[Dict[str, Any]]], model: Optional[str]) -> CompletionReply:
        messages = self.transcript.snapshot()
        start_time = time.perf_counter()
        reply = await anyio.to_thread.run_sync(
            lambda: self.llm_client.chat(messages, tools=tools, model=model)
        )
        llm_ms = (time.perf_counter() - start_time) * 1000.0
        self.last_turn_events.append(
            {
                "type": "llm_output",
                "content": reply.content,
                "tool_calls": [call.name for call in reply.tool_calls],
                "with_tools": bool(tools),
                "duration_ms": llm_ms,
            }
        )
        return reply

    async def _run_tool_call(self, call: ToolCall, output: TurnOutput) -> None:
        result_text, args = await self._invoke(call)
        output.add(f"[Calling tool {call.name} with args {json.dumps(args)}]")
        self.transcript.append("assistant", "", tool_calls=[call.to_message()])
        self.transcript.append("tool", result_text, tool_call_id=call.id)

    async def _invoke(self, call: ToolCall) -> tuple[str, Dict[str, Any]]:
        try:
            raw_args = parse_tool_arguments(call.arguments)
        except ValueError as exc:
            logger.warning("Malformed arguments for tool %s: %s", call.name, exc)
            self.last_turn_events.append({"type": "validation_error", "tool": call.name, "error": str(exc)})
            return f"Error: invalid arguments: {exc}", {}

        validation = self.tools.validate(call.name, raw_args)
        if not validation.ok:
            logger.warning("Rejected tool call %s: %s", call.name, validation.error)
            self.last_turn_events.append({"type": "validation_error", "tool": call.name, "error": validation.error})
            return f"Error: {validation.error}", raw_args

        args = validation.arguments
        start_time = time.perf_counter()
        try:
            result = await self.mcp_client.call_tool(call.name, args)
        except Exception as exc:
            logger.exception("Tool %s failed", call.name)
            self.last_turn_events.append({"type": "tool_error", "tool": call.name, "error": str(exc)})
            return f"Error: {exc}", args
        tool_ms = (time.perf_counter() - start_time) * 1000.0
        self.last_turn_events.append(
            {
                "type": "tool_call",
                "tool": call.name,
                "args": args,
                "is_error": result.is_error,
                "duration_ms": tool_ms,
            }
        )
        if result.is_error:
            return f"Error: {result.text}", args
        return result.text, args

    def _record_text(self, text: Optional[str], output: TurnOutput) -> None:
        if not text:
            return
        self.transcript.append("assistant", text)
        output.add(text)
