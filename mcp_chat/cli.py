"""Command-line entrypoint for the chat client."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, Optional

import anyio

from .config import ClientConfig, ConfigError, load_config
from .llm_client import CompletionError, OpenAIChatClient
from .mcp_client import McpStdioClient, server_config_for_script
from .orchestrator import Orchestrator, RuntimeConfig

logger = logging.getLogger("MCP_Client")

USAGE = "Usage: mcp-chat <path_to_server_script>"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise argparse.ArgumentTypeError(f"invalid log level {value!r} (choose from {', '.join(LOG_LEVELS)})")
    return level


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mcp-chat", description="Chat REPL that calls MCP server tools")
    parser.add_argument("server_script", nargs="?", default=None, help="Path to the MCP server script (.py or .js)")
    parser.add_argument("--model", default=None)
    parser.add_argument("--followup-model", default=None)
    parser.add_argument("--timeout-s", type=int, default=None)
    parser.add_argument("--max-history", type=int, default=None, help="Message pairs kept in the transcript.")
    parser.add_argument(
        "--log-level",
        type=_log_level,
        default=os.getenv("LOG_LEVEL", "WARNING"),
        help="Diagnostic log level on stderr (env: LOG_LEVEL).",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    if not args.server_script:
        print(USAGE)
        return 0
    try:
        config = load_config(
            openai_model=args.model,
            followup_model=args.followup_model,
            openai_timeout_s=args.timeout_s,
            max_history_pairs=args.max_history,
        )
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return anyio.run(_run_chat, args.server_script, config)


def build_orchestrator(config: ClientConfig) -> Orchestrator:
    llm = OpenAIChatClient(
        config.openai_base_url,
        config.openai_api_key,
        config.openai_model,
        timeout_s=config.openai_timeout_s,
    )
    return Orchestrator(
        RuntimeConfig(
            max_history_pairs=config.max_history_pairs,
            system_prompt=config.system_prompt,
            followup_model=config.followup_model,
        ),
        llm,
        mcp_client=None,  # set after session starts
    )


async def _run_chat(server_script: str, config: ClientConfig) -> int:
    orch = build_orchestrator(config)
    connected = False
    try:
        server_config = server_config_for_script(server_script)
        async with McpStdioClient(server_config) as mcp:
            orch.mcp_client = mcp
            tool_names = await orch.connect_tools()
            connected = True
            print(f"Connected to server with tools: {tool_names}")
            await _repl(orch)
    except Exception:
        if connected:
            logger.exception("MCP session ended with an error")
        else:
            logger.exception("Failed to connect to MCP server")
        return 1
    return 0


def _read_line(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


async def _repl(orch: Orchestrator, read_line: Callable[[str], Optional[str]] = _read_line) -> None:
    print("\nMCP Client Started!")
    print("Type your queries or 'quit' to exit.")
    while True:
        line = await anyio.to_thread.run_sync(read_line, "\nQuery: ")
        if line is None:
            break
        user_text = line.strip()
        if user_text.lower() == "quit":
            break
        if not user_text:
            continue
        try:
            reply = await orch.handle_user_turn(user_text)
        except CompletionError as exc:
            logger.error("Completion failed: %s", exc)
            print(f"\nError: {exc}")
            continue
        print("\n" + reply)
