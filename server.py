"""Mood colors MCP server (stdio)."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from managers.color_sources import DEFAULT_WEBHOOK_URL, SOURCE_KINDS, build_color_source
from tools.colors import register_color_tools

logger = logging.getLogger("MCP_Server")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise argparse.ArgumentTypeError(f"invalid log level {value!r} (choose from {', '.join(LOG_LEVELS)})")
    return level


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mood-colors-server", description="MCP server exposing get-colors-for-mood")
    parser.add_argument(
        "--source",
        choices=SOURCE_KINDS,
        default=os.getenv("COLOR_SOURCE", "static"),
        help="Where colors come from (env: COLOR_SOURCE).",
    )
    parser.add_argument(
        "--webhook-url",
        default=os.getenv("COLOR_WEBHOOK_URL", DEFAULT_WEBHOOK_URL),
        help="Color-chooser webhook endpoint (env: COLOR_WEBHOOK_URL).",
    )
    parser.add_argument(
        "--webhook-timeout-s",
        type=float,
        default=os.getenv("COLOR_WEBHOOK_TIMEOUT_S", "30"),
        help="Webhook request timeout (env: COLOR_WEBHOOK_TIMEOUT_S).",
    )
    parser.add_argument("--log-level", type=_log_level, default=os.getenv("LOG_LEVEL", "INFO"))
    return parser


def create_server(source_kind: str = "static", webhook_url: Optional[str] = None, timeout_s: float = 30) -> FastMCP:
    mcp = FastMCP("mood-colors")
    source = build_color_source(source_kind, url=webhook_url, timeout_s=timeout_s)
    register_color_tools(mcp, source)
    logger.info(f"Registered color tools with '{source_kind}' source")
    return mcp


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    # stdout carries the JSON-RPC stream, so logs must stay on stderr.
    logging.basicConfig(
        level=args.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    try:
        mcp = create_server(args.source, args.webhook_url, args.webhook_timeout_s)
        logger.info("Mood colors MCP server running on stdio")
        mcp.run(transport="stdio")
    except Exception:
        logger.exception("Fatal error in server main()")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
