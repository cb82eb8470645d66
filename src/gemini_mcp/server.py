"""Gemini MCP Server.

Exposes a single ``gemini`` tool that runs the Gemini CLI.

Environment variables:
    GEMINI_BIN: gemini executable (default "gemini")
    GEMINI_MCP_CONFIG_PATH: config file path (default ./gemini-mcp.config.json)
    GEMINI_MCP_LOG_DEBUG: write DEBUG logs to a temp file
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable

from mcp.server import Server
from mcp.types import TextContent, Tool

from .config import Config, get_config
from .handlers import GeminiHandler, ToolContext
from .shared.invokers import CLIInvoker, GeminiInvoker
from .shared.response_formatter import format_error_response

__all__ = ["create_server", "SERVER_NAME", "SERVER_INSTRUCTIONS"]

logger = logging.getLogger(__name__)

SERVER_NAME = "gemini-mcp"
SERVER_INSTRUCTIONS = (
    "This server provides a gemini tool for AI-driven tasks. "
    "Use the gemini tool to execute tasks via the Gemini CLI."
)


def create_server(
    config: Config | None = None,
    make_invoker: Callable[[Config], CLIInvoker] | None = None,
) -> Server:
    """Create the MCP Server instance.

    Args:
        config: configuration (defaults to the process-wide config)
        make_invoker: invoker factory (defaults to GeminiInvoker)
    """
    config = config if config is not None else get_config()
    server = Server(SERVER_NAME, instructions=SERVER_INSTRUCTIONS)
    handler = GeminiHandler()
    tool_ctx = ToolContext(
        config=config,
        make_invoker=make_invoker or (lambda cfg: GeminiInvoker(config=cfg)),
    )

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return [
            Tool(
                name=handler.name,
                description=handler.description,
                inputSchema=handler.get_input_schema(),
            )
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Call a tool."""
        logger.debug(
            f"[MCP] call_tool request:\n"
            f"  Tool: {name}\n"
            f"  Arguments: {json.dumps({k: v[:100] + '...' if isinstance(v, str) and len(v) > 100 else v for k, v in (arguments or {}).items()}, ensure_ascii=False, default=str)}"
        )

        if name != handler.name:
            return format_error_response(f"Unknown tool '{name}'")

        try:
            return await handler.handle(arguments or {}, tool_ctx)

        except asyncio.CancelledError:
            logger.info(f"Tool '{name}' cancelled")
            raise

        except Exception as e:
            logger.error(f"Tool '{name}' error: {type(e).__name__}: {e}", exc_info=True)
            return format_error_response(str(e))

    return server
