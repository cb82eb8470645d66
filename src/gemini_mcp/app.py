"""Gemini MCP application entry point.

Logging setup and the stdio server loop.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from mcp.server.stdio import stdio_server

from .config import Config, get_config
from .server import create_server

__all__ = ["run_server", "main", "configure_logging"]

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


async def run_server(config: Config | None = None) -> None:
    """Run the MCP server over stdio until the client disconnects."""
    config = config if config is not None else get_config()
    logger.info(f"Starting Gemini MCP Server: {config}")

    server = create_server(config)

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        logger.info("Gemini MCP Server stopped")


def configure_logging(config: Config) -> None:
    """Configure log output.

    stdout carries the MCP protocol, so logs go to stderr, or to a temp file
    in debug mode.
    """
    log_handlers: list[logging.Handler] = []

    if config.log_debug and config.log_file:
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log_handlers.append(file_handler)
        log_level = logging.DEBUG
    else:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log_handlers.append(stderr_handler)
        log_level = logging.INFO

    # Root logger (third-party libraries) at WARNING to reduce noise
    logging.basicConfig(
        level=logging.WARNING,
        handlers=log_handlers,
    )
    logging.getLogger("gemini_mcp").setLevel(log_level)


def main() -> None:
    """Main entry point."""
    config = get_config()
    configure_logging(config)
    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")


if __name__ == "__main__":
    main()
