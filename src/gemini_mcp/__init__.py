"""Gemini MCP - MCP server wrapping the Gemini CLI.

Environment variables:
    GEMINI_BIN: gemini executable (default "gemini")
    GEMINI_MCP_CONFIG_PATH: config file path (default ./gemini-mcp.config.json)
    GEMINI_MCP_LOG_DEBUG: write DEBUG logs to a temp file

Usage:
    uvx gemini-mcp
"""

__version__ = "0.1.0"

from .app import main

__all__ = ["__version__", "main"]
