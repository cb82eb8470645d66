"""Gemini MCP entry point.

Supports: python -m gemini_mcp
"""

from .app import main

if __name__ == "__main__":
    main()
