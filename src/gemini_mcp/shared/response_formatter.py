"""MCP response formatter.

Plain ``key: value`` text, one field per line:

    success: true
    SESSION_ID: <id>
    agent_messages: <text>
    all_messages: <json>        # only when requested

Failures render as ``success: false`` followed by the error narrative.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mcp.types import TextContent

    from .invokers.types import GeminiResult

__all__ = [
    "format_result",
    "format_error",
    "format_error_response",
]


def format_result(result: "GeminiResult", *, include_all_messages: bool = False) -> str:
    """Render an invocation result."""
    data = result.to_dict(include_all_messages=include_all_messages)
    if not data["success"]:
        return format_error(data.get("error") or "Unknown error", session_id=data["SESSION_ID"])

    parts = [
        "success: true",
        f"SESSION_ID: {data['SESSION_ID']}",
        f"agent_messages: {data['agent_messages']}",
    ]
    if "all_messages" in data:
        parts.append(
            "all_messages: " + json.dumps(data["all_messages"], ensure_ascii=False)
        )
    return "\n".join(parts)


def format_error(error: str, *, session_id: str = "") -> str:
    """Render an error; the session id is kept so the caller can resume."""
    parts = ["success: false"]
    if session_id:
        parts.append(f"SESSION_ID: {session_id}")
    parts.append(f"error: {error}")
    return "\n".join(parts)


def format_error_response(error: str) -> list["TextContent"]:
    """Error response as MCP content."""
    from mcp.types import TextContent

    return [TextContent(type="text", text=format_error(error))]
