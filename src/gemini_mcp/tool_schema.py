"""Tool schema definitions.

Tool description and input schema of the ``gemini`` tool.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "TOOL_NAME",
    "TOOL_DESCRIPTION",
    "create_tool_schema",
]

TOOL_NAME = "gemini"

TOOL_DESCRIPTION = """Invokes the Gemini CLI to execute AI-driven tasks, returning structured JSON events and a session identifier for conversation continuity.

RETURN STRUCTURE:
- success: boolean indicating execution status
- SESSION_ID: unique identifier for resuming this conversation in future calls
- agent_messages: concatenated assistant response text
- all_messages: every JSON event emitted by the CLI (only with return_all_messages)
- error: error description when success is false

BEST PRACTICES:
- Always capture and reuse SESSION_ID for multi-turn interactions"""


def create_tool_schema() -> dict[str, Any]:
    """Input schema of the gemini tool."""
    return {
        "type": "object",
        "properties": {
            "PROMPT": {
                "type": "string",
                "description": "Instruction for the task to send to gemini.",
            },
            "SESSION_ID": {
                "type": "string",
                "default": "",
                "description": (
                    "Resume the specified session of the gemini. "
                    "If not provided or empty, starts a new session."
                ),
            },
            "return_all_messages": {
                "type": "boolean",
                "default": False,
                "description": "Return all JSON events emitted by the CLI.",
            },
            "sandbox": {
                "type": "boolean",
                "default": False,
                "description": "Run gemini in sandbox mode (--sandbox).",
            },
            "model": {
                "type": "string",
                "default": "",
                "description": "Model override passed as --model. Empty uses the CLI default.",
            },
        },
        "required": ["PROMPT"],
    }
