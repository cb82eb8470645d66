"""CLI invoker module.

Runs the Gemini CLI as a supervised subprocess and collects its stream-json
output into a GeminiResult.

Basic usage:
    from gemini_mcp.shared.invokers import GeminiInvoker, GeminiParams

    invoker = GeminiInvoker()
    result = await invoker.run(GeminiParams(prompt="Review this code"))
    if result.success:
        print(result.session_id, result.agent_messages)
"""

from __future__ import annotations

from .base import CLIInvoker
from .collector import OutputCollector
from .errors import (
    GeminiError,
    InvalidInputError,
    InvocationTimeoutError,
    SpawnError,
    StreamIOError,
)
from .gemini import GeminiInvoker, enforce_required_fields
from .types import MAX_MESSAGES_LIMIT, GeminiParams, GeminiResult

__all__ = [
    # types
    "GeminiParams",
    "GeminiResult",
    "MAX_MESSAGES_LIMIT",
    # errors
    "GeminiError",
    "InvalidInputError",
    "SpawnError",
    "StreamIOError",
    "InvocationTimeoutError",
    # invokers
    "CLIInvoker",
    "GeminiInvoker",
    "OutputCollector",
    "enforce_required_fields",
]
