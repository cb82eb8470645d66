"""Gemini tool handler."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import anyio
from mcp.types import TextContent

from ..shared.invokers import GeminiError, GeminiParams
from ..shared.response_formatter import format_error_response, format_result
from ..tool_schema import TOOL_DESCRIPTION, TOOL_NAME, create_tool_schema
from .base import ToolContext, ToolHandler

__all__ = ["GeminiHandler", "build_params"]

logger = logging.getLogger(__name__)


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def build_params(arguments: dict[str, Any], additional_args: tuple[str, ...] = ()) -> GeminiParams:
    """Build invocation parameters from tool arguments.

    An empty SESSION_ID starts a new session.
    """
    return GeminiParams(
        prompt=arguments["PROMPT"],
        session_id=_optional_str(arguments.get("SESSION_ID")),
        additional_args=additional_args,
        return_all_messages=bool(arguments.get("return_all_messages", False)),
        sandbox=bool(arguments.get("sandbox", False)),
        model=_optional_str(arguments.get("model")),
    )


class GeminiHandler(ToolHandler):
    """Handles ``gemini`` tool calls."""

    @property
    def name(self) -> str:
        return TOOL_NAME

    @property
    def description(self) -> str:
        return TOOL_DESCRIPTION

    def get_input_schema(self) -> dict[str, Any]:
        return create_tool_schema()

    def validate(self, arguments: dict[str, Any]) -> str | None:
        prompt = arguments.get("PROMPT")
        if not isinstance(prompt, str) or not prompt.strip():
            return "PROMPT is required and must be a non-empty, non-whitespace string"
        return None

    async def handle(
        self,
        arguments: dict[str, Any],
        ctx: ToolContext,
    ) -> list[TextContent]:
        """Handle a gemini tool call."""
        error = self.validate(arguments)
        if error:
            return format_error_response(error)

        params = build_params(arguments, ctx.config.additional_args)
        invoker = ctx.make_invoker(ctx.config)

        try:
            result = await invoker.run(params)

        except (anyio.get_cancelled_exc_class(), asyncio.CancelledError):
            logger.info(f"Tool '{self.name}' cancelled")
            raise

        except GeminiError as e:
            logger.error(f"Tool '{self.name}' failed: {e}")
            return format_error_response(f"Failed to execute gemini: {e}")

        logger.debug(
            "[MCP] call_tool response:\n"
            f"  Tool: {self.name}\n"
            f"  Success: {result.success}\n"
            f"  Exit code: {result.exit_code}\n"
            f"  Records: {len(result.all_messages)}"
        )

        text = format_result(result, include_all_messages=params.return_all_messages)
        return [TextContent(type="text", text=text)]
