"""Tool handler base abstractions.

Defines the handler protocol and the context passed to handlers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from mcp.types import TextContent

if TYPE_CHECKING:
    from ..config import Config
    from ..shared.invokers import CLIInvoker

__all__ = [
    "ToolContext",
    "ToolHandler",
]


@dataclass
class ToolContext:
    """Tool execution context.

    Bundles the dependencies a handler needs so they can be swapped in tests.
    """

    config: "Config"
    make_invoker: Callable[["Config"], "CLIInvoker"]


class ToolHandler(ABC):
    """Tool handler protocol."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Tool description."""
        ...

    @abstractmethod
    def get_input_schema(self) -> dict[str, Any]:
        """Input parameter schema."""
        ...

    @abstractmethod
    async def handle(
        self,
        arguments: dict[str, Any],
        ctx: ToolContext,
    ) -> list[TextContent]:
        """Handle a tool call.

        Args:
            arguments: tool arguments
            ctx: execution context

        Returns:
            TextContent list
        """
        ...

    def validate(self, arguments: dict[str, Any]) -> str | None:
        """Validate arguments.

        Returns:
            error message, or None when the arguments are valid
        """
        return None
