"""Tool handlers.

Provides the handler abstraction and the gemini tool handler.
"""

from .base import ToolContext, ToolHandler
from .gemini import GeminiHandler, build_params

__all__ = [
    "ToolContext",
    "ToolHandler",
    "GeminiHandler",
    "build_params",
]
