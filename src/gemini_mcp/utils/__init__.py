"""Utility module.

Prompt helpers used by the invoker.
"""

from .prompt_injection import inject_project_context, read_gemini_config

__all__ = [
    "inject_project_context",
    "read_gemini_config",
]
