"""Prompt injection helpers.

Prepends the project-local GEMINI.md file (if any) to the user prompt.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

import anyio

__all__ = [
    "ContextProvider",
    "GEMINI_CONFIG_FILE",
    "MAX_CONFIG_SIZE",
    "inject_project_context",
    "read_gemini_config",
    "read_gemini_config_from_path",
]

logger = logging.getLogger(__name__)

GEMINI_CONFIG_FILE = "GEMINI.md"
MAX_CONFIG_SIZE = 100_000  # 100KB

# Async lookup of text to prepend to the prompt
ContextProvider = Callable[[], Awaitable[str | None]]


async def read_gemini_config_from_path(config_path: Path | str) -> str | None:
    """Read a GEMINI.md file.

    Returns None when the file is missing, unreadable, larger than
    MAX_CONFIG_SIZE or blank. Content is returned untrimmed.
    """
    path = anyio.Path(config_path)

    try:
        stat = await path.stat()
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning(f"Cannot access {GEMINI_CONFIG_FILE} configuration file: {e}")
        return None

    if stat.st_size > MAX_CONFIG_SIZE:
        logger.warning(
            f"{GEMINI_CONFIG_FILE} file is too large ({stat.st_size} bytes, "
            f"max {MAX_CONFIG_SIZE} bytes). Configuration will be ignored."
        )
        return None

    try:
        content = await path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read {GEMINI_CONFIG_FILE} configuration file: {e}")
        return None

    if not content.strip():
        logger.warning(f"{GEMINI_CONFIG_FILE} file is empty and will be ignored.")
        return None

    return content


async def read_gemini_config() -> str | None:
    """Read GEMINI.md from the current working directory."""
    return await read_gemini_config_from_path(Path(GEMINI_CONFIG_FILE))


def inject_project_context(prompt: str, context: str | None) -> str:
    """Prepend project context to the prompt, separated by a blank line."""
    if context is None:
        return prompt
    return f"{context}\n\n{prompt}"
