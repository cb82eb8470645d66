"""Stream-json record parsers."""

from __future__ import annotations

from .gemini import PROMPT_DEPRECATION_WARNING, classify_record

__all__ = [
    "PROMPT_DEPRECATION_WARNING",
    "classify_record",
]
