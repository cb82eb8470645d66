"""Output collector.

Owns everything captured from one CLI run besides the classified result:

- stdout lines are decoded as JSON and handed to the record classifier
- stdout lines that are not JSON are kept (count-capped) for diagnosis
- stderr is kept as text (byte-capped, with a one-time truncation marker)

All buffers are bounded regardless of how much the CLI writes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from ..parsers.gemini import classify_record
from .types import GeminiResult

__all__ = [
    "OutputCollector",
    "MAX_NON_JSON_LINES",
    "MAX_STDERR_BYTES",
    "STDERR_TRUNCATED_MARKER",
]

logger = logging.getLogger(__name__)

MAX_NON_JSON_LINES = 1_000
MAX_STDERR_BYTES = 100_000  # 100KB, marker included
STDERR_TRUNCATED_MARKER = "\n... (stderr truncated)"


def _truncate_utf8(text: str, max_bytes: int) -> str:
    """Cut text to at most max_bytes of UTF-8 without splitting a character."""
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode("utf-8", errors="ignore")


@dataclass
class OutputCollector:
    """Collects stdout/stderr lines of one invocation.

    Attributes:
        result: classified result state
        non_json_lines: raw stdout lines that failed JSON decoding
        valid_json_seen: whether any stdout line decoded successfully
        stderr_truncated: whether the stderr cap was reached
        max_stderr_bytes: stderr cap in UTF-8 bytes, marker included
        max_non_json_lines: cap on non_json_lines entries
    """

    result: GeminiResult = field(default_factory=GeminiResult)
    non_json_lines: list[str] = field(default_factory=list)
    valid_json_seen: bool = False
    stderr_truncated: bool = False
    max_stderr_bytes: int = MAX_STDERR_BYTES
    max_non_json_lines: int = MAX_NON_JSON_LINES

    _stderr_parts: list[str] = field(default_factory=list, repr=False)
    _stderr_size: int = field(default=0, repr=False)

    @property
    def stderr(self) -> str:
        """Captured stderr text."""
        return "".join(self._stderr_parts)

    @property
    def stderr_size(self) -> int:
        """Size of the captured stderr in UTF-8 bytes."""
        return self._stderr_size

    def feed_stdout_line(self, line: str) -> None:
        """Decode one stdout line and classify it."""
        trimmed = line.strip()
        if not trimmed:
            return

        try:
            record = json.loads(trimmed)
        except json.JSONDecodeError:
            if len(self.non_json_lines) < self.max_non_json_lines:
                self.non_json_lines.append(trimmed)
            logger.debug(f"Non-JSON line: {trimmed[:100]}")
            return

        self.valid_json_seen = True
        classify_record(record, self.result)

    def feed_stderr_line(self, line: str) -> None:
        """Append one stderr line, respecting the byte cap.

        Lines past the cap are dropped; the caller keeps reading so the
        child never blocks on a full pipe.
        """
        if self.stderr_truncated:
            return

        chunk = f"\n{line}" if self._stderr_parts else line
        chunk_size = len(chunk.encode("utf-8"))
        marker_size = len(STDERR_TRUNCATED_MARKER.encode("utf-8"))
        budget = self.max_stderr_bytes - marker_size

        if self._stderr_size + chunk_size <= budget:
            self._stderr_parts.append(chunk)
            self._stderr_size += chunk_size
            return

        remaining = max(budget - self._stderr_size, 0)
        head = _truncate_utf8(chunk, remaining)
        if head:
            self._stderr_parts.append(head)
            self._stderr_size += len(head.encode("utf-8"))
        self._stderr_parts.append(STDERR_TRUNCATED_MARKER)
        self._stderr_size += marker_size
        self.stderr_truncated = True
        logger.debug(f"stderr capture truncated at {self._stderr_size} bytes")
