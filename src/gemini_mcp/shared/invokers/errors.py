"""Invoker exceptions.

Only fatal conditions are raised. Problems reported by the CLI itself
(error events, non-zero exit, missing fields) are folded into
``GeminiResult.error`` instead.
"""

from __future__ import annotations

__all__ = [
    "GeminiError",
    "InvalidInputError",
    "SpawnError",
    "StreamIOError",
    "InvocationTimeoutError",
]


class GeminiError(Exception):
    """Base class for fatal invocation errors."""
    pass


class InvalidInputError(GeminiError, ValueError):
    """The request was rejected before the CLI was started."""
    pass


class SpawnError(GeminiError):
    """The CLI executable could not be started.

    Attributes:
        argv0: executable that failed to start
    """

    def __init__(self, argv0: str, reason: str) -> None:
        self.argv0 = argv0
        super().__init__(f"Failed to spawn gemini command ({argv0}): {reason}")


class StreamIOError(GeminiError):
    """Waiting on the CLI process failed."""
    pass


class InvocationTimeoutError(GeminiError, TimeoutError):
    """The CLI did not finish before the deadline.

    Attributes:
        timeout_secs: deadline that was exceeded
    """

    def __init__(self, timeout_secs: float) -> None:
        self.timeout_secs = timeout_secs
        super().__init__(
            f"Gemini command timed out after {timeout_secs:g} seconds"
        )
