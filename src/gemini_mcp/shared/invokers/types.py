"""Invoker type definitions.

Request parameters and the accumulated result of one Gemini CLI run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "GeminiParams",
    "GeminiResult",
    "MAX_MESSAGES_LIMIT",
]

# Upper bound on raw records kept in GeminiResult.all_messages
MAX_MESSAGES_LIMIT = 10_000


@dataclass(frozen=True)
class GeminiParams:
    """Parameters for a single Gemini CLI invocation.

    Attributes:
        prompt: task instruction (required, must not be blank)
        session_id: resume an earlier session; empty means a new session
        additional_args: extra CLI arguments inserted after the output flags
        return_all_messages: keep every decoded record in the response
        sandbox: run the CLI with --sandbox
        model: model override passed as --model
    """

    prompt: str
    session_id: str | None = None
    additional_args: tuple[str, ...] = ()
    return_all_messages: bool = False
    sandbox: bool = False
    model: str | None = None

    def __post_init__(self) -> None:
        """Normalise empty session ids and list-typed arguments."""
        if not self.session_id:
            object.__setattr__(self, "session_id", None)
        if not isinstance(self.additional_args, tuple):
            object.__setattr__(self, "additional_args", tuple(self.additional_args))


@dataclass
class GeminiResult:
    """Result state accumulated while reading the CLI output.

    ``success`` only ever goes from True to False, ``session_id`` is never
    cleared once set and ``error`` is only extended.

    Attributes:
        success: whether the run succeeded
        session_id: id for resuming the conversation
        agent_messages: assistant text, newline-joined
        all_messages: decoded records (capped at MAX_MESSAGES_LIMIT)
        error: error narrative, newline-joined
        exit_code: CLI exit status once known
    """

    success: bool = True
    session_id: str = ""
    agent_messages: str = ""
    all_messages: list[Any] = field(default_factory=list)
    error: str | None = None
    exit_code: int | None = None

    def mark_failed(self) -> None:
        self.success = False

    def add_error(self, message: str) -> None:
        """Extend the error narrative with another line."""
        if not message:
            return
        if self.error:
            self.error = f"{self.error}\n{message}"
        else:
            self.error = message

    def append_agent_message(self, text: str) -> None:
        if self.agent_messages:
            self.agent_messages += "\n"
        self.agent_messages += text

    def add_record(self, record: Any) -> None:
        """Keep a decoded record unless the cap is reached."""
        if len(self.all_messages) < MAX_MESSAGES_LIMIT:
            self.all_messages.append(record)

    def to_dict(self, *, include_all_messages: bool = False) -> dict[str, Any]:
        """Convert to a plain dict."""
        result: dict[str, Any] = {
            "success": self.success,
            "SESSION_ID": self.session_id,
            "agent_messages": self.agent_messages,
        }
        if self.error:
            result["error"] = self.error
        if include_all_messages:
            result["all_messages"] = self.all_messages
        return result
