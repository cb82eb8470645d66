"""Gemini CLI invoker.

Command format:
    gemini \
      -o stream-json \
      [additional_args ...] \
      [--sandbox] \
      [--model {model}] \
      "{prompt}"                                   # new session
    or
      --prompt "{prompt}" --resume {session_id}    # resume

Resuming requires the prompt via --prompt; the CLI answers with a
deprecation notice as an assistant message, which the record classifier
drops.
"""

from __future__ import annotations

from .base import CLIInvoker
from .types import GeminiParams, GeminiResult

__all__ = [
    "GeminiInvoker",
    "enforce_required_fields",
    "MISSING_SESSION_ID_ERROR",
    "MISSING_AGENT_MESSAGES_ERROR",
]

MISSING_SESSION_ID_ERROR = "Failed to get `SESSION_ID` from the gemini session."
MISSING_AGENT_MESSAGES_ERROR = "Failed to get `agent_messages` from the gemini session."


def enforce_required_fields(
    result: GeminiResult,
    *,
    return_all_messages: bool = False,
) -> GeminiResult:
    """Fail the result if the session id or the agent messages are missing.

    Empty agent messages are accepted when the caller asked for all
    messages and at least one record was received.

    Args:
        result: result after the process exited
        return_all_messages: whether raw records are returned to the caller

    Returns:
        the same result, possibly downgraded to failure
    """
    errors: list[str] = []

    if not result.session_id:
        errors.append(MISSING_SESSION_ID_ERROR)

    if not result.agent_messages and not (return_all_messages and result.all_messages):
        errors.append(MISSING_AGENT_MESSAGES_ERROR)

    if errors:
        result.mark_failed()
        result.add_error("\n".join(errors))

    return result


class GeminiInvoker(CLIInvoker):
    """Gemini CLI invoker.

    Example:
        invoker = GeminiInvoker()
        result = await invoker.run(GeminiParams(
            prompt="Analyze this project",
            additional_args=("--model", "gemini-2.5-pro"),
        ))
    """

    @property
    def cli_name(self) -> str:
        return "gemini"

    def build_command(self, params: GeminiParams) -> list[str]:
        """Build the Gemini CLI command.

        Args:
            params: invocation parameters

        Returns:
            argv list
        """
        cmd = [self._config.gemini_bin]

        # Always stream JSON output (JSONL)
        cmd.extend(["-o", "stream-json"])

        cmd.extend(params.additional_args)

        if params.sandbox:
            cmd.append("--sandbox")

        if params.model:
            cmd.extend(["--model", params.model])

        if params.session_id:
            cmd.extend(["--prompt", params.prompt])
            cmd.extend(["--resume", params.session_id])
        else:
            cmd.append(params.prompt)

        return cmd

    def finalize(self, result: GeminiResult, params: GeminiParams) -> GeminiResult:
        return enforce_required_fields(
            result,
            return_all_messages=params.return_all_messages,
        )
