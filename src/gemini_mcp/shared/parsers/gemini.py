"""Gemini CLI stream-json record classifier.

Gemini CLI event types seen in ``-o stream-json`` output:
- init: session start (carries session_id)
- message: user/assistant message
- tool_use / tool_result: tool calls
- error: error event
- result: end of session

Records are not validated against a schema. Every field is optional and a
record may be any JSON value, so lookups always fall back to a default.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..invokers.types import GeminiResult

__all__ = [
    "classify_record",
    "PROMPT_DEPRECATION_WARNING",
]

logger = logging.getLogger(__name__)

# Printed by the CLI as an assistant message when --prompt is used for resume
PROMPT_DEPRECATION_WARNING = "The --prompt (-p) flag has been deprecated"

KEY_SESSION_ID = "session_id"
KEY_TYPE = "type"
KEY_ROLE = "role"
KEY_CONTENT = "content"
KEY_ERROR = "error"
KEY_MESSAGE = "message"

TYPE_MESSAGE = "message"
ROLE_ASSISTANT = "assistant"

ERROR_PREFIX = "gemini error: "


def _get(record: Any, key: str) -> Any:
    """Field lookup that tolerates non-object records."""
    if isinstance(record, dict):
        return record.get(key)
    return None


def _get_str(record: Any, key: str) -> str | None:
    value = _get(record, key)
    return value if isinstance(value, str) else None


def classify_record(record: Any, result: GeminiResult) -> None:
    """Apply one decoded stdout record to the accumulated result.

    Args:
        record: decoded JSON value (object, array or scalar)
        result: result state of the current invocation
    """
    result.add_record(record)

    # Last non-empty session id wins
    session_id = _get_str(record, KEY_SESSION_ID)
    if session_id:
        result.session_id = session_id

    item_type = _get_str(record, KEY_TYPE) or ""
    item_role = _get_str(record, KEY_ROLE) or ""

    if item_type == TYPE_MESSAGE and item_role == ROLE_ASSISTANT:
        content = _get_str(record, KEY_CONTENT)
        if content is not None:
            if PROMPT_DEPRECATION_WARNING in content:
                logger.debug("Skipping --prompt deprecation notice")
            else:
                result.append_agent_message(content)

    item_type_lower = item_type.lower()
    has_explicit_error = "fail" in item_type_lower or "error" in item_type_lower
    has_error_obj = isinstance(record, dict) and KEY_ERROR in record

    if has_explicit_error or has_error_obj:
        result.mark_failed()
        error_obj = _get(record, KEY_ERROR)
        error_msg = _get_str(error_obj, KEY_MESSAGE) if isinstance(error_obj, dict) else None
        if error_msg is not None:
            result.add_error(f"{ERROR_PREFIX}{error_msg}")
        else:
            message = _get_str(record, KEY_MESSAGE)
            if message is not None:
                result.add_error(f"{ERROR_PREFIX}{message}")
