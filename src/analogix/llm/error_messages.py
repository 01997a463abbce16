"""Normalize provider error payloads into one displayable message.

Providers answer failures with a JSON object ({"error": ...} or
{"message": ...}), a bare JSON string, or plain text. This module is
the only place that knows about that variety.
"""

import json
from typing import Any


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def extract_message(
    response_body: str | bytes | None,
    status_text: str | None = "",
) -> str:
    """Extract a human-readable message from an error response body.

    Never raises: it runs on the failure path.

    Order: JSON string as-is; object ``error`` field; object ``message``
    field; whole parsed value; raw body when it is not JSON; status_text
    when the body is empty.
    """
    if isinstance(response_body, bytes):
        response_body = response_body.decode("utf-8", errors="replace")
    raw = response_body or ""
    try:
        parsed = json.loads(raw)
    except (ValueError, TypeError, RecursionError):
        return raw or (status_text or "")

    if isinstance(parsed, str):
        return parsed
    if isinstance(parsed, dict):
        if parsed.get("error"):
            return _stringify(parsed["error"])
        if parsed.get("message"):
            return _stringify(parsed["message"])
    return _stringify(parsed)


def format_error(error: object) -> str:
    """Message of an exception, or a generic text for anything else."""
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"
