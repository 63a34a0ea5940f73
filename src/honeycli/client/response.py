"""Pull a human-readable message out of an API error body.

Both API versions report failures in the body, in different shapes:

- v1: ``{"error": "..."}`` or ``{"detail": "..."}``, optionally with
  ``type_detail: [{"field": ..., "description": ...}]`` for validation
  failures.
- v2: JSON:API ``{"errors": [{"title": ..., "detail": ...}]}``.

The message only decorates the diagnostic line on stderr; the body itself
is always written to stdout untouched.
"""

from __future__ import annotations

import json
from typing import Any


def describe_error(body: bytes) -> str:
    """Return the best error message found in *body*, or ``""``.

    Args:
        body: The raw response body of a failed request.
    """
    try:
        document: Any = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return ""
    if not isinstance(document, dict):
        return ""

    message = ""
    for key in ("error", "detail"):
        if isinstance(document.get(key), str):
            message = document[key]
            break

    type_detail = document.get("type_detail")
    if isinstance(type_detail, list) and type_detail:
        details = [
            f"{item.get('field', '')} {item.get('description', '')}".strip()
            for item in type_detail
            if isinstance(item, dict)
        ]
        if details:
            message = f"{message}: {', '.join(details)}" if message else ", ".join(details)

    if message:
        return message

    errors = document.get("errors")
    if isinstance(errors, list):
        messages = []
        for item in errors:
            if not isinstance(item, dict):
                continue
            text = item.get("detail") or item.get("title")
            if isinstance(text, str) and text:
                messages.append(text)
        return ", ".join(messages)

    return ""
