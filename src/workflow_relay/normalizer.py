"""
Reply extraction for n8n workflow responses

Workflows return whatever their last node produced, so the reply text has to
be found heuristically. The precedence below is visible to users: when a
payload carries several candidate fields, the earlier rule wins.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, Mapping, Tuple

NO_RESPONSE = "No response from AI assistant"
UNKNOWN_ERROR = "Unknown error from AI service"

PREFERRED_FIELDS = ("response", "content", "message")


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return _compact_json(value)
    return str(value)


def _compact_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _items(data: Any) -> Iterator[Tuple[Any, Any]]:
    """Key/value pairs in enumeration order (arrays enumerate by index)."""
    if isinstance(data, Mapping):
        return iter(data.items())
    return enumerate(data)


def normalize_reply(data: Any) -> str:
    """Extract one human-readable reply from an upstream payload.

    Args:
        data: decoded JSON body, or raw text when the body was not JSON

    Returns:
        The reply string shown to the user
    """
    if isinstance(data, str):
        return data

    if not isinstance(data, (Mapping, list)):
        return NO_RESPONSE

    if isinstance(data, Mapping):
        for name in PREFERRED_FIELDS:
            value = data.get(name)
            if value:
                return _as_text(value)
        success = data.get("success")
    else:
        success = None

    if success is not False:
        for _, value in _items(data):
            if isinstance(value, str) and value.strip():
                return value
        return _compact_json(data)

    error = data.get("error")
    return "Error: " + (_as_text(error) if error else UNKNOWN_ERROR)
