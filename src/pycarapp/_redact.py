"""Helpers for safe debug logging.

Login bodies carry passwords and every authenticated request carries a bearer
token. Everything that reaches a DEBUG log line goes through
:func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "access_token",
        "accesstoken",
        "token",
        "authorization",
        "cookie",
    }
)


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a copy of *value* with credentials masked and long strings cut."""
    if _depth > 10:
        return "<max-depth>"

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, Mapping):
        return {
            str(key): "<redacted>"
            if str(key).lower() in _SENSITIVE_KEYS
            else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            for key, item in value.items()
        }

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return repr(value)
