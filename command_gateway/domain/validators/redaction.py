"""Redaction of sensitive values before anything is persisted.

A value is redacted when its mapping key contains (case-insensitively) one
of ``SENSITIVE_KEY_FRAGMENTS``. Redaction is recursive and returns new
containers; the input is never modified.
"""

import re
from collections.abc import Mapping
from typing import Any

from command_gateway.core.constants import REDACTED, SENSITIVE_KEY_FRAGMENTS

_PASSWORD_LITERAL = re.compile(r"""(\bPASSWORD\s*=\s*)(['"])[^'"]*\2""", re.IGNORECASE)
_SET_PASSWORD = re.compile(r"""(\bSET\s+\w*password\w*\s*=\s*)(['"])[^'"]*\2""", re.IGNORECASE)


def is_sensitive_key(key: object) -> bool:
    lowered = str(key).lower()
    return any(fragment in lowered for fragment in SENSITIVE_KEY_FRAGMENTS)


def redact(data: Any) -> Any:
    """Copy of ``data`` with every sensitive key's value replaced.

    Example:
        >>> redact({"user_password": "x", "nested": {"api_key": "k", "n": 1}})
        {'user_password': '[REDACTED]', 'nested': {'api_key': '[REDACTED]', 'n': 1}}
    """
    if isinstance(data, Mapping):
        return {
            key: REDACTED if is_sensitive_key(key) else redact(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact(item) for item in data]
    return data


def scrub_query(query: str | None) -> str:
    """Remove password literals from SQL text.

    Example:
        >>> scrub_query("UPDATE users SET password = 'hunter2' WHERE id = 1")
        "UPDATE users SET password = '[REDACTED]' WHERE id = 1"
    """
    if not query:
        return ""
    query = _SET_PASSWORD.sub(rf"\1\2{REDACTED}\2", query)
    return _PASSWORD_LITERAL.sub(rf"\1\2{REDACTED}\2", query)
