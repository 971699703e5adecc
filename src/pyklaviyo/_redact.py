"""Redaction of request headers and JSON:API documents for debug logs.

Every request carries the private API key in the ``Authorization`` header,
and webhook registrations may carry signing secrets.  Those values never
reach the log file.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

REDACTED = "<redacted>"

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "authorization",
        "api_key",
        "apikey",
        "private_key",
        "secret",
        "secret_key",
        "signature",
        "signature_key",
        "password",
        "token",
        "cookie",
    }
)


def _is_sensitive(key: object) -> bool:
    # Header names use dashes, JSON attributes use underscores.
    return str(key).lower().replace("-", "_") in _SENSITIVE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of a header mapping or JSON document safe to log.

    Sensitive keys are replaced at any nesting level and long strings
    (large property blobs) are truncated.
    """
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED if _is_sensitive(key) else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_for_log(item, max_string=max_string) for item in value]
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    return value
