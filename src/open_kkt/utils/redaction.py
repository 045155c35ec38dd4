"""Redaction of credentials in logged data"""

import re
from typing import Any


# Sensitive fields that should be redacted in logs
SENSITIVE_FIELDS = [
    "authorization",
    "token",
    "secret",
    "sign",
    "password",
]

_KEY_SEPARATORS = re.compile(r"[-_.\s]+")


def is_sensitive_key(key: Any) -> bool:
    """True if the key, or its last word (``access_token``, ``X-Sign``), is sensitive"""
    words = _KEY_SEPARATORS.split(str(key).lower())
    return words[-1] in SENSITIVE_FIELDS


def redact_sensitive_data(obj: Any) -> Any:
    """Return a copy of obj with values under sensitive keys replaced"""
    if obj is None or isinstance(obj, (str, bytes)):
        return obj

    if isinstance(obj, (list, tuple)):
        return [redact_sensitive_data(item) for item in obj]

    if isinstance(obj, dict):
        redacted = {}
        for key, value in obj.items():
            if is_sensitive_key(key):
                redacted[key] = "[REDACTED]"
            elif isinstance(value, (dict, list, tuple)):
                redacted[key] = redact_sensitive_data(value)
            else:
                redacted[key] = value
        return redacted

    return obj
