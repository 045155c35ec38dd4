"""Utilities module initialization"""

from open_kkt.utils.logger import Logger, LogSink, LEVELS
from open_kkt.utils.redaction import redact_sensitive_data, SENSITIVE_FIELDS

__all__ = ["Logger", "LogSink", "LEVELS", "redact_sensitive_data", "SENSITIVE_FIELDS"]
