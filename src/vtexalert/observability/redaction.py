"""Redaction helpers for log output.

Customer names, phones and e-mails arrive in every VTEX payload. They are
persisted in the audit log but must never reach stdout logs; log through
``safe_log_context`` and identify customers by hash only.
"""

import hashlib
import re
from typing import Any

_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{8,}\d")
_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

_REDACTED = "[REDACTED]"


def hash_identifier(value: str) -> str:
    """Non-reversible short hash (first 12 chars of sha256) for log correlation."""
    return hashlib.sha256(value.encode()).hexdigest()[:12]


def redact_string(value: str) -> str:
    """Redact phone and e-mail patterns from a string."""
    result = _PHONE_PATTERN.sub(_REDACTED, value)
    result = _EMAIL_PATTERN.sub(_REDACTED, result)
    return result


def redact_value(value: Any) -> str:
    """Redact any value for safe logging. Returns string representation."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        # Payload structure only, never values
        return f"dict(keys={list(value.keys())})"
    if isinstance(value, (list, tuple)):
        return f"list(len={len(value)})"
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build a context dict safe for logging. All values are redacted."""
    return {k: redact_value(v) for k, v in kwargs.items()}


def presence_flags(**kwargs: Any) -> dict[str, bool]:
    """Report which values are filled without revealing them."""
    return {k: bool(v) for k, v in kwargs.items()}


def order_log_context(order_number: str | None, **kwargs: Any) -> dict[str, str]:
    """Like safe_log_context, but keeps the order number readable.

    VTEX order ids look like phone numbers to the redaction patterns; they
    are not PII and are the main search key in the logs.
    """
    ctx = safe_log_context(**kwargs)
    ctx["order_number"] = order_number if order_number else "null"
    return ctx
