"""Date display helpers for customer-facing messages."""

import re
from datetime import date, datetime, timezone

_DATE_LIKE_PATTERNS = (
    re.compile(r"\d{4}-\d{2}-\d{2}"),
    re.compile(r"\d{2}/\d{2}/\d{4}"),
)

_ISO_DATE_PREFIX = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})")
_BR_DATE_PREFIX = re.compile(r"^\s*(\d{2})/(\d{2})/(\d{4})")


def is_date_like(value: str) -> bool:
    return any(pattern.search(value) for pattern in _DATE_LIKE_PATTERNS)


def _parse_iso(value: str) -> date | None:
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        parsed = None

    if parsed is not None:
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date()

    # VTEX sends 7 fractional digits, which fromisoformat may reject.
    match = _ISO_DATE_PREFIX.match(value)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_br(value: str) -> date | None:
    match = _BR_DATE_PREFIX.match(value)
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_date_if_valid(value: str) -> str:
    """Format a date-like string as ``DD/MM/YYYY``.

    ISO timestamps are converted to UTC before the calendar date is taken.
    ``DD/MM/YYYY`` input is read day-first. Anything that is not date-like,
    or is not a real calendar date, is returned unchanged.

    Args:
        value: Raw date string, usually a VTEX ``creationDate``.

    Returns:
        The formatted date, or ``value`` untouched.
    """
    if not isinstance(value, str) or not is_date_like(value):
        return value

    parsed = _parse_iso(value) or _parse_br(value)
    if parsed is None:
        return value

    return f"{parsed.day:02d}/{parsed.month:02d}/{parsed.year:04d}"
