"""Field extraction from VTEX webhook and order payloads.

VTEX sends the same concept under different spellings depending on the hook
type (``orderId``/``OrderId``, ``status``/``State`` ...). Each extractor
tries the known spellings in priority order and takes the first non-empty
value. Extraction never raises: unexpected shapes degrade to ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

ALLOWED_STATUSES: frozenset[str] = frozenset(
    {"ready-for-handling", "handling", "invoiced", "shipped"}
)

_STATUS_ALIASES = {"invoice": "invoiced"}


@dataclass(frozen=True)
class WebhookFields:
    """Everything the notification flow reads from an inbound webhook."""

    status: str | None
    order_number: str | None
    purchase_date: str | None
    customer_name: str | None
    email: str | None
    phone: str | None
    tracking_url: str | None


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _text(value: Any) -> str | None:
    """Return a non-empty string or None. Numbers are accepted as text."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str) or not value:
        return None
    return value


def first_text(source: Any, keys: Iterable[str]) -> str | None:
    """First non-empty string found under ``keys`` in ``source``."""
    data = as_dict(source)
    for key in keys:
        value = _text(data.get(key))
        if value is not None:
            return value
    return None


def normalize_status(status: str | None) -> str:
    s = (status or "").lower()
    return _STATUS_ALIASES.get(s, s)


def is_allowed_status(status: str) -> bool:
    return status in ALLOWED_STATUSES


def extract_status(payload: Any) -> str | None:
    return first_text(payload, ("status", "State"))


def extract_order_number(payload: Any) -> str | None:
    return first_text(payload, ("orderId", "OrderId"))


def extract_purchase_date(payload: Any) -> str | None:
    return first_text(payload, ("creationDate", "CurrentChange", "LastChange"))


def client_profile(payload: Any) -> dict[str, Any]:
    return as_dict(as_dict(payload).get("clientProfileData"))


def extract_customer_name(payload: Any) -> str | None:
    """Join trimmed first and last name from ``clientProfileData``."""
    profile = client_profile(payload)
    parts = []
    for key in ("firstName", "lastName"):
        value = _text(profile.get(key))
        if value and value.strip():
            parts.append(value.strip())
    full = " ".join(parts)
    return full or None


def extract_email(payload: Any) -> str | None:
    return first_text(client_profile(payload), ("email",))


def extract_phone(payload: Any) -> str | None:
    return first_text(client_profile(payload), ("phone",))


def tracking_url_from_entries(entries: Any) -> str | None:
    """First non-empty ``trackingUrl`` in a list of packages or logistics items."""
    for entry in as_list(entries):
        url = first_text(entry, ("trackingUrl",))
        if url:
            return url
    return None


def extract_tracking_url(payload: Any) -> str | None:
    attachment = as_dict(as_dict(payload).get("packageAttachment"))
    return tracking_url_from_entries(attachment.get("packages"))


def extract_fields(payload: Any) -> WebhookFields:
    """Read every notification field from a raw webhook body.

    Args:
        payload: Decoded JSON body. Non-dict values yield an all-None result.

    Returns:
        WebhookFields with the raw (not normalized) status.
    """
    return WebhookFields(
        status=extract_status(payload),
        order_number=extract_order_number(payload),
        purchase_date=extract_purchase_date(payload),
        customer_name=extract_customer_name(payload),
        email=extract_email(payload),
        phone=extract_phone(payload),
        tracking_url=extract_tracking_url(payload),
    )
