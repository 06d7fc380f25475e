"""Shared test helpers for the VTEX alert service tests.

These are NOT fixtures - they are plain classes and builders that test
modules and conftest.py import directly.
"""

from __future__ import annotations

import copy
from typing import Any

from vtexalert.infra.webhook_log import WebhookLogEntry
from vtexalert.vtex.client import OrderLookupResult
from vtexalert.whatsapp.blip_sender import BlipResponse

TEST_ORDER_NUMBER = "1335930536230-01"
TEST_PHONE = "11987654321"
TEST_TRACKING_URL = "https://rastreio.example.com/BR123456789"


class LogRecorder:
    """Simple recorder to capture log calls deterministically."""

    def __init__(self):
        self.calls: list[tuple[str, tuple, dict]] = []

    def _record(self, level: str, *args, **kwargs):
        self.calls.append((level, args, kwargs))

    def info(self, *args, **kwargs):
        self._record("info", *args, **kwargs)

    def warning(self, *args, **kwargs):
        self._record("warning", *args, **kwargs)

    def error(self, *args, **kwargs):
        self._record("error", *args, **kwargs)

    def exception(self, *args, **kwargs):
        self._record("exception", *args, **kwargs)

    def debug(self, *args, **kwargs):
        self._record("debug", *args, **kwargs)

    def messages(self) -> list[str]:
        return [args[0] for _, args, _ in self.calls if args]

    def get_all_logged_content(self) -> str:
        """Concatenate all args and kwargs from all calls into one string."""
        parts = []
        for _, args, kwargs in self.calls:
            parts.append(str(args))
            parts.append(str(kwargs))
        return " ".join(parts)


class FakeLogStore:
    """In-memory stand-in for WebhookLogStore."""

    def __init__(self, *, sent: set[tuple[str, str]] | None = None):
        self.entries: list[WebhookLogEntry] = []
        self.sent = set(sent or ())
        self.dedup_queries: list[tuple[str, str]] = []

    def save(self, entry: WebhookLogEntry) -> bool:
        self.entries.append(entry)
        return True

    def already_sent(self, order_number: str, message_template: str) -> bool:
        self.dedup_queries.append((order_number, message_template))
        return (order_number, message_template) in self.sent


class FakeOrderClient:
    """Stand-in for VtexOrderClient returning a canned result."""

    def __init__(self, result: OrderLookupResult | None = None):
        self.result = result or OrderLookupResult()
        self.calls: list[str] = []

    def fetch_order(self, order_number: str) -> OrderLookupResult:
        self.calls.append(order_number)
        return self.result


class FakeSender:
    """Records campaign payloads; raises ``error`` if set."""

    def __init__(self, response: BlipResponse | None = None, error: Exception | None = None):
        self.response = response or BlipResponse(status=202, body='{"status":"success"}')
        self.error = error
        self.payloads: list[dict[str, Any]] = []

    def __call__(self, payload: dict[str, Any]) -> BlipResponse:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.response


def make_webhook(**overrides: Any) -> dict[str, Any]:
    """A complete VTEX order-status webhook with inline customer data."""
    payload: dict[str, Any] = {
        "orderId": TEST_ORDER_NUMBER,
        "status": "handling",
        "creationDate": "2024-03-05T13:45:00.0000000+00:00",
        "clientProfileData": {
            "firstName": " Maria ",
            "lastName": "Silva",
            "email": "maria@example.com",
            "phone": TEST_PHONE,
        },
    }
    payload.update(overrides)
    return payload


def make_order(**overrides: Any) -> dict[str, Any]:
    """A VTEX OMS order record as returned by /api/oms/pvt/orders/{id}."""
    order: dict[str, Any] = {
        "orderId": TEST_ORDER_NUMBER,
        "status": "invoiced",
        "statusDescription": "Faturado",
        "creationDate": "2024-03-05T13:45:00.0000000+00:00",
        "items": [
            {"name": "Garrafa Térmica 1L", "quantity": 2},
            {"name": "Tampa Reserva", "quantity": 1},
        ],
        "clientProfileData": {
            "firstName": "João",
            "lastName": "Souza",
            "email": "joao@example.com",
            "phone": "+55 (21) 99876-5432",
        },
        "packageAttachment": {"packages": [{"trackingUrl": TEST_TRACKING_URL}]},
        "shippingData": {"logisticsInfo": [{"trackingUrl": None}]},
    }
    order.update(copy.deepcopy(overrides))
    return order
