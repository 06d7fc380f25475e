"""Audit log of processed webhooks (``webhook_logs`` table).

One row per webhook that reached a recorded outcome. Rows are append-only.
The same table answers the dedup question "was this template already sent
for this order?".

Uses raw SQL with psycopg2 (no ORM).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from psycopg2.extras import Json

from vtexalert.observability.logging import get_logger
from vtexalert.observability.redaction import order_log_context, safe_log_context

from .db import fetchone, txn

logger = get_logger(__name__)


@dataclass(frozen=True)
class WebhookLogEntry:
    """One audit row. Payload fields hold JSON-serializable values."""

    webhook_payload: Any
    status: str | None = None
    order_number: str | None = None
    message_template: str | None = None
    purchase_date: str | None = None
    tracking_url: str | None = None
    note: str | None = None
    blip_payload: Any = None
    blip_response: Any = None
    vtex_order_payload: Any = None
    error_message: str | None = None
    error_stack: str | None = None


def _json_or_null(value: Any) -> Json | None:
    return Json(value) if value is not None else None


class WebhookLogStore:
    """PostgreSQL-backed audit log.

    Both operations absorb database errors: a failing store must never
    block or fail a webhook.
    """

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn

    def save(self, entry: WebhookLogEntry) -> bool:
        """Insert one audit row.

        Returns:
            True if the row was written, False if the insert failed.
        """
        try:
            with txn(self._dsn) as cur:
                cur.execute(
                    """
                    INSERT INTO webhook_logs (
                        status, order_number, message_template, purchase_date,
                        tracking_url, note, webhook_payload, blip_payload,
                        blip_response, vtex_order_payload, error_message, error_stack
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        entry.status,
                        entry.order_number,
                        entry.message_template,
                        entry.purchase_date,
                        entry.tracking_url,
                        entry.note,
                        Json(entry.webhook_payload),
                        _json_or_null(entry.blip_payload),
                        _json_or_null(entry.blip_response),
                        _json_or_null(entry.vtex_order_payload),
                        entry.error_message,
                        entry.error_stack,
                    ),
                )
        except Exception as e:
            logger.error(
                "failed to save webhook log",
                extra={
                    "extra_fields": order_log_context(
                        entry.order_number,
                        error_type=type(e).__name__,
                    )
                },
            )
            return False
        return True

    def already_sent(self, order_number: str, message_template: str) -> bool:
        """Whether this template was already delivered to Blip for the order.

        Only rows holding a Blip response and no error count. Query errors
        answer False so a flaky database never suppresses a notification.
        """
        try:
            with txn(self._dsn) as cur:
                row = fetchone(
                    cur,
                    """
                    SELECT id FROM webhook_logs
                    WHERE order_number = %s
                      AND message_template = %s
                      AND blip_response IS NOT NULL
                      AND error_message IS NULL
                    LIMIT 1
                    """,
                    (order_number, message_template),
                )
        except Exception as e:
            logger.error(
                "failed to query duplicate webhook logs",
                extra={
                    "extra_fields": {
                        **order_log_context(order_number, error_type=type(e).__name__),
                        **safe_log_context(message_template=message_template),
                    }
                },
            )
            return False
        return row is not None
