"""Order-status notification flow.

Maps one VTEX order-status webhook to at most one WhatsApp template message:

1. Normalize the status; statuses outside the allow-list are ignored and
   leave no audit row.
2. No order number: audit note, stop.
3. No template for the status: stop (no audit row).
4. Template already sent for the order: stop (no audit row).
5. Enrich from VTEX OMS. Webhook values win; the order fills gaps.
6. Name, email, phone, order number or purchase date still missing:
   audit note, stop.
7. Shipping template without a tracking URL: audit note, stop.
8. Build the Blip campaign and send it.
9. Audit the result. A failed send is audited with its traceback and
   re-raised as NotificationDispatchError.

Steps 3 and 4 leave no audit trail. Dedup reads before the send and the
audit row is written after it, so two concurrent deliveries for the same
order/template can both send.
"""

from __future__ import annotations

import functools
import logging
import traceback
from dataclasses import dataclass, replace
from typing import Any, Callable, Literal

from vtexalert.config import Settings
from vtexalert.infra.webhook_log import WebhookLogEntry, WebhookLogStore
from vtexalert.observability.logging import get_logger
from vtexalert.observability.redaction import order_log_context, presence_flags
from vtexalert.vtex.client import OrderLookupResult, VtexOrderClient
from vtexalert.vtex.extract import (
    extract_customer_name,
    extract_email,
    extract_fields,
    extract_phone,
    extract_status,
    first_text,
    is_allowed_status,
    normalize_status,
)
from vtexalert.vtex.orders import build_order_details
from vtexalert.whatsapp.blip_sender import BlipResponse, send_campaign
from vtexalert.whatsapp.campaign import NotificationContext, build_campaign_payload
from vtexalert.whatsapp.templates import requires_tracking_url, resolve_message_template

NOTE_MISSING_ORDER_NUMBER = "Webhook sem orderNumber"
NOTE_MISSING_REQUIRED_DATA = "Dados obrigatórios ausentes mesmo após consulta VTEX"
NOTE_TRACKING_URL_UNAVAILABLE = "Não foi possível obter trackingUrl"

REASON_NO_TEMPLATE = "no message template for status"
REASON_DUPLICATE = "message already sent for order"

OutcomeKind = Literal["ignored", "skipped", "sent"]

Sender = Callable[[dict[str, Any]], BlipResponse]


@dataclass(frozen=True)
class NotificationOutcome:
    kind: OutcomeKind
    status: str
    order_number: str | None = None
    message_template: str | None = None
    reason: str | None = None
    blip_response: BlipResponse | None = None

    @property
    def handled(self) -> bool:
        return self.kind != "ignored"


class NotificationDispatchError(Exception):
    """Raised when the Blip send fails after the failure was audited."""

    def __init__(self, message: str, *, status: str, order_number: str) -> None:
        super().__init__(message)
        self.status = status
        self.order_number = order_number


@dataclass
class _Resolved:
    """Mutable working set while webhook and order data are merged."""

    customer_name: str | None
    email: str | None
    phone: str | None
    purchase_date: str | None
    tracking_url: str | None
    order_details: str | None = None

    def merge_order(self, lookup: OrderLookupResult) -> None:
        order = lookup.order
        if not order:
            return
        self.purchase_date = self.purchase_date or first_text(order, ("creationDate",))
        self.customer_name = self.customer_name or extract_customer_name(order)
        self.email = self.email or extract_email(order)
        self.phone = self.phone or extract_phone(order)
        self.order_details = build_order_details(order)
        self.tracking_url = self.tracking_url or lookup.tracking_url


class OrderNotificationService:
    """Decides on, builds and dispatches one notification per webhook.

    Args:
        settings: Service settings (Blip campaign config is read from it).
        order_client: VTEX order lookup used for enrichment.
        log_store: Audit store, or None when no database is configured.
        sender: Callable posting a campaign payload. Defaults to Blip.
        logger: Logger for flow decisions. Defaults to this module's logger.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        order_client: VtexOrderClient,
        log_store: WebhookLogStore | None,
        sender: Sender | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings
        self._order_client = order_client
        self._log_store = log_store
        self._send = sender or functools.partial(
            send_campaign, config=settings.blip, timeout=settings.http_timeout
        )
        self._logger = logger or get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OrderNotificationService":
        """Wire the production collaborators for the given settings."""
        log_store = WebhookLogStore(settings.database_url) if settings.database_url else None
        return cls(
            settings,
            order_client=VtexOrderClient(settings.vtex, timeout=settings.http_timeout),
            log_store=log_store,
        )

    # ------------------------------------------------------------------
    # Collaborator wrappers
    # ------------------------------------------------------------------

    def _save_log(self, entry: WebhookLogEntry) -> None:
        if self._log_store is None:
            self._logger.info(
                "database not configured; webhook log not saved",
                extra={"extra_fields": order_log_context(entry.order_number)},
            )
            return
        self._log_store.save(entry)

    def _already_sent(self, order_number: str, message_template: str) -> bool:
        if self._log_store is None:
            return False
        return self._log_store.already_sent(order_number, message_template)

    # ------------------------------------------------------------------
    # Flow
    # ------------------------------------------------------------------

    def process(self, payload: Any) -> NotificationOutcome:
        """Run the full flow for one decoded webhook body.

        Returns:
            NotificationOutcome; ``kind == "ignored"`` for statuses outside
            the allow-list.

        Raises:
            NotificationDispatchError: If the Blip send failed.
        """
        status = normalize_status(extract_status(payload))
        if not is_allowed_status(status):
            self._logger.info(
                "status ignored",
                extra={"extra_fields": {"status": status or "missing"}},
            )
            return NotificationOutcome(kind="ignored", status=status)

        self._logger.info("allowed status received", extra={"extra_fields": {"status": status}})
        return self.handle_allowed_status(payload, status)

    def handle_allowed_status(self, payload: Any, status: str) -> NotificationOutcome:
        fields = extract_fields(payload)
        order_number = fields.order_number
        resolved = _Resolved(
            customer_name=fields.customer_name,
            email=fields.email,
            phone=fields.phone,
            purchase_date=fields.purchase_date,
            tracking_url=fields.tracking_url,
        )

        if not order_number:
            self._logger.warning(
                "webhook without order number",
                extra={"extra_fields": order_log_context(None, status=status)},
            )
            self._save_log(
                WebhookLogEntry(
                    webhook_payload=payload,
                    status=status,
                    purchase_date=resolved.purchase_date,
                    tracking_url=resolved.tracking_url,
                    note=NOTE_MISSING_ORDER_NUMBER,
                )
            )
            return NotificationOutcome(
                kind="skipped", status=status, reason=NOTE_MISSING_ORDER_NUMBER
            )

        message_template = resolve_message_template(status)
        if not message_template:
            self._logger.warning(
                "status without message template",
                extra={"extra_fields": order_log_context(order_number, status=status)},
            )
            return NotificationOutcome(
                kind="skipped",
                status=status,
                order_number=order_number,
                reason=REASON_NO_TEMPLATE,
            )

        if self._already_sent(order_number, message_template):
            self._logger.info(
                "duplicate detected; message already sent for order/template, nothing resent",
                extra={
                    "extra_fields": order_log_context(
                        order_number, message_template=message_template
                    )
                },
            )
            return NotificationOutcome(
                kind="skipped",
                status=status,
                order_number=order_number,
                message_template=message_template,
                reason=REASON_DUPLICATE,
            )

        lookup = self._order_client.fetch_order(order_number)
        resolved.merge_order(lookup)

        if not (
            resolved.customer_name
            and resolved.email
            and resolved.phone
            and resolved.purchase_date
        ):
            self._logger.warning(
                "required data missing even after vtex lookup",
                extra={
                    "extra_fields": {
                        **order_log_context(order_number, status=status),
                        **presence_flags(
                            customer_name=resolved.customer_name,
                            email=resolved.email,
                            phone=resolved.phone,
                            purchase_date=resolved.purchase_date,
                        ),
                    }
                },
            )
            self._save_log(
                WebhookLogEntry(
                    webhook_payload=payload,
                    status=status,
                    order_number=order_number,
                    purchase_date=resolved.purchase_date,
                    tracking_url=resolved.tracking_url,
                    note=NOTE_MISSING_REQUIRED_DATA,
                    vtex_order_payload=lookup.order,
                )
            )
            return NotificationOutcome(
                kind="skipped",
                status=status,
                order_number=order_number,
                message_template=message_template,
                reason=NOTE_MISSING_REQUIRED_DATA,
            )

        if requires_tracking_url(message_template) and not resolved.tracking_url:
            self._logger.warning(
                "tracking url unavailable",
                extra={"extra_fields": order_log_context(order_number, status=status)},
            )
            self._save_log(
                WebhookLogEntry(
                    webhook_payload=payload,
                    status=status,
                    order_number=order_number,
                    message_template=message_template,
                    purchase_date=resolved.purchase_date,
                    note=NOTE_TRACKING_URL_UNAVAILABLE,
                    vtex_order_payload=lookup.order,
                )
            )
            return NotificationOutcome(
                kind="skipped",
                status=status,
                order_number=order_number,
                message_template=message_template,
                reason=NOTE_TRACKING_URL_UNAVAILABLE,
            )

        context = NotificationContext(
            customer_name=resolved.customer_name,
            email=resolved.email,
            phone=resolved.phone,
            order_number=order_number,
            purchase_date=resolved.purchase_date,
            tracking_url=resolved.tracking_url,
            order_details=resolved.order_details,
        )
        return self._dispatch(payload, status, message_template, context, lookup)

    def _dispatch(
        self,
        payload: Any,
        status: str,
        message_template: str,
        context: NotificationContext,
        lookup: OrderLookupResult,
    ) -> NotificationOutcome:
        self._logger.info(
            "webhook validated and ready to send",
            extra={
                "extra_fields": order_log_context(
                    context.order_number, status=status, message_template=message_template
                )
            },
        )

        blip_payload = build_campaign_payload(context, message_template, self._settings.blip)
        entry = WebhookLogEntry(
            webhook_payload=payload,
            status=status,
            order_number=context.order_number,
            message_template=message_template,
            purchase_date=context.purchase_date,
            tracking_url=context.tracking_url,
            blip_payload=blip_payload,
            vtex_order_payload=lookup.order,
        )

        try:
            blip_response = self._send(blip_payload)
        except Exception as e:
            self._logger.error(
                "blip send failed",
                extra={
                    "extra_fields": order_log_context(
                        context.order_number, error_type=type(e).__name__
                    )
                },
            )
            self._save_log(
                replace(entry, error_message=str(e), error_stack=traceback.format_exc())
            )
            raise NotificationDispatchError(
                str(e), status=status, order_number=context.order_number
            ) from e

        self._save_log(replace(entry, blip_response=blip_response.as_dict()))
        return NotificationOutcome(
            kind="sent",
            status=status,
            order_number=context.order_number,
            message_template=message_template,
            blip_response=blip_response,
        )

