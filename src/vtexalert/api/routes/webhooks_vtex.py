"""VTEX order-status webhook.

Response contract seen by VTEX:
- 202: status outside the allow-list, nothing done.
- 200: allowed status handled (sent, or skipped for a reason recorded
  server-side).
- 502: the flow raised (usually a failed Blip send); VTEX may redeliver.

Security: never log the body itself (it carries customer PII), only its
shape via safe_log_context.
"""

import json
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from vtexalert.domain.order_notifications import (
    NotificationDispatchError,
    OrderNotificationService,
)
from vtexalert.observability.correlation import get_correlation_id
from vtexalert.observability.logging import get_logger
from vtexalert.observability.redaction import order_log_context, safe_log_context
from vtexalert.vtex.extract import extract_fields, normalize_status

router = APIRouter(tags=["webhooks"])

logger = get_logger(__name__)

IGNORED_MESSAGE = "Status ignorado"


def _get_service(request: Request) -> OrderNotificationService:
    """Notification service bound to the app (allows test injection)."""
    return request.app.state.notification_service


async def _read_payload(request: Request) -> Any:
    """Decoded JSON body; an unreadable body becomes an empty event."""
    try:
        body_bytes = await request.body()
        return json.loads(body_bytes) if body_bytes else {}
    except (ValueError, UnicodeDecodeError):
        logger.warning(
            "invalid json body",
            extra={"extra_fields": safe_log_context(correlationId=get_correlation_id())},
        )
        return {}


@router.post("/webhook/vtex")
async def vtex_webhook(request: Request) -> JSONResponse:
    """Receive a VTEX order-status hook and notify the customer if warranted.

    The flow does blocking I/O (VTEX, Blip, PostgreSQL), so it runs in the
    threadpool.
    """
    payload = await _read_payload(request)
    logger.info(
        "vtex webhook received",
        extra={"extra_fields": safe_log_context(body=payload)},
    )

    service = _get_service(request)
    try:
        outcome = await run_in_threadpool(service.process, payload)
    except NotificationDispatchError as e:
        logger.error(
            "webhook processing failed",
            extra={"extra_fields": order_log_context(e.order_number, status=e.status)},
        )
        return JSONResponse(
            status_code=502,
            content={"ok": False, "handled": False, "status": e.status, "message": str(e)},
        )
    except Exception as e:
        fields = extract_fields(payload)
        status = normalize_status(fields.status)
        logger.exception(
            "webhook processing failed unexpectedly",
            extra={
                "extra_fields": order_log_context(
                    fields.order_number, status=status, error_type=type(e).__name__
                )
            },
        )
        return JSONResponse(
            status_code=502,
            content={"ok": False, "handled": False, "status": status, "message": str(e)},
        )

    if not outcome.handled:
        return JSONResponse(
            status_code=202,
            content={
                "ok": True,
                "handled": False,
                "status": outcome.status,
                "message": IGNORED_MESSAGE,
            },
        )

    fields = extract_fields(payload)
    return JSONResponse(
        status_code=200,
        content={
            "ok": True,
            "handled": True,
            "status": outcome.status,
            "customerName": fields.customer_name,
            "orderNumber": fields.order_number,
            "purchaseDate": fields.purchase_date,
        },
    )
