"""Outbound WhatsApp campaigns via Blip.

Security: NEVER log the recipient or message params. Only log hashes,
the campaign name and the template.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from vtexalert.config import DEFAULT_HTTP_TIMEOUT, BlipConfig
from vtexalert.observability.logging import get_logger
from vtexalert.observability.redaction import hash_identifier, safe_log_context

logger = get_logger(__name__)


class BlipConfigError(RuntimeError):
    """Raised when BLIP_ENDPOINT or BLIP_AUTH is not configured."""

    pass


class BlipSendError(Exception):
    """Raised when Blip answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Erro Blip: {status_code} {body}")
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class BlipResponse:
    status: int
    body: str

    def as_dict(self) -> dict[str, Any]:
        return {"status": self.status, "body": self.body}


def _campaign_log_context(payload: dict[str, Any]) -> dict[str, str]:
    resource = payload.get("resource", {})
    campaign = resource.get("campaign", {})
    message = resource.get("message", {})
    audiences = resource.get("audiences") or [{}]
    recipient = audiences[0].get("recipient", "")
    return {
        "campaign": campaign.get("name", ""),
        "message_template": message.get("messageTemplate", ""),
        **safe_log_context(
            to_hash=hash_identifier(recipient) if recipient else None,
            param_count=len(message.get("messageParams", [])),
        ),
    }


def send_campaign(
    payload: dict[str, Any],
    config: BlipConfig,
    *,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> BlipResponse:
    """POST a campaign command to Blip.

    Args:
        payload: Command built by ``build_campaign_payload``.
        config: Blip settings (endpoint and auth header value).
        timeout: Request timeout in seconds.

    Returns:
        BlipResponse with the HTTP status and raw body text.

    Raises:
        BlipConfigError: If endpoint or auth is missing.
        BlipSendError: If Blip answers with a non-2xx status.
        requests.RequestException: On network errors.
    """
    if not config.endpoint:
        raise BlipConfigError("BLIP_ENDPOINT not configured")
    if not config.auth:
        raise BlipConfigError("BLIP_AUTH not configured")

    log_ctx = _campaign_log_context(payload)
    logger.info("sending campaign to blip", extra={"extra_fields": log_ctx})

    response = requests.post(
        config.endpoint,
        json=payload,
        headers={
            "Authorization": config.auth,
            "Content-Type": "application/json",
        },
        timeout=timeout,
    )

    if not response.ok:
        logger.error(
            "blip responded with error",
            extra={"extra_fields": {**log_ctx, "status_code": str(response.status_code)}},
        )
        raise BlipSendError(response.status_code, response.text)

    logger.info(
        "blip accepted campaign",
        extra={"extra_fields": {**log_ctx, "status_code": str(response.status_code)}},
    )
    return BlipResponse(status=response.status_code, body=response.text)
