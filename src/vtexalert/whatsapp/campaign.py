"""Blip full-campaign payload for a single WhatsApp template message.

Blip renders the template from ``audiences[].messageParams`` using the keys
listed in ``message.messageParams``; both must agree or the message is
rejected or rendered with blanks.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from typing import Any

from vtexalert.config import BlipConfig
from vtexalert.domain.dates import format_date_if_valid

BLIP_POSTMASTER = "postmaster@activecampaign.msging.net"
BLIP_CAMPAIGN_URI = "/campaign/full"
BLIP_CAMPAIGN_MEDIA_TYPE = "application/vnd.iris.activecampaign.full-campaign+json"
CHANNEL_TYPE = "WhatsApp"
SOURCE_APPLICATION = "API de Alerta Webhook VTEX"

BRAZIL_COUNTRY_CODE = "55"

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class NotificationContext:
    """Resolved customer/order data, after enrichment.

    Only built once name, email, phone, order number and purchase date are
    all present.
    """

    customer_name: str
    email: str
    phone: str
    order_number: str
    purchase_date: str
    tracking_url: str | None = None
    order_details: str | None = None


def normalize_phone(phone: str) -> str:
    """Digits only, Brazilian country code, leading ``+``.

    >>> normalize_phone("(11) 98765-4321")
    '+5511987654321'
    """
    digits = _NON_DIGITS.sub("", phone)
    if not digits.startswith(BRAZIL_COUNTRY_CODE):
        digits = f"{BRAZIL_COUNTRY_CODE}{digits}"
    return f"+{digits}"


def campaign_name(prefix: str) -> str:
    # Blip rejects reused campaign names, retries included
    return f"{prefix} {uuid.uuid4()}"


def build_message_params(context: NotificationContext) -> tuple[dict[str, str], list[str]]:
    """Audience params and the positional keys the template must read."""
    params: dict[str, str] = {
        "order": context.order_number,
        "1": context.customer_name,
        "2": context.order_number,
        "3": format_date_if_valid(context.purchase_date),
    }
    positional = ["1", "2", "3"]

    if context.tracking_url:
        params["4"] = context.tracking_url
        positional.append("4")
    if context.order_details:
        params["pedido"] = context.order_details

    return params, positional


def build_campaign_payload(
    context: NotificationContext,
    message_template: str,
    config: BlipConfig,
) -> dict[str, Any]:
    """Build the Blip ``/campaign/full`` command for one recipient.

    Args:
        context: Resolved notification data.
        message_template: Approved template name.
        config: Blip campaign settings.

    Returns:
        JSON-serializable command dict.
    """
    message_params, positional = build_message_params(context)

    return {
        "id": str(uuid.uuid4()),
        "to": BLIP_POSTMASTER,
        "method": "set",
        "uri": BLIP_CAMPAIGN_URI,
        "type": BLIP_CAMPAIGN_MEDIA_TYPE,
        "resource": {
            "campaign": {
                "name": campaign_name(config.campaign_name_prefix),
                "campaignType": config.campaign_type,
                "flowId": config.flow_id,
                "stateId": config.state_id,
                "masterstate": config.masterstate,
                "channelType": CHANNEL_TYPE,
                "sourceApplication": SOURCE_APPLICATION,
            },
            "audiences": [
                {
                    "recipient": normalize_phone(context.phone),
                    "messageParams": message_params,
                }
            ],
            "message": {
                "messageTemplate": message_template,
                "messageParams": positional,
                "channelType": CHANNEL_TYPE,
            },
        },
    }
