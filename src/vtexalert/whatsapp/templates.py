"""Approved WhatsApp message templates, keyed by order status.

The template text lives in Blip; this module only decides which template a
status maps to and which positional params it needs.
"""

TEMPLATE_READY_FOR_HANDLING = "pedido_ready_for_handling_v1"
TEMPLATE_SHIPPING_CONFIRMATION = "pedido_com_confirmacao_de_envio_v1"

TEMPLATES_BY_STATUS: dict[str, str] = {
    "ready-for-handling": TEMPLATE_READY_FOR_HANDLING,
    "handling": TEMPLATE_READY_FOR_HANDLING,
    "invoiced": TEMPLATE_SHIPPING_CONFIRMATION,
    "shipped": TEMPLATE_SHIPPING_CONFIRMATION,
}

# Templates whose param 4 (tracking URL) is mandatory
_TRACKING_TEMPLATES = frozenset({TEMPLATE_SHIPPING_CONFIRMATION})


def resolve_message_template(status: str) -> str | None:
    """Template for a normalized status, or None when no message is sent."""
    return TEMPLATES_BY_STATUS.get(status)


def requires_tracking_url(message_template: str) -> bool:
    return message_template in _TRACKING_TEMPLATES
