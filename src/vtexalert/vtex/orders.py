"""Helpers over a VTEX OMS order record (``GET /api/oms/pvt/orders/{id}``)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from vtexalert.domain.dates import format_date_if_valid

from .extract import as_dict, as_list, first_text, tracking_url_from_entries


@dataclass(frozen=True)
class OrderSummary:
    """Compact view of an order for the lookup endpoint."""

    status: str | None
    purchase_date: str | None
    order_number: str | None
    product_description: str
    tracking_url: str | None


def pick_tracking_url(order: Any) -> str | None:
    """Tracking URL from package attachments, then from logistics info."""
    data = as_dict(order)
    attachment = as_dict(data.get("packageAttachment"))
    url = tracking_url_from_entries(attachment.get("packages"))
    if url:
        return url

    shipping = as_dict(data.get("shippingData"))
    return tracking_url_from_entries(shipping.get("logisticsInfo"))


def build_order_details(order: Any) -> str | None:
    """Serialize the order into the JSON text sent as the ``pedido`` message param."""
    if not isinstance(order, dict) or not order:
        return None

    products = []
    for item in as_list(order.get("items")):
        item = as_dict(item)
        products.append({"nome": item.get("name"), "quantidade": item.get("quantity")})

    details = {
        "status": order.get("statusDescription"),
        "data": order.get("creationDate"),
        "numero_pedido": order.get("orderId"),
        "produtos": products,
    }
    return json.dumps(details, ensure_ascii=False)


def describe_products(order: Any) -> str:
    names = []
    for item in as_list(as_dict(order).get("items")):
        name = first_text(item, ("name",))
        if name and name.strip():
            names.append(f"• {name.strip()}")
    return "\n".join(names)


def summarize_order(order: Any, tracking_url: str | None) -> OrderSummary:
    creation_date = first_text(order, ("creationDate",))
    return OrderSummary(
        status=first_text(order, ("statusDescription", "status")),
        purchase_date=format_date_if_valid(creation_date) if creation_date else None,
        order_number=first_text(order, ("orderId",)),
        product_description=describe_products(order),
        tracking_url=tracking_url,
    )
