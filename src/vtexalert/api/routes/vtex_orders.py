"""Order lookup route: a compact view of a VTEX order for support tooling."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from vtexalert.api.route_auth import require_api_route_token
from vtexalert.observability.logging import get_logger
from vtexalert.observability.redaction import order_log_context
from vtexalert.vtex.client import VtexOrderClient
from vtexalert.vtex.orders import summarize_order

router = APIRouter(prefix="/api/vtex", tags=["vtex"])

logger = get_logger(__name__)


class PedidoResumo(BaseModel):
    status: str | None = None
    dataCompra: str | None = None
    numeroPedido: str | None = None
    descricaoProduto: str = ""
    urlRastreamento: str | None = None


class PedidoResponse(BaseModel):
    ok: bool = True
    pedidoId: str
    data: PedidoResumo


def _get_order_client(request: Request) -> VtexOrderClient:
    """VTEX client bound to the app (allows test injection)."""
    return request.app.state.order_client


@router.get(
    "/orders/{pedido_id}",
    response_model=PedidoResponse,
    dependencies=[Depends(require_api_route_token)],
)
def get_order(pedido_id: str, request: Request):
    """Look up an order in VTEX.

    Returns:
        200 with the order summary.
        400 if the id is blank.
        502 if VTEX returned no order or the lookup blew up.
    """
    pedido_id = pedido_id.strip()
    if not pedido_id:
        return JSONResponse(
            status_code=400,
            content={"ok": False, "message": "pedidoId é obrigatório"},
        )

    client = _get_order_client(request)
    try:
        result = client.fetch_order(pedido_id)
    except Exception as e:
        logger.exception(
            "order lookup failed",
            extra={"extra_fields": order_log_context(pedido_id, error_type=type(e).__name__)},
        )
        return JSONResponse(
            status_code=502,
            content={"ok": False, "pedidoId": pedido_id, "message": str(e)},
        )

    if not result.order:
        return JSONResponse(
            status_code=502,
            content={
                "ok": False,
                "message": "Falha ao buscar pedido na VTEX",
                "pedidoId": pedido_id,
            },
        )

    summary = summarize_order(result.order, result.tracking_url)
    return PedidoResponse(
        pedidoId=pedido_id,
        data=PedidoResumo(
            status=summary.status,
            dataCompra=summary.purchase_date,
            numeroPedido=summary.order_number,
            descricaoProduto=summary.product_description,
            urlRastreamento=summary.tracking_url,
        ),
    )
