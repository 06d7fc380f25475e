"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response

from vtexalert.config import Settings, load_settings
from vtexalert.domain.order_notifications import OrderNotificationService
from vtexalert.observability.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from vtexalert.vtex.client import VtexOrderClient

from .routers import public
from .routes import vtex_orders, webhooks_vtex


def create_app(
    settings: Settings | None = None,
    *,
    service: OrderNotificationService | None = None,
    order_client: VtexOrderClient | None = None,
) -> FastAPI:
    """Create the FastAPI app.

    Args:
        settings: Explicit settings. If None, read from the environment.
        service: Notification service override (tests).
        order_client: VTEX client override for the order lookup route (tests).

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()

    app = FastAPI(
        title="VTEX Alert",
        docs_url=None,
        redoc_url=None,
    )

    app.state.settings = settings
    app.state.notification_service = service or OrderNotificationService.from_settings(settings)
    app.state.order_client = order_client or VtexOrderClient(
        settings.vtex, timeout=settings.http_timeout
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    app.include_router(public.router)
    app.include_router(webhooks_vtex.router)
    app.include_router(vtex_orders.router)

    return app
