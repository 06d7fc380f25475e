"""Tests for the app factory, health endpoint and correlation middleware."""

from fastapi.testclient import TestClient

from helpers import FakeLogStore, FakeOrderClient, LogRecorder
from vtexalert.api.factory import create_app
from vtexalert.config import Settings
from vtexalert.domain.order_notifications import OrderNotificationService


def _client(settings=None):
    settings = settings or Settings()
    service = OrderNotificationService(
        settings,
        order_client=FakeOrderClient(),
        log_store=FakeLogStore(),
        logger=LogRecorder(),
    )
    return TestClient(create_app(settings, service=service))


class TestHealth:
    def test_health_returns_ok(self):
        response = _client().get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestRoutesMounted:
    def test_webhook_route(self):
        response = _client().post("/webhook/vtex", json={})
        assert response.status_code == 202

    def test_order_route_guarded(self):
        response = _client().get("/api/vtex/orders/123")
        assert response.status_code == 401

    def test_docs_disabled(self):
        assert _client().get("/docs").status_code == 404


class TestWiring:
    def test_default_service_built_from_settings(self):
        app = create_app(Settings())
        service = app.state.notification_service
        assert isinstance(service, OrderNotificationService)
        assert not app.state.order_client.is_configured

    def test_settings_exposed_on_state(self):
        settings = Settings(api_route_token="t")
        app = create_app(settings)
        assert app.state.settings is settings


class TestCorrelationId:
    def test_generates_correlation_id(self):
        response = _client().get("/health")
        cid = response.headers["X-Correlation-ID"]
        assert len(cid) == 36  # UUID length

    def test_preserves_incoming_correlation_id(self):
        response = _client().get("/health", headers={"X-Correlation-ID": "test-123"})
        assert response.headers["X-Correlation-ID"] == "test-123"
