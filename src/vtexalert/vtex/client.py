"""VTEX OMS order lookup.

Enrichment is best effort: a missing configuration, an HTTP error or an
unreadable body all resolve to an empty ``OrderLookupResult`` and a log
line, never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests

from vtexalert.config import DEFAULT_HTTP_TIMEOUT, VtexConfig
from vtexalert.observability.logging import get_logger
from vtexalert.observability.redaction import order_log_context

from .orders import pick_tracking_url

logger = get_logger(__name__)

ORDER_PATH = "/api/oms/pvt/orders/{order_number}"


@dataclass(frozen=True)
class OrderLookupResult:
    tracking_url: str | None = None
    order: dict[str, Any] | None = None


EMPTY_RESULT = OrderLookupResult()


def _headers(config: VtexConfig) -> dict[str, str]:
    return {
        "X-VTEX-API-AppKey": config.app_key,
        "X-VTEX-API-AppToken": config.app_token,
        "Accept": "application/json",
        "Content-Type": "application/json",
    }


def order_url(config: VtexConfig, order_number: str) -> str:
    """OMS order URL; the id is percent-encoded as a single path segment."""
    path = ORDER_PATH.format(order_number=quote(order_number, safe=""))
    return f"{config.base_url}{path}"


class VtexOrderClient:
    """Reads orders from the VTEX OMS API.

    Usage:
        client = VtexOrderClient(settings.vtex)
        result = client.fetch_order("1234567890-01")
        if result.order:
            ...
    """

    def __init__(
        self,
        config: VtexConfig | None,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return self._config is not None

    def fetch_order(self, order_number: str) -> OrderLookupResult:
        """Fetch an order and the best tracking URL found in it.

        Args:
            order_number: VTEX order id (e.g. ``1234567890-01``).

        Returns:
            OrderLookupResult; both fields are None when VTEX is not
            configured or the lookup failed.
        """
        if self._config is None:
            logger.info(
                "vtex not configured; skipping order lookup",
                extra={"extra_fields": order_log_context(order_number)},
            )
            return EMPTY_RESULT

        try:
            response = self._session.get(
                order_url(self._config, order_number),
                headers=_headers(self._config),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning(
                "vtex order lookup failed",
                extra={
                    "extra_fields": order_log_context(
                        order_number,
                        error_type=type(e).__name__,
                    )
                },
            )
            return EMPTY_RESULT

        if not response.ok:
            logger.warning(
                "vtex responded with error on order lookup",
                extra={
                    "extra_fields": order_log_context(
                        order_number,
                        status_code=response.status_code,
                        body_len=len(response.text or ""),
                    )
                },
            )
            return EMPTY_RESULT

        try:
            order = response.json()
        except ValueError:
            logger.warning(
                "vtex order lookup returned invalid json",
                extra={"extra_fields": order_log_context(order_number)},
            )
            return EMPTY_RESULT

        if not isinstance(order, dict):
            logger.warning(
                "vtex order lookup returned unexpected body",
                extra={
                    "extra_fields": order_log_context(
                        order_number,
                        body_type=type(order).__name__,
                    )
                },
            )
            return EMPTY_RESULT

        logger.info(
            "vtex order fetched",
            extra={"extra_fields": order_log_context(order_number)},
        )
        return OrderLookupResult(tracking_url=pick_tracking_url(order), order=order)
