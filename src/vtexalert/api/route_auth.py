"""API token guard for internal lookup routes.

Accepts the token in ``X-API-Token`` or as ``Authorization: Bearer <token>``.
Fail-closed: without API_ROUTE_TOKEN configured every request is rejected.
"""

from __future__ import annotations

import hmac

from fastapi import HTTPException, Request

from vtexalert.observability.logging import get_logger
from vtexalert.observability.redaction import safe_log_context

logger = get_logger(__name__)

API_TOKEN_HEADER = "X-API-Token"


def extract_api_token(request: Request) -> str | None:
    """Token from X-API-Token, falling back to a Bearer Authorization header."""
    token = request.headers.get(API_TOKEN_HEADER, "").strip()
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def require_api_route_token(request: Request) -> None:
    """FastAPI dependency rejecting requests without the configured token.

    Raises:
        HTTPException: 401 when the token is missing, wrong, or not configured.
    """
    expected = request.app.state.settings.api_route_token
    if not expected:
        logger.error(
            "API_ROUTE_TOKEN not configured - fail closed",
            extra={"extra_fields": safe_log_context(path=request.url.path)},
        )
        raise HTTPException(status_code=401, detail="unauthorized")

    provided = extract_api_token(request)
    if not provided or not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning(
            "api route auth failed",
            extra={
                "extra_fields": safe_log_context(
                    path=request.url.path,
                    reason="missing_token" if not provided else "token_mismatch",
                )
            },
        )
        raise HTTPException(status_code=401, detail="unauthorized")
