"""Service configuration loaded from the environment.

Optional integrations are modelled as capabilities: ``Settings.vtex`` is
``None`` when the VTEX credentials are incomplete and ``database_url`` is
``None`` when no database is configured. Downstream code checks the
capability object, never the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

DEFAULT_CAMPAIGN_NAME_PREFIX = "Hidramais"
DEFAULT_CAMPAIGN_TYPE = "Batch"
DEFAULT_STATE_ID = "onboarding"
DEFAULT_PORT = 3000
DEFAULT_HTTP_TIMEOUT = 10.0


@dataclass(frozen=True)
class BlipConfig:
    """Blip full-campaign settings.

    Endpoint and auth may be empty; the sender refuses to dispatch in that
    case instead of failing at startup.
    """

    endpoint: str = ""
    auth: str = ""
    campaign_name_prefix: str = DEFAULT_CAMPAIGN_NAME_PREFIX
    campaign_type: str = DEFAULT_CAMPAIGN_TYPE
    flow_id: str = ""
    state_id: str = DEFAULT_STATE_ID
    masterstate: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.auth)


@dataclass(frozen=True)
class VtexConfig:
    """VTEX OMS credentials. Only built when all three values are present."""

    base_url: str
    app_key: str
    app_token: str


@dataclass(frozen=True)
class Settings:
    blip: BlipConfig = field(default_factory=BlipConfig)
    vtex: VtexConfig | None = None
    database_url: str | None = None
    api_route_token: str | None = None
    port: int = DEFAULT_PORT
    http_timeout: float = DEFAULT_HTTP_TIMEOUT


def _get(env: Mapping[str, str], key: str) -> str:
    return env.get(key, "").strip()


def _load_vtex(env: Mapping[str, str]) -> VtexConfig | None:
    base_url = _get(env, "VTEX_BASE_URL")
    app_key = _get(env, "VTEX_APP_KEY")
    app_token = _get(env, "VTEX_APP_TOKEN")
    if not base_url or not app_key or not app_token:
        return None
    return VtexConfig(base_url=base_url.rstrip("/"), app_key=app_key, app_token=app_token)


def _parse_number(raw: str, default, cast):
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        return default


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Frozen Settings instance.
    """
    if env is None:
        env = os.environ

    blip = BlipConfig(
        endpoint=_get(env, "BLIP_ENDPOINT"),
        auth=_get(env, "BLIP_AUTH"),
        campaign_name_prefix=_get(env, "CAMPAIGN_NAME_PREFIX") or DEFAULT_CAMPAIGN_NAME_PREFIX,
        campaign_type=_get(env, "CAMPAIGN_TYPE") or DEFAULT_CAMPAIGN_TYPE,
        flow_id=_get(env, "FLOW_ID"),
        state_id=_get(env, "STATE_ID") or DEFAULT_STATE_ID,
        masterstate=_get(env, "MASTERSTATE"),
    )

    return Settings(
        blip=blip,
        vtex=_load_vtex(env),
        database_url=_get(env, "DATABASE_URL") or None,
        api_route_token=_get(env, "API_ROUTE_TOKEN") or None,
        port=_parse_number(_get(env, "PORT"), DEFAULT_PORT, int),
        http_timeout=_parse_number(_get(env, "HTTP_TIMEOUT"), DEFAULT_HTTP_TIMEOUT, float),
    )
