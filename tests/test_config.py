"""Tests for environment configuration."""

from vtexalert.config import (
    DEFAULT_CAMPAIGN_NAME_PREFIX,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_PORT,
    load_settings,
)

FULL_ENV = {
    "BLIP_ENDPOINT": "https://blip.example.com/commands",
    "BLIP_AUTH": "Key abc",
    "CAMPAIGN_NAME_PREFIX": "Loja",
    "CAMPAIGN_TYPE": "Individual",
    "FLOW_ID": "flow-1",
    "STATE_ID": "start",
    "MASTERSTATE": "master-1",
    "VTEX_BASE_URL": "https://loja.vtexcommercestable.com.br/",
    "VTEX_APP_KEY": "key",
    "VTEX_APP_TOKEN": "token",
    "DATABASE_URL": "postgresql://u:p@h/db",
    "API_ROUTE_TOKEN": "route-token",
    "PORT": "8080",
    "HTTP_TIMEOUT": "2.5",
}


class TestLoadSettings:
    def test_full_environment(self):
        settings = load_settings(FULL_ENV)

        assert settings.blip.endpoint == "https://blip.example.com/commands"
        assert settings.blip.auth == "Key abc"
        assert settings.blip.campaign_name_prefix == "Loja"
        assert settings.blip.campaign_type == "Individual"
        assert settings.blip.flow_id == "flow-1"
        assert settings.blip.state_id == "start"
        assert settings.blip.masterstate == "master-1"
        assert settings.blip.is_configured
        assert settings.vtex.base_url == "https://loja.vtexcommercestable.com.br"
        assert settings.database_url == "postgresql://u:p@h/db"
        assert settings.api_route_token == "route-token"
        assert settings.port == 8080
        assert settings.http_timeout == 2.5

    def test_empty_environment_uses_defaults(self):
        settings = load_settings({})

        assert not settings.blip.is_configured
        assert settings.blip.campaign_name_prefix == DEFAULT_CAMPAIGN_NAME_PREFIX
        assert settings.blip.campaign_type == "Batch"
        assert settings.blip.state_id == "onboarding"
        assert settings.vtex is None
        assert settings.database_url is None
        assert settings.api_route_token is None
        assert settings.port == DEFAULT_PORT
        assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT

    def test_partial_vtex_credentials_disable_enrichment(self):
        env = dict(FULL_ENV)
        del env["VTEX_APP_TOKEN"]
        assert load_settings(env).vtex is None

    def test_blank_values_treated_as_missing(self):
        settings = load_settings({"DATABASE_URL": "   ", "API_ROUTE_TOKEN": ""})
        assert settings.database_url is None
        assert settings.api_route_token is None

    def test_invalid_port_falls_back(self):
        assert load_settings({"PORT": "abc"}).port == DEFAULT_PORT

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("FLOW_ID", "from-env")
        assert load_settings().blip.flow_id == "from-env"
