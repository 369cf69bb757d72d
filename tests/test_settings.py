# tests/test_settings.py
import json

import pytest
from pydantic import ValidationError

from mcp_auth_core.oauth.models import OAuthGrantType
from mcp_auth_core.settings import Settings, load_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    # Keep a developer's .env file out of these tests
    monkeypatch.setitem(Settings.model_config, "env_file", None)


def test_defaults_build_a_disabled_config():
    config = Settings().to_oauth_config()

    assert config.oauth_enabled is False
    assert config.token_validation_endpoint is None
    assert config.require_https is True
    assert config.supported_code_challenge_methods == ["S256"]


def test_reads_prefixed_environment(monkeypatch):
    providers = [{
        "provider_name": "corp",
        "client_id": "mcp",
        "authorization_endpoint": "https://sso.corp.example/authorize",
        "token_endpoint": "https://sso.corp.example/token",
        "grant_types": ["authorization_code", "client_credentials"],
    }]
    monkeypatch.setenv("MCP_AUTH_OAUTH_ENABLED", "true")
    monkeypatch.setenv("MCP_AUTH_OAUTH_PROVIDERS", json.dumps(providers))
    monkeypatch.setenv("MCP_AUTH_TOKEN_VALIDATION_ENDPOINT", "https://sso.corp.example/introspect")
    monkeypatch.setenv("MCP_AUTH_SUPPORTED_SCOPES", '["mcp:read"]')
    monkeypatch.setenv("MCP_AUTH_INTROSPECTION_TIMEOUT_SECONDS", "2.5")

    settings = load_settings()
    config = settings.to_oauth_config()

    assert settings.introspection_timeout_seconds == 2.5
    assert config.oauth_enabled is True
    assert config.token_validation_endpoint == "https://sso.corp.example/introspect"
    assert config.supported_scopes == ["mcp:read"]
    assert config.oauth_providers[0].grant_types == [
        OAuthGrantType.AUTHORIZATION_CODE,
        OAuthGrantType.CLIENT_CREDENTIALS,
    ]


def test_policy_violations_surface_when_building_config(monkeypatch):
    monkeypatch.setenv("MCP_AUTH_OAUTH_ENABLED", "true")

    settings = Settings()
    with pytest.raises(ValidationError):
        settings.to_oauth_config()
