# tests/test_dependencies.py
from datetime import datetime, timezone
from typing import Annotated, Optional

import httpx
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from mcp_auth_core.dependencies import require_bearer_token
from mcp_auth_core.oauth.models import OAuthConfig, TokenInfo

from conftest import INTROSPECTION_URL, make_jwt

FUTURE_TS = int(datetime(2100, 1, 1, tzinfo=timezone.utc).timestamp())


def _build_app(config: Optional[OAuthConfig], http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    app = FastAPI()
    if config is not None:
        app.state.oauth_config = config
    if http_client is not None:
        app.state.http_client = http_client

    @app.post("/mcp")
    async def mcp_endpoint(token_info: Annotated[Optional[TokenInfo], Depends(require_bearer_token)]):
        return {"sub": token_info.sub if token_info else None}

    return app


def test_valid_local_token(local_config):
    client = TestClient(_build_app(local_config))
    token = make_jwt({"sub": "u1", "exp": FUTURE_TS})

    response = client.post("/mcp", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"sub": "u1"}


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "bearer abc"},
        {"Authorization": "Bearer not-a-jwt"},
        {"Authorization": f"Bearer {make_jwt({'exp': 1})}"},
    ],
)
def test_rejections_are_generic_401(local_config, headers):
    client = TestClient(_build_app(local_config))

    response = client.post("/mcp", headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == {
        "error": "invalid_token",
        "error_description": "Invalid or missing bearer token.",
    }
    assert response.headers["www-authenticate"].startswith('Bearer realm="mcp", error="invalid_token"')


def test_oauth_disabled_allows_anonymous_requests():
    client = TestClient(_build_app(OAuthConfig(oauth_enabled=False)))

    response = client.post("/mcp")

    assert response.status_code == 200
    assert response.json() == {"sub": None}


def test_missing_config_is_service_unavailable():
    client = TestClient(_build_app(None))
    assert client.post("/mcp").status_code == 503


def test_shared_http_client_is_used_for_introspection(introspection_config):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"active": True, "sub": "remote-user"})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = TestClient(_build_app(introspection_config, http_client))

    response = client.post("/mcp", headers={"Authorization": "Bearer opaque-token"})

    assert response.status_code == 200
    assert response.json() == {"sub": "remote-user"}
    assert str(seen[0].url) == INTROSPECTION_URL
