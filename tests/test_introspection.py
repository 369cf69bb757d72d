# tests/test_introspection.py
import json

import httpx
import pytest

from mcp_auth_core.oauth.errors import AuthErrorKind, IntrospectionError, TokenInactiveError
from mcp_auth_core.oauth.introspection import introspect_token

from conftest import INTROSPECTION_URL


@pytest.mark.asyncio
async def test_active_token_is_returned(mock_http_client, recorded_requests):
    async with mock_http_client({"active": True, "sub": "u1", "scope": "mcp:read", "exp": 4102444800}) as client:
        info = await introspect_token(INTROSPECTION_URL, "opaque-token", http_client=client)

    assert info.active is True
    assert info.sub == "u1"
    assert info.scopes == ["mcp:read"]

    request = recorded_requests[0]
    assert request.method == "POST"
    assert str(request.url) == INTROSPECTION_URL
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"token": "opaque-token"}


@pytest.mark.asyncio
async def test_inactive_token(mock_http_client):
    async with mock_http_client({"active": False}) as client:
        with pytest.raises(TokenInactiveError) as exc_info:
            await introspect_token(INTROSPECTION_URL, "revoked", http_client=client)
    assert exc_info.value.kind is AuthErrorKind.TOKEN_INACTIVE


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"sub": "u1"},
        {"active": "maybe"},
        {"active": "yes"},
        {"active": "true"},
        {"active": 1},
        {"active": True, "exp": "4102444800"},
        {"active": True, "nbf": True},
        [True],
        "active",
    ],
)
async def test_malformed_response_is_introspection_failure(mock_http_client, body):
    async with mock_http_client(body) as client:
        with pytest.raises(IntrospectionError) as exc_info:
            await introspect_token(INTROSPECTION_URL, "t", http_client=client)
    assert exc_info.value.kind is AuthErrorKind.INTROSPECTION_FAILURE


@pytest.mark.asyncio
async def test_non_json_response_is_introspection_failure(mock_http_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    async with mock_http_client(handler=handler) as client:
        with pytest.raises(IntrospectionError):
            await introspect_token(INTROSPECTION_URL, "t", http_client=client)


@pytest.mark.asyncio
async def test_error_status_is_introspection_failure(mock_http_client):
    async with mock_http_client({"error": "server_error"}, status_code=503) as client:
        with pytest.raises(IntrospectionError) as exc_info:
            await introspect_token(INTROSPECTION_URL, "t", http_client=client)
    assert "503" in exc_info.value.detail


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc",
    [httpx.ConnectError("connection refused"), httpx.ReadTimeout("timed out")],
)
async def test_transport_failure_is_introspection_failure(mock_http_client, exc):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    async with mock_http_client(handler=handler) as client:
        with pytest.raises(IntrospectionError) as exc_info:
            await introspect_token(INTROSPECTION_URL, "t", http_client=client)
    assert isinstance(exc_info.value.__cause__, httpx.HTTPError)
