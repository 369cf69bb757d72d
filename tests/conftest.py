# tests/conftest.py
import base64
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from mcp_auth_core.oauth.models import OAuthConfig, OAuthProvider

INTROSPECTION_URL = "https://auth.example.com/introspect"


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def make_jwt(claims: Dict[str, Any], header: Dict[str, Any] | None = None) -> str:
    """Compact JWT with an arbitrary (unchecked) signature segment."""
    header = header or {"alg": "RS256", "typ": "JWT"}
    return ".".join([
        b64url(json.dumps(header).encode("utf-8")),
        b64url(json.dumps(claims).encode("utf-8")),
        b64url(b"not-a-real-signature"),
    ])


@pytest.fixture
def provider() -> OAuthProvider:
    return OAuthProvider(
        provider_name="example",
        client_id="mcp-client",
        authorization_endpoint="https://auth.example.com/authorize",
        token_endpoint="https://auth.example.com/token",
        scopes=["mcp:read"],
        requires_pkce=True,
    )


@pytest.fixture
def local_config(provider: OAuthProvider) -> OAuthConfig:
    """Config without an introspection endpoint: tokens are decoded locally."""
    return OAuthConfig(oauth_enabled=True, oauth_providers=[provider])


@pytest.fixture
def introspection_config(provider: OAuthProvider) -> OAuthConfig:
    return OAuthConfig(
        oauth_enabled=True,
        oauth_providers=[provider],
        token_validation_endpoint=INTROSPECTION_URL,
    )


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def mock_http_client(recorded_requests: List[httpx.Request]) -> Callable[..., httpx.AsyncClient]:
    """
    Builds an AsyncClient whose transport answers every request with `handler`
    (or a fixed JSON body), recording the requests it receives.
    """
    def factory(
        json_body: Any = None,
        status_code: int = 200,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> httpx.AsyncClient:
        def respond(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            if handler is not None:
                return handler(request)
            return httpx.Response(status_code, json=json_body)

        return httpx.AsyncClient(transport=httpx.MockTransport(respond))

    return factory
