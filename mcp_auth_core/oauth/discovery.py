# mcp_auth_core/oauth/discovery.py
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .errors import MetadataFetchError, MetadataParseError
from .http import DEFAULT_HTTP_TIMEOUT_SECONDS, http_client_scope
from .models import OAuthConfig, OAuthMetadata

logger = logging.getLogger(__name__)

WELL_KNOWN_OPENID_CONFIGURATION = "/.well-known/openid-configuration"


async def discover_oauth_metadata(
    issuer_url: str,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> OAuthMetadata:
    """
    Fetches `<issuer_url>/.well-known/openid-configuration` and parses it.

    A fresh OAuthMetadata is returned on every call; nothing is cached here.

    Raises:
        MetadataFetchError: transport failure, timeout or non-2xx status
        MetadataParseError: the body is not JSON or lacks a required field
    """
    well_known_url = issuer_url + WELL_KNOWN_OPENID_CONFIGURATION
    logger.debug(f"Discovering OAuth metadata at {well_known_url}")

    try:
        async with http_client_scope(http_client, timeout) as client:
            response = await client.get(
                well_known_url,
                headers={"Accept": "application/json"},
                timeout=timeout,
            )
            response.raise_for_status()
    except httpx.HTTPStatusError as e_http:
        raise MetadataFetchError(
            f"Metadata endpoint {well_known_url} returned HTTP {e_http.response.status_code}"
        ) from e_http
    except httpx.HTTPError as e_transport:
        raise MetadataFetchError(
            f"Could not fetch metadata from {well_known_url}: {e_transport}"
        ) from e_transport

    try:
        return OAuthMetadata.model_validate(response.json())
    except (ValueError, ValidationError) as e_parse:
        raise MetadataParseError(
            f"Invalid metadata document at {well_known_url}: {e_parse}"
        ) from e_parse


def build_server_metadata(config: OAuthConfig, base_url: str) -> OAuthMetadata:
    """The authorization server metadata this server advertises, derived from `config`."""
    base = base_url.rstrip("/")
    return OAuthMetadata(
        issuer=base,
        authorization_endpoint=f"{base}/authorize",
        token_endpoint=f"{base}/token",
        scopes_supported=list(config.supported_scopes),
        response_types_supported=list(config.supported_response_types),
        grant_types_supported=list(config.supported_grant_types),
        token_endpoint_auth_methods_supported=list(config.supported_auth_methods),
        code_challenge_methods_supported=list(config.supported_code_challenge_methods),
    )
