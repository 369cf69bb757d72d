# mcp_auth_core/oauth/introspection.py
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .errors import IntrospectionError, TokenInactiveError
from .http import DEFAULT_HTTP_TIMEOUT_SECONDS, http_client_scope
from .models import TokenInfo

logger = logging.getLogger(__name__)


async def introspect_token(
    endpoint: str,
    token: str,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> TokenInfo:
    """
    Asks the authorization server whether `token` is currently active (RFC 7662).

    Sends `POST <endpoint>` with the JSON body `{"token": token}`.

    Raises:
        TokenInactiveError: the server answered with `active: false`
        IntrospectionError: transport failure, timeout, non-2xx status or an
            unparsable response body
    """
    logger.debug(f"Introspecting token at {endpoint}")

    try:
        async with http_client_scope(http_client, timeout) as client:
            response = await client.post(
                endpoint,
                json={"token": token},
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                timeout=timeout,
            )
            response.raise_for_status()
    except httpx.HTTPStatusError as e_http:
        logger.debug(f"Introspection endpoint returned HTTP {e_http.response.status_code}")
        raise IntrospectionError(
            f"Introspection endpoint returned HTTP {e_http.response.status_code}"
        ) from e_http
    except httpx.HTTPError as e_transport:
        logger.debug(f"Introspection request failed: {e_transport!r}")
        raise IntrospectionError(f"Introspection request failed: {e_transport}") from e_transport

    try:
        token_info = TokenInfo.model_validate(response.json())
    except (ValueError, ValidationError) as e_parse:
        raise IntrospectionError(f"Could not parse introspection response: {e_parse}") from e_parse

    if not token_info.active:
        raise TokenInactiveError()

    return token_info
