# mcp_auth_core/dependencies.py
import logging
from typing import Annotated, Optional

import httpx
from fastapi import Depends, Header, HTTPException, Request, status

from .oauth.errors import InvalidTokenError
from .oauth.models import OAuthConfig, TokenInfo
from .oauth.validator import authenticate_request

logger = logging.getLogger(__name__)


def get_oauth_config(request: Request) -> OAuthConfig:
    """
    Returns the OAuthConfig the application stored in `app.state.oauth_config`
    at startup.
    """
    config = getattr(request.app.state, "oauth_config", None)
    if config is None:
        logger.critical("app.state.oauth_config is not set. Bearer authentication cannot run.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication is not configured on the server.",
        )
    return config


def get_http_client(request: Request) -> Optional[httpx.AsyncClient]:
    """Shared client from `app.state.http_client`, if the application created one."""
    return getattr(request.app.state, "http_client", None)


async def require_bearer_token(
    config: Annotated[OAuthConfig, Depends(get_oauth_config)],
    http_client: Annotated[Optional[httpx.AsyncClient], Depends(get_http_client)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> Optional[TokenInfo]:
    """
    Authenticates the request's bearer token.

    Returns None when OAuth is disabled. Any failure becomes a generic 401; the
    specific reason is only logged.
    """
    if not config.oauth_enabled:
        return None

    result = await authenticate_request(config, authorization, http_client=http_client)
    if not result.authenticated:
        raise InvalidTokenError(error_description=result.public_message)

    return result.token_info
