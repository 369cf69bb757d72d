# mcp_auth_core/oauth/validator.py
import logging
from datetime import datetime
from typing import Optional

import httpx
from pydantic import BaseModel

from .bearer import extract_bearer_token
from .claims import decode_jwt_payload, validate_token_claims
from .errors import (
    AuthErrorKind,
    EmptyTokenError,
    InvalidJWTFormatError,
    InvalidJWTStructureError,
    TokenValidationError,
)
from .http import DEFAULT_HTTP_TIMEOUT_SECONDS
from .introspection import introspect_token
from .models import OAuthConfig, TokenInfo

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Invalid or missing bearer token."


async def validate_bearer_token(
    config: OAuthConfig,
    token: str,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> TokenInfo:
    """
    Validates a raw bearer token.

    With `config.token_validation_endpoint` set, the decision is delegated to
    the introspection endpoint and its result returned as is. Otherwise the
    token is read locally as a compact JWT and its exp/nbf claims checked.

    The local path does not verify the JWT signature: `active=True` on the
    result means "well-formed and inside its validity window" only.

    Raises:
        TokenValidationError: one of its subclasses, identifying the failure
    """
    if not token:
        raise EmptyTokenError()

    if config.token_validation_endpoint:
        return await introspect_token(
            config.token_validation_endpoint,
            token,
            http_client=http_client,
            timeout=timeout,
        )

    segments = token.split(".")
    if len(segments) != 3:
        raise InvalidJWTStructureError()
    _header, payload, _signature = segments

    try:
        token_info = decode_jwt_payload(payload)
    except TokenValidationError as e_decode:
        raise InvalidJWTFormatError(f"Invalid JWT format: {e_decode.detail}") from e_decode

    validate_token_claims(token_info, now)

    logger.debug(f"Locally decoded token accepted (sub={token_info.sub!r}).")
    return token_info.model_copy(update={"active": True})


class AuthenticationResult(BaseModel):
    """Outcome of authenticating one request, for transport layers that branch on a value."""
    authenticated: bool
    token_info: Optional[TokenInfo] = None
    error_kind: Optional[AuthErrorKind] = None
    error_detail: Optional[str] = None  # internal diagnostics only

    @property
    def public_message(self) -> Optional[str]:
        """What may be shown to the client; never names the failing check."""
        return None if self.authenticated else UNAUTHORIZED_MESSAGE


async def authenticate_request(
    config: OAuthConfig,
    authorization: Optional[str],
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> AuthenticationResult:
    """
    Authenticates a request from its `Authorization` header value.

    Never raises for authentication failures; the failure kind is returned in
    the result and logged.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        logger.warning("Request rejected: missing or malformed Authorization header.")
        return AuthenticationResult(
            authenticated=False,
            error_kind=AuthErrorKind.MISSING_TOKEN,
            error_detail="Authorization header is not of the form 'Bearer <token>'",
        )

    try:
        token_info = await validate_bearer_token(
            config, token, http_client=http_client, now=now, timeout=timeout
        )
    except TokenValidationError as e:
        logger.warning(f"Request rejected: bearer token failed validation ({e.kind.value}).")
        return AuthenticationResult(
            authenticated=False,
            error_kind=e.kind,
            error_detail=e.detail,
        )

    return AuthenticationResult(authenticated=True, token_info=token_info)
