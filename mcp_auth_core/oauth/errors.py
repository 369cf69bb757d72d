# mcp_auth_core/oauth/errors.py
from enum import Enum
from typing import Optional

from fastapi import HTTPException, status


class AuthErrorKind(str, Enum):
    """Diagnostic category of an authentication failure. Never sent to untrusted clients."""
    MISSING_TOKEN = "missing_token"
    EMPTY_TOKEN = "empty_token"
    INVALID_JWT_STRUCTURE = "invalid_jwt_structure"
    INVALID_JWT_FORMAT = "invalid_jwt_format"
    INVALID_BASE64 = "invalid_base64"
    PAYLOAD_PARSE_FAILURE = "payload_parse_failure"
    TOKEN_EXPIRED = "token_expired"
    TOKEN_NOT_YET_VALID = "token_not_yet_valid"
    TOKEN_INACTIVE = "token_inactive"
    INTROSPECTION_FAILURE = "introspection_failure"
    METADATA_FETCH_FAILURE = "metadata_fetch_failure"
    METADATA_PARSE_FAILURE = "metadata_parse_failure"


class AuthCoreError(Exception):
    """Base class for every failure raised by the authentication core."""

    kind: AuthErrorKind
    default_detail: str = "Authentication error."

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class TokenValidationError(AuthCoreError):
    """A bearer token could not be accepted."""


class EmptyTokenError(TokenValidationError):
    kind = AuthErrorKind.EMPTY_TOKEN
    default_detail = "Empty token"


class InvalidJWTStructureError(TokenValidationError):
    """The token does not have exactly three dot-separated segments."""
    kind = AuthErrorKind.INVALID_JWT_STRUCTURE
    default_detail = "Invalid JWT structure"


class InvalidJWTFormatError(TokenValidationError):
    """The payload segment could not be decoded; `detail` carries the decoder's reason."""
    kind = AuthErrorKind.INVALID_JWT_FORMAT
    default_detail = "Invalid JWT format"


class InvalidBase64Error(TokenValidationError):
    kind = AuthErrorKind.INVALID_BASE64
    default_detail = "Invalid base64url encoding"


class PayloadParseError(TokenValidationError):
    kind = AuthErrorKind.PAYLOAD_PARSE_FAILURE
    default_detail = "Failed to parse JWT payload"


class TokenExpiredError(TokenValidationError):
    kind = AuthErrorKind.TOKEN_EXPIRED
    default_detail = "Token has expired"


class TokenNotYetValidError(TokenValidationError):
    kind = AuthErrorKind.TOKEN_NOT_YET_VALID
    default_detail = "Token not yet valid"


class TokenInactiveError(TokenValidationError):
    """The introspection endpoint reported `active: false`."""
    kind = AuthErrorKind.TOKEN_INACTIVE
    default_detail = "Token is not active"


class IntrospectionError(TokenValidationError):
    """Transport, status or parse failure while calling the introspection endpoint."""
    kind = AuthErrorKind.INTROSPECTION_FAILURE
    default_detail = "Token introspection failed"


class MetadataDiscoveryError(AuthCoreError):
    """The provider's well-known configuration could not be obtained."""


class MetadataFetchError(MetadataDiscoveryError):
    kind = AuthErrorKind.METADATA_FETCH_FAILURE
    default_detail = "Failed to fetch OAuth metadata"


class MetadataParseError(MetadataDiscoveryError):
    kind = AuthErrorKind.METADATA_PARSE_FAILURE
    default_detail = "Failed to parse OAuth metadata"


class OAuthError(HTTPException):
    """Base class for OAuth 2.1 errors that properly formats error responses."""

    def __init__(
        self,
        status_code: int,
        error: str,
        error_description: str | None = None,
        error_uri: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.error = error
        self.error_description = error_description
        self.error_uri = error_uri

        # Build error detail dictionary according to OAuth specification
        detail = {"error": error}
        if error_description:
            detail["error_description"] = error_description
        if error_uri:
            detail["error_uri"] = error_uri

        super().__init__(
            status_code=status_code,
            detail=detail,
            headers=headers or {"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenError(OAuthError):
    """
    The access token provided is expired, revoked, malformed, or
    invalid for other reasons. The resource SHOULD respond with
    the HTTP 401 (Unauthorized) status code.
    (RFC 6750 - Section 3.1)
    """

    def __init__(
        self,
        error_description: str | None = "Invalid or missing bearer token.",
        realm: str | None = None
    ):
        realm_value = realm if realm else "mcp"
        www_authenticate = f'Bearer realm="{realm_value}", error="invalid_token"'
        if error_description:
            www_authenticate += f', error_description="{error_description}"'

        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error="invalid_token",
            error_description=error_description,
            headers={"WWW-Authenticate": www_authenticate},
        )
