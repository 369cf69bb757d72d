# mcp_auth_core/oauth/__init__.py
# OAuth 2.1 authentication core for MCP servers

# Configuration and data structures
from .models import (
    OAuthGrantType,
    OAuthProvider,
    OAuthConfig,
    PKCEChallenge,
    TokenInfo,
    OAuthMetadata,
)

# Error taxonomy and HTTP-facing errors
from .errors import (
    AuthErrorKind,
    AuthCoreError,
    TokenValidationError,
    EmptyTokenError,
    InvalidJWTStructureError,
    InvalidJWTFormatError,
    InvalidBase64Error,
    PayloadParseError,
    TokenExpiredError,
    TokenNotYetValidError,
    TokenInactiveError,
    IntrospectionError,
    MetadataDiscoveryError,
    MetadataFetchError,
    MetadataParseError,
    OAuthError,
    InvalidTokenError,
)

# PKCE (Proof Key for Code Exchange)
from .pkce import (
    generate_code_verifier,
    generate_code_challenge,
    validate_code_verifier,
    create_pkce_challenge,
    validate_code_verifier_format,
)

# Token validation
from .bearer import extract_bearer_token
from .claims import decode_jwt_payload, validate_token_claims
from .introspection import introspect_token
from .validator import validate_bearer_token, authenticate_request, AuthenticationResult

# Metadata discovery
from .discovery import discover_oauth_metadata, build_server_metadata

# Demo mode
from .demo import (
    default_demo_oauth_config,
    demo_user_id,
    demo_user_email,
    render_authorization_success,
)

__all__ = [
    # Models
    "OAuthGrantType",
    "OAuthProvider",
    "OAuthConfig",
    "PKCEChallenge",
    "TokenInfo",
    "OAuthMetadata",

    # Errors
    "AuthErrorKind",
    "AuthCoreError",
    "TokenValidationError",
    "EmptyTokenError",
    "InvalidJWTStructureError",
    "InvalidJWTFormatError",
    "InvalidBase64Error",
    "PayloadParseError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    "TokenInactiveError",
    "IntrospectionError",
    "MetadataDiscoveryError",
    "MetadataFetchError",
    "MetadataParseError",
    "OAuthError",
    "InvalidTokenError",

    # PKCE
    "generate_code_verifier",
    "generate_code_challenge",
    "validate_code_verifier",
    "create_pkce_challenge",
    "validate_code_verifier_format",

    # Token validation
    "extract_bearer_token",
    "decode_jwt_payload",
    "validate_token_claims",
    "introspect_token",
    "validate_bearer_token",
    "authenticate_request",
    "AuthenticationResult",

    # Discovery
    "discover_oauth_metadata",
    "build_server_metadata",

    # Demo mode
    "default_demo_oauth_config",
    "demo_user_id",
    "demo_user_email",
    "render_authorization_success",
]
