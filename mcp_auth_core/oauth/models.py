# mcp_auth_core/oauth/models.py
from enum import Enum
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
import math

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator


class OAuthGrantType(str, Enum):
    """OAuth grant types an upstream provider may support."""
    AUTHORIZATION_CODE = "authorization_code"  # user-based scenarios
    CLIENT_CREDENTIALS = "client_credentials"  # application-to-application


def _is_https(url: Optional[str]) -> bool:
    return url is None or url.lower().startswith("https://")


class OAuthProvider(BaseModel):
    """
    One upstream identity provider, loaded from static configuration at startup
    and immutable afterwards.
    """
    model_config = ConfigDict(frozen=True)

    provider_name: str = Field(
        description="Unique name for this provider (e.g., 'google', 'github')."
    )
    client_id: str
    client_secret: Optional[str] = Field(
        default=None,
        description="Absent for public clients."
    )
    authorization_endpoint: str
    token_endpoint: str
    user_info_endpoint: Optional[str] = None
    scopes: List[str] = Field(default_factory=list)
    grant_types: List[OAuthGrantType] = Field(
        default_factory=lambda: [OAuthGrantType.AUTHORIZATION_CODE]
    )
    requires_pkce: bool = Field(
        default=True,
        description="MCP requires PKCE for all clients."
    )
    metadata_endpoint: Optional[str] = Field(
        default=None,
        description="Well-known discovery endpoint for this provider, if any."
    )

    @property
    def is_public_client(self) -> bool:
        return self.client_secret is None


class OAuthConfig(BaseModel):
    """
    Process-wide OAuth configuration. Built once at startup and passed
    explicitly into every validation call.
    """
    model_config = ConfigDict(frozen=True)

    oauth_enabled: bool = False
    oauth_providers: List[OAuthProvider] = Field(default_factory=list)
    token_validation_endpoint: Optional[str] = Field(
        default=None,
        description="RFC 7662 introspection endpoint. When unset, tokens are decoded locally."
    )
    require_https: bool = True

    # Timing parameters
    auth_code_expiry_seconds: int = 600
    access_token_expiry_seconds: int = 3600

    # Values advertised to clients
    supported_scopes: List[str] = Field(default_factory=lambda: ["mcp:read", "mcp:write"])
    supported_response_types: List[str] = Field(default_factory=lambda: ["code"])
    supported_grant_types: List[str] = Field(
        default_factory=lambda: ["authorization_code", "refresh_token"]
    )
    supported_auth_methods: List[str] = Field(
        default_factory=lambda: ["client_secret_post", "none"]
    )
    supported_code_challenge_methods: List[str] = Field(default_factory=lambda: ["S256"])

    # Demo mode
    auto_approve_auth: bool = False
    demo_user_id_template: Optional[str] = Field(
        default=None,
        description="e.g. 'demo-user-{clientId}'. None disables demo mode."
    )
    demo_email_domain: str = "example.com"
    demo_user_name: str = "Demo User"
    public_client_secret: Optional[str] = None

    # Token prefixes
    auth_code_prefix: str = "code_"
    refresh_token_prefix: str = "rt_"
    client_id_prefix: str = "client_"

    authorization_success_template: Optional[str] = None

    @field_validator("auth_code_expiry_seconds", "access_token_expiry_seconds")
    @classmethod
    def _positive_expiry(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Expiry durations must be positive.")
        return value

    @model_validator(mode="after")
    def _check_policy(self) -> "OAuthConfig":
        if self.oauth_enabled and not any(p.requires_pkce for p in self.oauth_providers):
            raise ValueError(
                "OAuth is enabled but no configured provider requires PKCE; "
                "PKCE is mandatory for MCP clients."
            )

        if self.require_https:
            urls: List[Optional[str]] = [self.token_validation_endpoint]
            for provider in self.oauth_providers:
                urls.extend([
                    provider.authorization_endpoint,
                    provider.token_endpoint,
                    provider.user_info_endpoint,
                    provider.metadata_endpoint,
                ])
            insecure = [url for url in urls if not _is_https(url)]
            if insecure:
                raise ValueError(f"HTTPS is required but these endpoints are not HTTPS: {insecure}")
        return self

    @property
    def is_demo_mode(self) -> bool:
        return self.demo_user_id_template is not None


class PKCEChallenge(BaseModel):
    """PKCE verifier/challenge pair created once per authorization attempt (RFC 7636)."""
    model_config = ConfigDict(frozen=True)

    code_verifier: str = Field(min_length=43, max_length=128, pattern=r"^[A-Za-z0-9._~-]+$")
    code_challenge: str
    challenge_method: str = Field(default="S256", pattern=r"^S256$")


class TokenInfo(BaseModel):
    """
    Outcome of validating a token: either an RFC 7662 introspection response
    or the claims read from a locally decoded JWT payload.
    """
    active: StrictBool
    scope: Optional[str] = None
    client_id: Optional[str] = None
    username: Optional[str] = None
    token_type: Optional[str] = None
    exp: Optional[int] = None  # Unix timestamp
    iat: Optional[int] = None
    nbf: Optional[int] = None
    sub: Optional[str] = None
    aud: Optional[List[str]] = None
    iss: Optional[str] = None

    @field_validator("aud", mode="before")
    @classmethod
    def _single_audience_as_list(cls, value: Any) -> Any:
        # RFC 7519 allows "aud" to be a single string
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("exp", "iat", "nbf", mode="before")
    @classmethod
    def _numeric_date_only(cls, value: Any) -> Any:
        # JSON numbers only; whole floats such as 1.0 are still accepted
        if isinstance(value, (bool, str)):
            raise ValueError("must be a JSON number")
        return value

    @property
    def scopes(self) -> List[str]:
        return self.scope.split() if self.scope else []

    def is_valid_at(self, now: Optional[datetime] = None) -> bool:
        """True when the token is active and inside its exp/nbf window at `now`."""
        now_ts = unix_timestamp(now)
        if not self.active:
            return False
        if self.exp is not None and now_ts > self.exp:
            return False
        if self.nbf is not None and now_ts < self.nbf:
            return False
        return True


class OAuthMetadata(BaseModel):
    """Subset of the OpenID/RFC 8414 discovery document needed for client bootstrapping."""
    issuer: str
    authorization_endpoint: str
    token_endpoint: str
    registration_endpoint: Optional[str] = None
    userinfo_endpoint: Optional[str] = None
    jwks_uri: Optional[str] = None
    scopes_supported: Optional[List[str]] = None
    response_types_supported: List[str]
    grant_types_supported: Optional[List[str]] = None
    token_endpoint_auth_methods_supported: Optional[List[str]] = None
    code_challenge_methods_supported: Optional[List[str]] = None

    def to_document(self) -> Dict[str, Any]:
        """Serialize with the wire field names, omitting absent optional fields."""
        return self.model_dump(exclude_none=True)


def unix_timestamp(now: Optional[datetime] = None) -> int:
    """Whole seconds since the epoch, floored. Naive datetimes are taken as UTC."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return math.floor(now.timestamp())
