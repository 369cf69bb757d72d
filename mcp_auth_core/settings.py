# mcp_auth_core/settings.py
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .oauth.models import OAuthConfig, OAuthProvider

logger = logging.getLogger(__name__)

# This settings.py file is at <project root>/mcp_auth_core/settings.py
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
DOTENV_PATH = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """
    Environment-backed settings (prefix `MCP_AUTH_`). List and provider fields
    are given as JSON, e.g. `MCP_AUTH_SUPPORTED_SCOPES='["mcp:read"]'`.
    """

    log_level: str = "INFO"

    # OAuth switches
    oauth_enabled: bool = False
    oauth_providers: List[OAuthProvider] = Field(default_factory=list)
    token_validation_endpoint: Optional[str] = None
    require_https: bool = True
    introspection_timeout_seconds: float = 10.0

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
    demo_user_id_template: Optional[str] = None
    demo_email_domain: str = "example.com"
    demo_user_name: str = "Demo User"
    public_client_secret: Optional[str] = Field(
        default=None,
        description="Shared secret accepted from public clients in demo mode."
    )

    # Token prefixes
    auth_code_prefix: str = "code_"
    refresh_token_prefix: str = "rt_"
    client_id_prefix: str = "client_"

    authorization_success_template: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="MCP_AUTH_",
        env_file=DOTENV_PATH if DOTENV_PATH.exists() else None,
        extra="ignore",
        env_file_encoding="utf-8",
    )

    def to_oauth_config(self) -> OAuthConfig:
        """Builds the immutable OAuthConfig passed to every validation call."""
        return OAuthConfig(
            oauth_enabled=self.oauth_enabled,
            oauth_providers=self.oauth_providers,
            token_validation_endpoint=self.token_validation_endpoint,
            require_https=self.require_https,
            auth_code_expiry_seconds=self.auth_code_expiry_seconds,
            access_token_expiry_seconds=self.access_token_expiry_seconds,
            supported_scopes=self.supported_scopes,
            supported_response_types=self.supported_response_types,
            supported_grant_types=self.supported_grant_types,
            supported_auth_methods=self.supported_auth_methods,
            supported_code_challenge_methods=self.supported_code_challenge_methods,
            auto_approve_auth=self.auto_approve_auth,
            demo_user_id_template=self.demo_user_id_template,
            demo_email_domain=self.demo_email_domain,
            demo_user_name=self.demo_user_name,
            public_client_secret=self.public_client_secret,
            auth_code_prefix=self.auth_code_prefix,
            refresh_token_prefix=self.refresh_token_prefix,
            client_id_prefix=self.client_id_prefix,
            authorization_success_template=self.authorization_success_template,
        )


def load_settings() -> Settings:
    """Reads settings from the environment and the optional project `.env` file."""
    if DOTENV_PATH.exists():
        logger.info(f".env file found at {DOTENV_PATH}")
    else:
        logger.debug(f".env file not found at {DOTENV_PATH}; relying on OS env vars or defaults.")

    settings = Settings()

    # Sensitive values are masked
    logger.info(
        f"Settings loaded: oauth_enabled={settings.oauth_enabled}, "
        f"providers={[p.provider_name for p in settings.oauth_providers]}, "
        f"token_validation_endpoint={settings.token_validation_endpoint!r}, "
        f"require_https={settings.require_https}, "
        f"public_client_secret={'********' if settings.public_client_secret else 'None'}"
    )
    return settings
