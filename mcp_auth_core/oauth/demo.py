# mcp_auth_core/oauth/demo.py
from typing import Optional

from .models import OAuthConfig, OAuthGrantType, OAuthProvider

DEFAULT_DEMO_BASE_URL = "http://localhost:8080"

DEFAULT_AUTHORIZATION_SUCCESS_TEMPLATE = (
    "Demo Authorization Successful!\n\n"
    "Redirect to: {redirectUri}?code={code}{state}\n\n"
    "This is a demo server. In production, this would redirect automatically."
)


def default_demo_oauth_config(base_url: str = DEFAULT_DEMO_BASE_URL) -> OAuthConfig:
    """
    Configuration for a local demo server: one public-facing demo provider
    hosted at `base_url`, auto-approved consent and plain-HTTP endpoints.
    """
    base = base_url.rstrip("/")
    demo_provider = OAuthProvider(
        provider_name="demo",
        client_id="demo-client",
        client_secret="demo-secret",
        authorization_endpoint=f"{base}/authorize",
        token_endpoint=f"{base}/token",
        scopes=["mcp:read", "mcp:write"],
        grant_types=[OAuthGrantType.AUTHORIZATION_CODE],
        requires_pkce=True,
    )
    return OAuthConfig(
        oauth_enabled=True,
        oauth_providers=[demo_provider],
        require_https=False,
        auth_code_expiry_seconds=600,
        access_token_expiry_seconds=3600,
        auto_approve_auth=True,
        demo_user_id_template="demo-user-{clientId}",
        demo_email_domain="demo.example.com",
        demo_user_name="Demo User",
        public_client_secret="demo-public-secret",
        auth_code_prefix="code_",
        refresh_token_prefix="rt_",
        client_id_prefix="client_",
        authorization_success_template=DEFAULT_AUTHORIZATION_SUCCESS_TEMPLATE,
    )


def demo_user_id(config: OAuthConfig, client_id: str) -> Optional[str]:
    """Renders the demo user id for `client_id`; None when demo mode is off."""
    if config.demo_user_id_template is None:
        return None
    return config.demo_user_id_template.replace("{clientId}", client_id)


def demo_user_email(config: OAuthConfig, user_id: str) -> str:
    return f"{user_id}@{config.demo_email_domain}"


def render_authorization_success(
    config: OAuthConfig,
    redirect_uri: str,
    code: str,
    state: Optional[str] = None,
) -> Optional[str]:
    """
    Fills `{redirectUri}`, `{code}` and `{state}` in the configured success
    template. `{state}` becomes `&state=<value>`, or nothing when no state was sent.
    """
    template = config.authorization_success_template
    if template is None:
        return None
    state_fragment = f"&state={state}" if state else ""
    return (
        template
        .replace("{redirectUri}", redirect_uri)
        .replace("{code}", code)
        .replace("{state}", state_fragment)
    )
