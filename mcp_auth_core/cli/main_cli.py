# mcp_auth_core/cli/main_cli.py
import asyncio
import json
import logging

import typer
from pydantic import ValidationError

from ..oauth.demo import DEFAULT_DEMO_BASE_URL, default_demo_oauth_config
from ..oauth.discovery import discover_oauth_metadata
from ..oauth.errors import MetadataDiscoveryError, TokenValidationError
from ..oauth.pkce import CODE_VERIFIER_LENGTH, S256, generate_code_challenge, generate_code_verifier, validate_code_verifier
from ..oauth.validator import validate_bearer_token
from ..settings import load_settings

# Main CLI application with help enabled when no arguments are provided
app = typer.Typer(
    name="mcp-auth",
    help="MCP OAuth authentication core: PKCE, token validation and metadata discovery.",
    no_args_is_help=True
)


@app.callback()
def main_callback(
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level.")
):
    """
    Developer tools for the MCP OAuth authentication core.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        typer.secho(f"Error: unknown log level '{log_level}'", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"
    )


@app.command("pkce")
def pkce(
    length: int = typer.Option(CODE_VERIFIER_LENGTH, "--length", "-n", help="Verifier length (43-128).")
):
    """Generate a PKCE code verifier and its S256 challenge."""
    try:
        verifier = generate_code_verifier(length=length)
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.echo(json.dumps({
        "code_verifier": verifier,
        "code_challenge": generate_code_challenge(verifier),
        "code_challenge_method": S256,
    }, indent=2))


@app.command("verify-pkce")
def verify_pkce(
    code_verifier: str = typer.Argument(..., help="The verifier presented at token exchange."),
    code_challenge: str = typer.Argument(..., help="The challenge sent with the authorization request."),
):
    """Check a code verifier against a code challenge."""
    if validate_code_verifier(code_verifier, code_challenge):
        typer.secho("PKCE verification succeeded.", fg=typer.colors.GREEN)
    else:
        typer.secho("PKCE verification failed.", fg=typer.colors.RED)
        raise typer.Exit(code=1)


@app.command("discover")
def discover(
    issuer_url: str = typer.Argument(..., help="Issuer URL, e.g. https://accounts.example.com"),
):
    """Fetch and print a provider's well-known OpenID configuration."""
    try:
        metadata = asyncio.run(discover_oauth_metadata(issuer_url))
    except MetadataDiscoveryError as e:
        typer.secho(f"Discovery failed ({e.kind.value}): {e.detail}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(metadata.to_document(), indent=2))


@app.command("validate-token")
def validate_token(
    token: str = typer.Argument(..., help="Raw bearer token (without the 'Bearer ' prefix)."),
):
    """Validate a token using the OAuth settings from the environment."""
    try:
        settings = load_settings()
        config = settings.to_oauth_config()
    except ValidationError as e:
        typer.secho(f"Invalid OAuth configuration: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    try:
        token_info = asyncio.run(validate_bearer_token(
            config, token, timeout=settings.introspection_timeout_seconds
        ))
    except TokenValidationError as e:
        typer.secho(f"Token rejected ({e.kind.value}): {e.detail}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    if not config.token_validation_endpoint:
        typer.secho(
            "Warning: token was decoded locally; its signature was NOT verified.",
            fg=typer.colors.YELLOW
        )
    typer.echo(token_info.model_dump_json(indent=2, exclude_none=True))


@app.command("demo-config")
def demo_config(
    base_url: str = typer.Option(DEFAULT_DEMO_BASE_URL, "--base-url", help="Base URL of the demo server."),
):
    """Print the demo-mode OAuth configuration."""
    typer.echo(default_demo_oauth_config(base_url).model_dump_json(indent=2))


def cli_entry_point():
    """Entry point function for console script registration in pyproject.toml"""
    app()


if __name__ == "__main__":
    cli_entry_point()
