"""Command-line interface for guesty-mcp."""

import asyncio
import logging
import sys

import click

from guesty_mcp.__version__ import __version__
from guesty_mcp.config import GuestyConfig
from guesty_mcp.errors import ConfigError, classify


def _load_config() -> GuestyConfig:
    """Load configuration or exit with status 1."""
    try:
        return GuestyConfig.from_env()
    except ConfigError as e:
        click.echo(f"❌ {e}", err=True)
        click.echo("", err=True)
        click.echo("Set environment variables (or add them to .env):", err=True)
        click.echo("  export GUESTY_CLIENT_ID='your-client-id'", err=True)
        click.echo("  export GUESTY_CLIENT_SECRET='your-client-secret'", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Guesty MCP Server - Connect MCP clients to the Guesty Open API.

    This tool provides 8 tools across:
    - Properties (list, get, availability)
    - Reservations (list, get, create)
    - Guest messaging (send, history)
    """
    pass


@main.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind")  # nosec B104
@click.option("--port", type=int, default=None, help="Port to listen on (default: $PORT or 3000)")
def serve(host: str, port: int | None) -> None:
    """Start the HTTP envelope server (POST /mcp, GET /health)."""
    import uvicorn

    from guesty_mcp.server.http_app import create_app

    config = _load_config()
    logging.basicConfig(level=logging.INFO)

    app = create_app(config)
    click.echo(f"Guesty MCP server listening on :{port or config.port}", err=True)
    uvicorn.run(app, host=host, port=port or config.port, proxy_headers=True)


@main.command()
def mcp() -> None:
    """Start the stdio MCP server for desktop MCP clients.

    This command is typically invoked by the MCP client itself.
    """
    from guesty_mcp.server.guesty_server import GuestyServer

    config = _load_config()

    try:
        click.echo("Starting Guesty MCP server...", err=True)
        server = GuestyServer(config=config)
        asyncio.run(server.run())
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)
    except Exception as e:
        click.echo(f"❌ Server error: {e}", err=True)
        sys.exit(1)


@main.command()
def doctor() -> None:
    """Check configuration and credentials.

    Verifies:
    1. Required environment variables are set
    2. An access token can be obtained from Guesty
    """
    from guesty_mcp.api.client import GuestyClient

    click.echo("Guesty MCP Status:")
    click.echo("")

    config = _load_config()
    click.echo("Configuration:")
    click.echo(f"  API base: {config.api_base}")
    click.echo(f"  Token URL: {config.token_url}")
    click.echo(f"  Allowed origins: {', '.join(config.allowed_origins or ['*'])}")
    click.echo("")

    async def check_token() -> str:
        client = GuestyClient.from_config(config)
        try:
            await client.tokens.get_access_token()
            token = client.tokens.token
            return token.expires_at.strftime("%Y-%m-%d %H:%M:%S UTC") if token else "unknown"
        finally:
            await client.aclose()

    click.echo("Authentication:")
    try:
        expires = asyncio.run(check_token())
    except Exception as e:
        error = classify(e)
        click.echo(f"  ❌ Token request failed: {error.message}")
        if error.details:
            click.echo(f"  Details: {error.details}")
        sys.exit(1)

    click.echo("  ✓ Access token obtained")
    click.echo(f"  Token valid until: {expires}")
    click.echo("")
    click.echo("✓ Ready to use!")


if __name__ == "__main__":
    main()
