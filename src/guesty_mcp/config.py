"""Runtime configuration for the Guesty MCP server.

Environment Variables:
    GUESTY_CLIENT_ID: Guesty Open API client ID (required)
    GUESTY_CLIENT_SECRET: Guesty Open API client secret (required)
    GUESTY_SCOPE: OAuth scope (default: open-api)
    GUESTY_API_BASE: Resource API base URL (default: https://open-api.guesty.com/v1)
    GUESTY_TOKEN_URL: Token endpoint (default: https://open-api.guesty.com/oauth2/token)
    PORT: HTTP port for ``guesty-mcp serve`` (default: 3000)
    ALLOWED_ORIGINS: Comma-separated CORS allow-list (default: allow all)

Values are read from the process environment after loading a ``.env`` file
from the working directory, if one exists.
"""

import os
from collections.abc import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from guesty_mcp.errors import ConfigError

DEFAULT_API_BASE = "https://open-api.guesty.com/v1"
DEFAULT_TOKEN_URL = "https://open-api.guesty.com/oauth2/token"  # nosec B105
DEFAULT_SCOPE = "open-api"
DEFAULT_PORT = 3000

REQUIRED_ENV = ("GUESTY_CLIENT_ID", "GUESTY_CLIENT_SECRET")


def parse_origins(value: str | None) -> list[str] | None:
    """Split a comma-separated origin list, ignoring blanks.

    Returns:
        List of origins, or None when nothing is configured.
    """
    if not value:
        return None
    origins = [origin.strip() for origin in value.split(",") if origin.strip()]
    return origins or None


class GuestyConfig(BaseModel):
    """Credentials and endpoints used by the gateway.

    Attributes:
        client_id: OAuth client ID.
        client_secret: OAuth client secret.
        scope: OAuth scope requested with each token.
        api_base: Base URL of the Guesty resource API.
        token_url: OAuth token endpoint.
        port: HTTP listen port.
        allowed_origins: CORS allow-list, None to allow every origin.
    """

    client_id: str = Field(..., min_length=1, description="OAuth client ID")
    client_secret: str = Field(..., min_length=1, description="OAuth client secret")
    scope: str = Field(default=DEFAULT_SCOPE, description="OAuth scope")
    api_base: str = Field(default=DEFAULT_API_BASE, description="Resource API base URL")
    token_url: str = Field(default=DEFAULT_TOKEN_URL, description="OAuth token endpoint")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="HTTP listen port")
    allowed_origins: list[str] | None = Field(default=None, description="CORS allow-list")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        load_dotenv_file: bool = True,
    ) -> "GuestyConfig":
        """Build configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            load_dotenv_file: Load ``.env`` into ``os.environ`` first.

        Returns:
            Validated configuration.

        Raises:
            ConfigError: If a required variable is missing or a value is invalid.
        """
        if environ is None:
            if load_dotenv_file:
                load_dotenv()
            environ = os.environ

        missing = [key for key in REQUIRED_ENV if not environ.get(key)]
        if missing:
            raise ConfigError(f"Missing required env var(s): {', '.join(missing)}")

        port = environ.get("PORT") or DEFAULT_PORT
        try:
            port = int(port)
        except ValueError as e:
            raise ConfigError(f"PORT must be an integer, got {port!r}") from e

        try:
            return cls(
                client_id=environ["GUESTY_CLIENT_ID"],
                client_secret=environ["GUESTY_CLIENT_SECRET"],
                scope=environ.get("GUESTY_SCOPE") or DEFAULT_SCOPE,
                api_base=environ.get("GUESTY_API_BASE") or DEFAULT_API_BASE,
                token_url=environ.get("GUESTY_TOKEN_URL") or DEFAULT_TOKEN_URL,
                port=port,
                allowed_origins=parse_origins(environ.get("ALLOWED_ORIGINS")),
            )
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e
