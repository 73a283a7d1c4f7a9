"""Application settings loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the MCP server.

    Values come from the environment (or a local .env file). Field names map
    to upper-case variable names, e.g. ``fireflies_api_key`` -> ``FIREFLIES_API_KEY``.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Upstream API
    fireflies_api_key: str = ""
    fireflies_graphql_endpoint: str = "https://api.fireflies.ai/graphql"
    upstream_timeout_seconds: float = Field(default=30.0, gt=0)

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"
    cors_allowed_origins: str = "*"
    # Seconds uvicorn waits for open streams on shutdown before cancelling them
    shutdown_timeout_seconds: int = Field(default=5, ge=0)

    # SSE transport
    keepalive_interval_seconds: float = Field(default=30.0, gt=0)

    # Error tracking
    sentry_dsn: str | None = None

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


settings = Settings()
