from pathlib import Path

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent  # playback-bridge/


class Settings(BaseSettings):
    """Application settings with validation.

    Spotify client credentials are required. Everything else has a default
    suitable for running locally on port 3000.

    Uses Pydantic v2 API:
    - model_config with SettingsConfigDict
    - @field_validator / @model_validator decorators
    """

    # API server settings
    api_host: str = Field(default="127.0.0.1", min_length=1, description="API server host (e.g., '0.0.0.0')")
    api_port: int = Field(ge=1, le=65535, default=3000, description="API server port")
    log_level: str = Field(default="INFO", description="Root log level")

    # Spotify API - required
    spotify_client_id: str = Field(min_length=1, description="Spotify OAuth client ID")
    spotify_client_secret: str = Field(min_length=1, description="Spotify OAuth client secret")
    public_base_url: str = Field(
        default="",
        validation_alias=AliasChoices("public_base_url", "render_external_url"),
        description="Externally reachable base URL, used to build the OAuth callback",
    )
    spotify_redirect_uri: str = Field(default="", description="OAuth redirect URI (derived when empty)")
    spotify_refresh_token: str = Field(default="", description="Pre-seeded refresh token (skips /login)")
    spotify_accounts_url: str = Field(default="https://accounts.spotify.com", pattern=r"^https?://")
    spotify_api_url: str = Field(default="https://api.spotify.com/v1", pattern=r"^https?://")

    # Security
    bridge_api_key: str = Field(default="", description="Bearer key for control routes (empty disables)")
    cors_origins: str = Field(default="*", description="Comma-separated allowed CORS origins")
    trusted_hosts: str = Field(default="*", description="Comma-separated trusted Host header patterns")

    model_config = SettingsConfigDict(
        env_file=Path(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    @field_validator("api_host", mode="after")
    @classmethod
    def validate_api_host(cls, v: str) -> str:
        """Ensure api_host is not empty or whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("api_host cannot be empty")
        return v

    @field_validator("public_base_url", "spotify_accounts_url", "spotify_api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("spotify_redirect_uri", mode="after")
    @classmethod
    def validate_spotify_redirect_uri(cls, v: str) -> str:
        """Ensure an explicit redirect URI is an http(s) URL."""
        v = v.strip()
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("spotify_redirect_uri must be a valid http:// or https:// URL")
        return v

    @model_validator(mode="after")
    def derive_redirect_uri(self) -> "Settings":
        """Fill in the callback URL from the public base URL or the local port."""
        if not self.spotify_redirect_uri:
            base = self.public_base_url or f"http://127.0.0.1:{self.api_port}"
            self.spotify_redirect_uri = f"{base}/callback"
        return self

    @property
    def spotify_token_url(self) -> str:
        return f"{self.spotify_accounts_url}/api/token"

    @property
    def spotify_authorize_url(self) -> str:
        return f"{self.spotify_accounts_url}/authorize"


# Singleton settings instance (cached for performance)
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get singleton Settings instance for dependency injection.

    Creates the instance once to avoid re-reading the .env file on every
    request. Use with FastAPI's Depends().

    Example:
        @app.get("/")
        async def route(settings: Settings = Depends(get_settings)):
            return {"host": settings.api_host}
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
