"""
Application configuration management using Pydantic Settings.
"""
from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Vibe Relay"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # CORS, comma-separated in the environment
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:5173", "http://localhost:3000"]
    )

    # Request bodies carry base64 images
    MAX_REQUEST_BODY_MB: int = 25

    # Spotify OAuth
    SPOTIFY_CLIENT_ID: Optional[str] = None
    SPOTIFY_CLIENT_SECRET: Optional[str] = None
    SPOTIFY_REDIRECT_URI: Optional[str] = None
    SPOTIFY_SCOPE: str = "playlist-modify-public playlist-modify-private ugc-image-upload"

    # Google OAuth (YouTube)
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CLIENT_SECRET: Optional[str] = None
    GOOGLE_REDIRECT_URI: Optional[str] = None
    GOOGLE_SCOPE: str = "https://www.googleapis.com/auth/youtube"

    OAUTH_HTTP_TIMEOUT_SECONDS: float = 15.0

    # AI Services
    GEMINI_API_KEY: Optional[str] = None
    GOOGLE_API_KEY: Optional[str] = None
    AI_MODEL_TEXT: str = "gemini-2.5-flash"
    AI_MODEL_IMAGE: str = "gemini-2.5-flash-image"

    # Sentry
    SENTRY_DSN: Optional[str] = None
    SENTRY_ENVIRONMENT: Optional[str] = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def max_request_body_bytes(self) -> int:
        """Calculate max request body size in bytes."""
        return self.MAX_REQUEST_BODY_MB * 1024 * 1024

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT == "development"

    @property
    def ai_api_key(self) -> Optional[str]:
        """Gemini key, falling back to the generic Google API key."""
        return self.GEMINI_API_KEY or self.GOOGLE_API_KEY

    def oauth_provider_configured(self, provider: str) -> bool:
        """Check that client id, secret and redirect URI are all set for a provider."""
        prefix = provider.upper()
        return all(
            getattr(self, f"{prefix}_{field}", None)
            for field in ("CLIENT_ID", "CLIENT_SECRET", "REDIRECT_URI")
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()


# Create a settings instance for easy import
settings = get_settings()
