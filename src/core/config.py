"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

INSECURE_DEFAULT_SECRET = "CHANGE-ME-IN-PRODUCTION"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="FX Desk API")
    app_version: str = Field(default="1.0.0")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/fxdesk",
        description="PostgreSQL connection URL with asyncpg driver",
    )
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=10, ge=0)
    db_pool_recycle_seconds: int = Field(
        default=1800,
        description="Recycle pooled connections older than this",
    )

    # JWT Authentication
    jwt_secret_key: str = Field(
        default=INSECURE_DEFAULT_SECRET,
        description="Secret key for access token signing (required in production)",
    )
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=15)
    refresh_token_expire_days: int = Field(default=7)

    # Cookies
    access_token_cookie_name: str = Field(default="access_token")
    refresh_token_cookie_name: str = Field(default="refresh_token")

    # Invitations
    invitation_expiry_days: int = Field(default=7)

    # Client URL (for CORS defaults and invite links)
    client_url: str = Field(default="http://localhost:5173")

    # Maintenance
    token_cleanup_interval_seconds: int = Field(
        default=86400,
        description="Interval of the expired refresh token / invitation sweep",
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @model_validator(mode="after")
    def _require_secret_in_production(self) -> "Settings":
        """Refuse to start in production with the development signing secret."""
        if self.app_env == "production" and (
            not self.jwt_secret_key or self.jwt_secret_key == INSECURE_DEFAULT_SECRET
        ):
            raise ValueError("JWT_SECRET_KEY must be set in production")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosting providers usually supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def refresh_cookie_secure(self) -> bool:
        """Refresh token cookies are only marked Secure in production."""
        return self.is_production

    @computed_field  # type: ignore[prop-decorator]
    @property
    def refresh_token_max_age(self) -> int:
        """Refresh token lifetime in seconds (cookie max-age)."""
        return self.refresh_token_expire_days * 24 * 60 * 60

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
