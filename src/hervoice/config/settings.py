"""
HerVoice Application Settings

Production-grade configuration management using Pydantic Settings.
All sensitive values are loaded from environment variables.

SECURITY: Never log or expose settings containing secrets.
The token signing secret has no default: the process refuses to
start when HERVOICE_AUTH_TOKEN_SECRET is not set.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Cost of the original deployment; hashes at this cost use the two-part format
BASELINE_HASH_ITERATIONS = 10_000


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HERVOICE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    name: str = Field(default="hervoice", description="Database name")
    user: str = Field(default="hervoice", description="Database user")
    password: SecretStr = Field(default=SecretStr(""), description="Database password")
    pool_size: int = Field(default=10, ge=1, le=100, description="Connection pool size")
    max_overflow: int = Field(default=20, ge=0, le=100, description="Max overflow connections")

    @property
    def async_url(self) -> str:
        """Generate async database URL for SQLAlchemy."""
        password = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{password}@{self.host}:{self.port}/{self.name}"

    @property
    def sync_url(self) -> str:
        """Generate sync database URL for Alembic migrations."""
        password = self.password.get_secret_value()
        return f"postgresql://{self.user}:{password}@{self.host}:{self.port}/{self.name}"


class AuthSettings(BaseSettings):
    """Credential hashing and session token configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HERVOICE_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    token_secret: SecretStr = Field(..., description="Token signing secret (required)")
    token_ttl_seconds: int = Field(default=7 * 24 * 60 * 60, ge=60, description="Session token lifetime")
    password_hash_iterations: int = Field(
        default=BASELINE_HASH_ITERATIONS,
        ge=BASELINE_HASH_ITERATIONS,
        description="PBKDF2 iteration count",
    )
    password_hash_workers: int = Field(default=4, ge=1, le=64, description="Hashing thread pool size")
    reset_token_ttl_seconds: int = Field(default=60 * 60, ge=60, description="Password reset link lifetime")

    @field_validator("token_secret")
    @classmethod
    def validate_token_secret(cls, v: SecretStr) -> SecretStr:
        """Reject short signing secrets."""
        if len(v.get_secret_value()) < 32:
            raise ValueError("token_secret must be at least 32 characters")
        return v


class RateLimitSettings(BaseSettings):
    """Request rate limiting configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HERVOICE_RATE_LIMIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enabled: bool = Field(default=True)
    requests_per_minute: int = Field(default=60, ge=1, le=1000)
    credential_requests_per_minute: int = Field(default=10, ge=1, le=1000)
    burst_size: int = Field(default=10, ge=0, le=100)
    trusted_proxies: list[str] = Field(
        default_factory=list,
        description="Peer addresses allowed to set X-Forwarded-For",
    )


class SentrySettings(BaseSettings):
    """Sentry error tracking configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HERVOICE_SENTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    dsn: SecretStr = Field(default=SecretStr(""), description="Sentry DSN (empty disables)")
    sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    traces_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)


class Settings(BaseSettings):
    """
    Main application settings.

    All configuration is loaded from environment variables with HERVOICE_ prefix.
    Sensitive values use SecretStr to prevent accidental logging.

    Usage:
        settings = get_settings()
        secret = settings.auth.token_secret.get_secret_value()
    """

    model_config = SettingsConfigDict(
        env_prefix="HERVOICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode - NEVER enable in production")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )
    api_version: str = Field(default="v1", description="API version prefix")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )
    app_base_url: str = Field(
        default="http://localhost:3000",
        description="Frontend base URL used in password reset links"
    )

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.
    For testing, construct Settings directly and pass it to
    create_application().

    Raises:
        pydantic.ValidationError: If required secrets are missing

    Returns:
        Settings: Application settings instance
    """
    return Settings()
