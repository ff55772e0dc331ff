"""
Unit Tests for Settings

Tests required secrets and configuration bounds.
"""

import pytest
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from hervoice.config.settings import (
    BASELINE_HASH_ITERATIONS,
    AuthSettings,
    DatabaseSettings,
    RateLimitSettings,
    Settings,
)

LONG_SECRET = "s" * 40


class TestAuthSettings:
    """Tests for token and hashing configuration."""

    def test_missing_secret_fails_fast(self, monkeypatch) -> None:
        monkeypatch.delenv("HERVOICE_AUTH_TOKEN_SECRET", raising=False)

        with pytest.raises(PydanticValidationError):
            AuthSettings(_env_file=None)

    def test_short_secret_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            AuthSettings(token_secret=SecretStr("too-short"))

    def test_secret_read_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("HERVOICE_AUTH_TOKEN_SECRET", LONG_SECRET)

        settings = AuthSettings()
        assert settings.token_secret.get_secret_value() == LONG_SECRET
        assert LONG_SECRET not in repr(settings)

    def test_defaults(self) -> None:
        settings = AuthSettings(token_secret=SecretStr(LONG_SECRET))

        assert settings.token_ttl_seconds == 7 * 24 * 60 * 60
        assert settings.password_hash_iterations == BASELINE_HASH_ITERATIONS
        assert settings.reset_token_ttl_seconds == 3600

    def test_cost_below_baseline_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            AuthSettings(token_secret=SecretStr(LONG_SECRET), password_hash_iterations=1000)


class TestSettings:
    """Tests for top-level settings."""

    def test_nested_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("HERVOICE_AUTH_TOKEN_SECRET", LONG_SECRET)
        monkeypatch.setenv("HERVOICE_RATE_LIMIT_CREDENTIAL_REQUESTS_PER_MINUTE", "5")
        monkeypatch.setenv("HERVOICE_ENV", "production")

        settings = Settings(_env_file=None)

        assert settings.is_production()
        assert settings.rate_limit.credential_requests_per_minute == 5
        assert settings.auth.token_secret.get_secret_value() == LONG_SECRET

    def test_nested_values_read_from_dotenv(self, monkeypatch, tmp_path) -> None:
        monkeypatch.delenv("HERVOICE_AUTH_TOKEN_SECRET", raising=False)
        monkeypatch.delenv("HERVOICE_RATE_LIMIT_ENABLED", raising=False)
        (tmp_path / ".env").write_text(
            "HERVOICE_ENV=staging\n"
            f"HERVOICE_AUTH_TOKEN_SECRET={LONG_SECRET}\n"
            "HERVOICE_RATE_LIMIT_TRUSTED_PROXIES=[\"10.0.0.1\"]\n"
            "HERVOICE_DB_HOST=db.internal\n",
            encoding="utf-8",
        )
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.env == "staging"
        assert settings.auth.token_secret.get_secret_value() == LONG_SECRET
        assert settings.rate_limit.trusted_proxies == ["10.0.0.1"]
        assert settings.database.host == "db.internal"

    def test_rate_limit_defaults(self) -> None:
        settings = RateLimitSettings(enabled=True)

        assert settings.requests_per_minute == 60
        assert settings.credential_requests_per_minute == 10

    def test_database_urls(self) -> None:
        db = DatabaseSettings(host="db", port=5433, name="hv", user="svc", password=SecretStr("pw"))

        assert db.async_url == "postgresql+asyncpg://svc:pw@db:5433/hv"
        assert db.sync_url == "postgresql://svc:pw@db:5433/hv"
