"""Tests for application configuration.

Defaults for token lifetimes and cookies, and the production security
validation.
"""

import pytest
from pydantic import SecretStr, ValidationError

from urbanease.core.config import _INSECURE_DEFAULT_PASSWORD, Settings

_PRODUCTION = "production"
_ACCESS_SECRET = SecretStr("a" * 64)
_REFRESH_SECRET = SecretStr("b" * 64)
_SECURE_DB_PASSWORD = "my-secure-production-password-123!"


def _production(**overrides) -> Settings:
    values = {
        "environment": _PRODUCTION,
        "database_url_override": "",
        "database_password": _SECURE_DB_PASSWORD,
        "jwt_access_secret": _ACCESS_SECRET,
        "jwt_refresh_secret": _REFRESH_SECRET,
    }
    values.update(overrides)
    return Settings(**values)


class TestDefaults:
    def test_token_lifetimes(self):
        s = Settings()
        assert s.access_token_ttl_minutes == 15
        assert s.refresh_token_ttl_days == 7
        assert s.password_reset_ttl_minutes == 60

    def test_refresh_cookie(self):
        s = Settings()
        assert s.refresh_cookie_name == "refreshToken"
        assert s.refresh_cookie_samesite == "strict"
        assert s.refresh_cookie_path == "/api/auth"

    def test_database_url_built_from_parts(self):
        s = Settings(
            database_url_override="",
            database_user="u",
            database_password="p",
            database_host="db",
            database_port=5433,
            database_name="ease",
        )
        assert s.database_url == "postgresql+asyncpg://u:p@db:5433/ease"

    def test_database_url_override_wins(self):
        s = Settings(database_url_override="sqlite+aiosqlite://")
        assert s.database_url == "sqlite+aiosqlite://"


class TestProductionSecurityValidation:
    """Tests for production security requirements."""

    def test_accepts_hardened_production_config(self):
        assert _production().is_production

    def test_allows_default_password_in_development(self):
        s = Settings(
            environment="development",
            database_url_override="",
            database_password=_INSECURE_DEFAULT_PASSWORD,
        )
        assert s.database_password == _INSECURE_DEFAULT_PASSWORD

    def test_rejects_default_password_in_production(self):
        with pytest.raises(ValidationError, match="default database password"):
            _production(database_password=_INSECURE_DEFAULT_PASSWORD)

    def test_rejects_short_jwt_secret_in_production(self):
        with pytest.raises(ValidationError, match="JWT_ACCESS_SECRET"):
            _production(jwt_access_secret=SecretStr("short"))

    def test_rejects_shared_jwt_secret_in_production(self):
        with pytest.raises(ValidationError, match="must differ"):
            _production(jwt_refresh_secret=_ACCESS_SECRET)

    def test_rejects_wildcard_cors(self):
        with pytest.raises(ValidationError, match="wildcard"):
            Settings(allowed_origins=["*"])

    def test_rejects_samesite_none_without_secure(self):
        with pytest.raises(ValidationError, match="REFRESH_COOKIE_SECURE"):
            Settings(refresh_cookie_samesite="none", refresh_cookie_secure=False)

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValidationError, match="positive"):
            Settings(access_token_ttl_minutes=0)
