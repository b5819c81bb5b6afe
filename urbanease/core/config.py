"""Application configuration loaded from environment variables.

Settings for the database, HTTP surface, token issuance, outbound email and
seeding. Uses pydantic-settings for validation and .env file support.
"""

from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure default password that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_PASSWORD = "urbanease_dev_password"  # nosec B105

# Minimum length for JWT signing secrets in production (256 bits = 32 bytes)
_MIN_JWT_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "urban_ease"
    database_user: str = "urbanease_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD
    # Full async URL (e.g. provided by the hosting platform). Wins over the
    # individual database_* fields when set.
    database_url_override: str = ""

    # CORS
    # CRITICAL: Never set to ["*"]. The refresh token travels in a cookie
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Session tokens
    # Access and refresh tokens are signed with distinct secrets so a leaked
    # access secret cannot mint refresh tokens.
    jwt_access_secret: SecretStr = SecretStr("dev-access-secret-change-me")
    jwt_refresh_secret: SecretStr = SecretStr("dev-refresh-secret-change-me")
    jwt_issuer: str = "urban-ease"
    jwt_audience: str = "urban-ease-api"
    access_token_ttl_minutes: int = 15
    refresh_token_ttl_days: int = 7

    # Capability tokens
    password_reset_ttl_minutes: int = 60

    # Password hashing (bcrypt cost factor)
    bcrypt_rounds: int = 12

    # Refresh token cookie
    refresh_cookie_name: str = "refreshToken"
    refresh_cookie_path: str = "/api/auth"
    refresh_cookie_secure: bool = True
    refresh_cookie_samesite: Literal["lax", "strict", "none"] = "strict"
    refresh_cookie_domain: str = ""

    # Email (Resend HTTP API)
    email_from: str = "Urban Ease <noreply@urbanease.app>"
    resend_api_key: SecretStr = SecretStr("")
    email_max_retries: int = 3
    email_retry_base_delay_ms: int = 500

    # Frontend URL (verification and reset links point here)
    frontend_url: str = "http://localhost:3000"

    # Rate Limiting (Security)
    # Format: "count/period" (e.g., "10/minute", "100/hour")
    rate_limit_auth: str = "10/minute"
    rate_limit_enabled: bool = True  # Disable for testing

    # Seeding
    seed_admin_email: str = "admin@urbanease.com"
    seed_admin_password: SecretStr = SecretStr("Admin@123")

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def is_production(self) -> bool:
        """Whether the app runs with production hardening."""
        return self.environment == "production"

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate production security requirements.

        Security: Prevents deployment with known insecure defaults.
        Checks:
        - SameSite=None requires Secure flag (all environments)
        - CORS must not use wildcard origin (all environments)
        - Token TTLs must be positive (all environments)
        - Database password must not be the default in production
        - JWT secrets must be >= 32 chars and distinct in production
        """
        if self.refresh_cookie_samesite == "none" and not self.refresh_cookie_secure:
            msg = (
                "REFRESH_COOKIE_SECURE must be true when REFRESH_COOKIE_SAMESITE=none. "
                "Browsers reject SameSite=None cookies without the Secure flag."
            )
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "The refresh token cookie requires credentialed CORS, which is "
                "incompatible with wildcard origins."
            )
            raise ValueError(msg)

        if self.access_token_ttl_minutes <= 0 or self.refresh_token_ttl_days <= 0:
            msg = "Token TTLs must be positive."
            raise ValueError(msg)
        if self.password_reset_ttl_minutes <= 0:
            msg = "PASSWORD_RESET_TTL_MINUTES must be positive."
            raise ValueError(msg)

        if self.is_production:
            if (
                not self.database_url_override
                and self.database_password == _INSECURE_DEFAULT_PASSWORD
            ):
                msg = (
                    "Cannot use default database password in production. "
                    "Set DATABASE_PASSWORD environment variable to a secure value."
                )
                raise ValueError(msg)

            access = self.jwt_access_secret.get_secret_value()
            refresh = self.jwt_refresh_secret.get_secret_value()
            for name, value in (
                ("JWT_ACCESS_SECRET", access),
                ("JWT_REFRESH_SECRET", refresh),
            ):
                if len(value) < _MIN_JWT_SECRET_LENGTH:
                    msg = (
                        f"{name} must be at least {_MIN_JWT_SECRET_LENGTH} "
                        'characters in production. Generate with: python -c "import '
                        'secrets; print(secrets.token_hex(32))"'
                    )
                    raise ValueError(msg)
            if access == refresh:
                msg = "JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ."
                raise ValueError(msg)

        return self


settings = Settings()
