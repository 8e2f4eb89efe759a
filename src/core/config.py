"""
Runtime settings, read once from the environment (and ``.env``).

``SECRET_KEY`` and ``DATABASE_URL`` are required; everything else has a
development default. Integrations whose credentials are unset stay
disabled rather than failing at startup.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- service -------------------------------------------------------------
    app_name: str = "Ascent Finance API"
    version: str = "0.1.0"
    description: str = "Portfolio, expense and workspace sharing API for Ascent"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    frontend_url: str = Field(
        default="http://localhost:5173",
        description="Web client base URL; invitation links point here",
    )

    # --- auth ----------------------------------------------------------------
    secret_key: str = Field(..., min_length=32, description="HS256 signing key")
    access_token_expire_minutes: int = Field(default=7 * 24 * 60, ge=1, le=30 * 24 * 60)
    argon2_time_cost: int = Field(default=2, ge=1, le=10)
    argon2_memory_cost: int = Field(default=64 * 1024, ge=8192, description="KiB")
    argon2_parallelism: int = Field(default=4, ge=1, le=16)
    google_client_id: str | None = Field(
        default=None,
        description="Expected audience of Google ID tokens",
    )

    # --- database ------------------------------------------------------------
    database_url: str = Field(..., description="postgresql+asyncpg://... or sqlite+aiosqlite://...")
    # Pool settings apply to PostgreSQL only
    db_pool_size: int = Field(default=5, ge=1, le=50)
    db_max_overflow: int = Field(default=10, ge=0, le=100)
    db_pool_recycle: int = Field(default=3600, ge=300)
    db_pool_timeout: int = Field(default=30, ge=1)
    db_pool_pre_ping: bool = True

    # --- http surface --------------------------------------------------------
    cors_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Comma-separated allowed origins",
    )
    cors_allow_credentials: bool = True
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = Field(
        default="memory://",
        description="limits storage; use redis://... when running several workers",
    )
    rate_limit_default: str = "500/minute"
    rate_limit_auth: str = "50/5minute"

    # --- logging -------------------------------------------------------------
    log_level: LogLevel = "INFO"
    log_format: Literal["json", "console"] = "console"
    log_file_enabled: bool = False
    log_file_path: str = "logs/app.log"
    log_file_max_bytes: int = 10 * 1024 * 1024
    log_file_backup_count: int = 5

    # --- market data ---------------------------------------------------------
    finnhub_api_key: str | None = None
    alphavantage_api_key: str | None = None
    quote_cache_ttl_seconds: int = Field(default=300, ge=0)
    quote_batch_delay_seconds: float = Field(default=0.1, ge=0)

    # --- mail ----------------------------------------------------------------
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_secure: bool = Field(default=False, description="Implicit TLS instead of STARTTLS")
    smtp_user: str | None = None
    smtp_pass: str | None = None
    smtp_from: str | None = None

    http_timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("cors_origins")
    @classmethod
    def split_origins(cls, value: str) -> list[str]:
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_pass)


settings = Settings()
