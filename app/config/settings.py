"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Redis (for Dramatiq)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/settlement.log"
    health_check_port: int = Field(
        default=8081, ge=1, le=65535, description="Health check HTTP server port"
    )

    # Settlement schedule (UTC)
    daily_accrual_hour: int = Field(
        default=0, ge=0, le=23, description="Hour of the daily return accrual run"
    )
    daily_accrual_minute: int = Field(
        default=0, ge=0, le=59, description="Minute of the daily return accrual run"
    )
    deadline_check_minute: int = Field(
        default=0, ge=0, le=59,
        description="Minute past every hour when payment deadlines are checked"
    )

    # Pay-later payment windows
    initial_payment_window_hours: int = Field(
        default=3, gt=0,
        description="Hours a pay-later investor has to make the first payment"
    )
    full_payment_window_days: int = Field(
        default=14, gt=0,
        description="Days a pay-later investor has to complete payment"
    )

    # Emergency stop for daily accrual
    emergency_stop_accrual: bool = Field(
        default=False,
        description="Skip daily return accrual runs while set"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Require an async SQLAlchemy driver."""
        if "+asyncpg" not in v and "+aiosqlite" not in v:
            raise ValueError(
                "DATABASE_URL must use an async driver, "
                "e.g. postgresql+asyncpg://... or sqlite+aiosqlite://..."
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name."""
        level = v.upper()
        allowed = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return level

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        """Validate production-specific requirements."""
        if self.environment == "production":
            if self.debug:
                raise ValueError(
                    "DEBUG must be False in production environment. "
                    "Set DEBUG=false in your .env file."
                )
            if self.database_url.startswith("sqlite"):
                logger.warning(
                    "DATABASE_URL points to SQLite in production. "
                    "Row-level locks are not available on SQLite."
                )
        return self


settings = Settings()
