"""Configuration management for the MBC CMS API.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded at application
startup and is immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables (prefixed with ``MBC_``)
    and .env files. All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MBC_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "MBC CMS API"
    app_version: str = "1.0.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = "/api"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 4000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/mbc_cms.db"
    db_pool_size: int = 32
    db_max_overflow: int = 0
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False
    db_sqlite_foreign_keys: bool = True
    run_migrations_on_startup: bool = True
    alembic_ini_path: str = "alembic.ini"

    # Admin Bootstrap Settings
    admin_email: str = Field(
        default="admin@mountainbackpackers.co.za",
        description="Email of the break-glass system administrator",
    )
    admin_password: str = Field(
        default="change-me-in-production",
        description="Initial password for the system administrator",
    )
    default_role_name: str = "System Admin"
    default_role_permissions: dict[str, int] = Field(
        default={
            "roles.manage": 2,
            "users.manage": 2,
            "articles.edit": 2,
            "articles.publish": 2,
        }
    )

    # Authorization Settings
    permission_level_comparison: Literal["exact", "at_least"] = "exact"

    # CORS Settings
    cors_origins: list[str] = Field(default=["http://localhost:3000", "http://localhost:4000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(default=["*"])

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"
    log_dir: str = "./logs"
    log_file_enabled: bool = True
    log_retention_days: int = 30

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("admin_email")
    @classmethod
    def validate_admin_email(cls, v: str) -> str:
        """Validate the admin email looks like an address."""
        v = v.strip()
        if "@" not in v:
            raise ValueError("admin_email must be a valid email address")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and self.is_sqlite:
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or switch to PostgreSQL."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
