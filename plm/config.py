"""Application configuration using Pydantic Settings.

Reads configuration from environment variables with sensible defaults.
Database credentials should be provided via environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    environment: Literal["prod", "staging", "dev"] = Field(
        default="dev",
        description="Environment name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (echoes SQL)",
    )

    # =========================================================================
    # Database
    # =========================================================================
    db_user: str = Field(
        default="plm_user",
        description="Database user",
    )
    db_password: str = Field(
        default="plm_password",
        description="Database password",
    )
    db_name: str = Field(
        default="fashion_plm",
        description="Database name",
    )
    db_host: str = Field(
        default="localhost",
        description="Database host",
    )
    db_port: int = Field(
        default=5432,
        description="Database port",
    )
    database_url_override: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL, used verbatim when set (e.g. sqlite+aiosqlite:///plm.db)",
    )
    db_pool_size: int = Field(
        default=20,
        ge=1,
        description="Database connection pool size",
    )
    db_pool_max_overflow: int = Field(
        default=0,
        ge=0,
        description="Max overflow connections beyond pool size",
    )
    db_pool_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to wait for a pooled connection before failing",
    )
    db_isolation_level: Literal["READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE"] = Field(
        default="READ COMMITTED",
        description="Transaction isolation level for PostgreSQL connections",
    )
    db_serialization_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts for a transaction that hits a serialization failure or deadlock",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Build the async database URL.

        The override wins when set; otherwise a PostgreSQL asyncpg URL is built.
        """
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================================================================
    # Supplier workflow
    # =========================================================================
    default_currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="Currency used for offers that do not name one",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=True,
        description="Output logs as JSON outside dev",
    )
    audit_statements: bool = Field(
        default=True,
        description="Log every INSERT/UPDATE/DELETE statement as a db_audit event",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for convenience
settings = get_settings()
