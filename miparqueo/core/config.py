# =============================================================================
# MIPARQUEO BACKEND - CORE CONFIGURATION MODULE
# =============================================================================
# File: core/config.py
# Description: Centralized configuration management using Pydantic Settings
#              Selects the database backend and tunes its connection pool
# =============================================================================

from typing import Literal, Optional, List
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    APPLICATION SETTINGS                                  │
    │  Type-safe configuration with automatic environment variable loading    │
    │  Supports: development, staging, production environments                │
    └─────────────────────────────────────────────────────────────────────────┘
    """

    # -------------------------------------------------------------------------
    # APPLICATION CORE
    # -------------------------------------------------------------------------
    app_name: str = "MiParqueo"
    app_version: str = "1.0.0"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # -------------------------------------------------------------------------
    # DATABASE CONFIGURATION
    # -------------------------------------------------------------------------
    db_type: Literal["sqlite", "postgresql"] = "sqlite"

    # SQLite (embedded, single file)
    sqlite_path: str = "./data/miparqueo.db"

    # PostgreSQL: a full connection string wins over the discrete fields
    database_url: Optional[str] = None
    pg_host: Optional[str] = None
    pg_port: int = 5432
    pg_user: Optional[str] = None
    pg_password: Optional[str] = None
    pg_database: Optional[str] = None

    # Connection Pool
    db_pool_size: int = Field(default=20, ge=1)
    db_connect_timeout: float = Field(default=10.0, gt=0)
    db_idle_timeout: int = Field(default=30, ge=1)

    # Initialization gate
    db_init_timeout: float = Field(default=5.0, gt=0)
    db_eager_init: Optional[bool] = None

    # -------------------------------------------------------------------------
    # CORS CONFIGURATION
    # -------------------------------------------------------------------------
    cors_origins: str = "*"

    # -------------------------------------------------------------------------
    # LOGGING
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # -------------------------------------------------------------------------
    # COMPUTED PROPERTIES
    # -------------------------------------------------------------------------

    @computed_field
    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from comma-separated string to list.
        """
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    @computed_field
    @property
    def eager_db_init(self) -> bool:
        """
        Whether the database is initialized at startup instead of on the
        first API request.

        Defaults to eager everywhere except production, where serverless
        deployments only pay the connection cost when a request arrives.
        """
        if self.db_eager_init is not None:
            return self.db_eager_init
        return not self.is_production

    # -------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIG
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Retrieve cached settings instance for application-wide configuration access.

    Returns:
        Settings: Validated configuration instance

    Usage:
        from miparqueo.core.config import get_settings
        settings = get_settings()
        print(settings.db_type)
    """
    return Settings()


# =============================================================================
# MODULE EXPORTS
# =============================================================================
settings = get_settings()
