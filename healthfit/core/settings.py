# ==============================================================================
# SETTINGS CONFIGURATION - Environment Management
# ==============================================================================
# Pydantic Settings for type-safe environment variable management
# ==============================================================================

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import List

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseType(str, Enum):
    """
    Supported storage backends.

    Attributes:
        SQLITE: File-based database for development/testing
        MONGODB: Document store for production deployments
    """
    SQLITE = "sqlite"
    MONGODB = "mongodb"


class Environment(str, Enum):
    """Application environment types."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application Settings Configuration.

    Values are read from environment variables and an optional `.env`
    file in the working directory.

    Example:
        >>> from healthfit.core.settings import settings
        >>> print(settings.API_PREFIX)
        '/api'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # --------------------------------------------------------------------------
    APP_NAME: str = Field(
        default="Health & Fitness API",
        description="Application display name"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application semantic version"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (docs, error detail)"
    )
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current deployment environment"
    )
    HOST: str = Field(
        default="0.0.0.0",
        description="Bind address for the development runner"
    )
    PORT: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Listen port for the development runner"
    )

    # --------------------------------------------------------------------------
    # API CONFIGURATION
    # --------------------------------------------------------------------------
    API_PREFIX: str = Field(
        default="/api",
        description="Route prefix for every resource"
    )
    API_TITLE: str = Field(
        default="Health & Fitness Records API",
        description="OpenAPI documentation title"
    )
    API_DESCRIPTION: str = Field(
        default="Generic CRUD and search over schema-described fitness records",
        description="OpenAPI documentation description"
    )

    # --------------------------------------------------------------------------
    # DATABASE SELECTION
    # --------------------------------------------------------------------------
    DATABASE_TYPE: DatabaseType = Field(
        default=DatabaseType.SQLITE,
        description="Active storage backend (sqlite, mongodb)"
    )
    SQLITE_URL: str = Field(
        default="sqlite:///./healthfit.db",
        description="SQLite database file path"
    )
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB: str = Field(
        default="healthfitness",
        description="MongoDB database name"
    )
    DB_POOL_SIZE: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Database connection pool size"
    )
    DB_POOL_TIMEOUT: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Connection pool timeout in seconds"
    )

    # --------------------------------------------------------------------------
    # CORS SETTINGS
    # --------------------------------------------------------------------------
    CORS_ORIGINS: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )

    # --------------------------------------------------------------------------
    # LOGGING CONFIGURATION
    # --------------------------------------------------------------------------
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    LOG_FORMAT: str = Field(
        default="text",
        pattern="^(text|json)$",
        description="Log format (json, text)"
    )
    REQUEST_LOGGING_ENABLED: bool = Field(
        default=True,
        description="Log every request with timing information"
    )

    # --------------------------------------------------------------------------
    # COMPUTED PROPERTIES
    # --------------------------------------------------------------------------
    @computed_field
    @property
    def sqlite_async_url(self) -> str:
        """
        Construct SQLite async connection URL.

        Returns:
            Async SQLite connection string with aiosqlite driver
        """
        if "aiosqlite" in self.SQLITE_URL:
            return self.SQLITE_URL
        return self.SQLITE_URL.replace("sqlite://", "sqlite+aiosqlite://")

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    # --------------------------------------------------------------------------
    # VALIDATORS
    # --------------------------------------------------------------------------
    @field_validator("API_PREFIX")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """Ensure a single leading slash and no trailing slash."""
        return "/" + v.strip("/") if v.strip("/") else ""

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list."""
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [origin.strip() for origin in v.split(",")]
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()


# Module-level settings instance for convenient imports
settings = get_settings()
