"""Application configuration module.

This module contains settings for the URL shortener service,
loaded from environment variables with appropriate defaults.
"""

from __future__ import annotations

import logging
import string
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Directory of the importable package
PACKAGE_DIR = Path(__file__).resolve().parent.parent


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Service settings loaded from environment variables with defaults.

    Settings are loaded from environment variables, with fallback to
    values in a .env file if present, and finally to the defaults below.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment setting
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    # App Information
    APP_NAME: str = "URL Shortener"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # HTTP server
    LISTEN_HOST: str = "0.0.0.0"  # Interface uvicorn binds to
    PORT: int = 22222
    ADVERTISED_HOST: str = "127.0.0.1"  # Host shown in generated short URLs
    BASE_URL: Optional[str] = None  # Overrides "{ADVERTISED_HOST}:{PORT}" when set

    # Alias generation
    ALIAS_ALPHABET: str = string.ascii_lowercase + string.ascii_uppercase + string.digits
    ALIAS_LENGTH: int = 6
    ALIAS_MAX_ATTEMPTS: int = 10  # Upper bound for collision and conflict retries

    # Submitted URL policy
    URL_MAX_LENGTH: int = 2048
    URL_STRICT_VALIDATION: bool = False  # Require http(s) scheme and host once normalized

    # PostgreSQL settings
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "project"
    DATABASE_URL: Optional[str] = None  # Full SQLAlchemy URL, wins over POSTGRES_*
    PAIRS_TABLE_NAME: str = "short_pairs"

    # PostgreSQL pool settings
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True  # Run metadata.create_all on startup

    # Store resilience settings
    STORE_TIMEOUT_SECONDS: float = 3.0  # Per-operation timeout for store calls
    DB_CONNECT_RETRY_ATTEMPTS: int = 5  # Max number of connection attempts during startup
    DB_CONNECT_RETRY_INITIAL_DELAY: float = 1.0  # Initial delay in seconds
    DB_CONNECT_RETRY_MAX_DELAY: float = 30.0  # Maximum delay in seconds
    DB_CONNECT_RETRY_JITTER: float = 0.1  # Jitter factor (0.0-1.0) added to backoff

    # Logging configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{line} | {message}"
    LOG_JSON: bool = False
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    REQUEST_LOGGING_ENABLED: bool = True

    # Pages
    TEMPLATES_DIR: str = str(PACKAGE_DIR / "templates")

    # Validators
    @field_validator("BASE_URL", "DATABASE_URL", mode="before")
    def empty_string_to_none(cls, v: Any) -> Optional[str]:
        """Treat empty environment values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("BASE_URL")
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else v

    @field_validator("ALIAS_ALPHABET")
    def validate_alphabet(cls, v: str) -> str:
        if not v:
            raise ValueError("ALIAS_ALPHABET must not be empty")
        if len(set(v)) != len(v):
            raise ValueError("ALIAS_ALPHABET must not contain duplicate characters")
        if "/" in v or any(ch.isspace() for ch in v):
            raise ValueError("ALIAS_ALPHABET must not contain '/' or whitespace")
        if "_" in v:
            # Paths starting with an underscore are reserved for service routes
            raise ValueError("ALIAS_ALPHABET must not contain '_'")
        return v

    @field_validator("ALIAS_LENGTH", "ALIAS_MAX_ATTEMPTS", "URL_MAX_LENGTH")
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("STORE_TIMEOUT_SECONDS")
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("STORE_TIMEOUT_SECONDS must be positive")
        return v

    # Computed fields
    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Construct the SQLAlchemy database URI from settings or use override."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @computed_field
    def SHORT_URL_PREFIX(self) -> str:
        """Prefix prepended to an alias to form the advertised short URL."""
        if self.BASE_URL:
            return self.BASE_URL
        return f"{self.ADVERTISED_HOST}:{self.PORT}"


# Create a singleton instance of the settings
settings = Settings()
