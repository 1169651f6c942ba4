"""Settings for the short links service.

Values come from the environment, then a ``.env`` file, then the defaults
below. Import the ``settings`` singleton rather than instantiating
``Settings`` again.
"""

from __future__ import annotations

import string
from typing import Optional, List, Union, Any
from enum import Enum

from pydantic import field_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Service configuration.

    Names are matched case-insensitively against environment variables;
    unknown variables are ignored.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT

    APP_NAME: str = "Short Links"
    APP_VERSION: str = "1.0"
    APP_DESCRIPTION: str = "Create short links, redirect visitors and count clicks"

    # Public origin that short codes are appended to
    BASE_URL: str = "http://localhost:8000"
    API_PREFIX: str = "/api"
    DEBUG: bool = False
    CORS_ORIGINS: Union[List[str], str] = ["*"]

    # Generated codes
    CODE_LENGTH: int = 6
    CODE_CHARS: str = string.ascii_letters + string.digits
    CODE_GENERATION_ATTEMPTS: int = 5

    # Upper bound (and default) for GET /api/links page size
    LIST_LIMIT_MAX: int = 1000

    # Database. DATABASE_URL wins over the POSTGRES_* parts when set
    DATABASE_URL: Optional[str] = None
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "short_links"
    POSTGRES_POOL_SIZE: int = 20
    POSTGRES_POOL_MAX_OVERFLOW: int = 10
    POSTGRES_POOL_TIMEOUT: int = 30
    POSTGRES_POOL_RECYCLE: int = 300
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILENAME: str = "app.log"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "7 days"
    LOG_FORMAT: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}"
    LOG_JSON: bool = True
    REQUEST_LOGGING_ENABLED: bool = True
    VISIT_LOGGING_ENABLED: bool = True

    @field_validator("DATABASE_URL", mode="before")
    def blank_database_url_is_unset(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("CODE_LENGTH")
    def code_length_in_range(cls, v: int) -> int:
        if not 6 <= v <= 8:
            raise ValueError("CODE_LENGTH must be between 6 and 8")
        return v

    @field_validator("CODE_CHARS")
    def code_chars_alphanumeric(cls, v: str) -> str:
        """Generated codes must pass the same check as custom ones."""
        if not v or not set(v) <= set(string.ascii_letters + string.digits):
            raise ValueError("CODE_CHARS must be a non-empty set of ASCII letters and digits")
        return v

    @field_validator("CORS_ORIGINS")
    def split_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Accept a comma-separated string as well as a list."""
        if not isinstance(v, str):
            return v
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    @computed_field
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """Async SQLAlchemy URL for the configured database."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()
